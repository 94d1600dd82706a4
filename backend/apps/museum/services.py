"""
Custody services.
Each command locks the rows it touches, runs the model transitions, saves
the custody fields and appends LocationEvent rows to the ledger.
Commands return (entity, events_list).
"""
import logging

from django.db import transaction
from rest_framework.exceptions import NotFound

from apps.museum.enums import (
    LocationEventType, ROOM_KEYWORD_RESERVES, ROOM_KEYWORD_OFF_EXPO,
)
from apps.museum.exceptions import (
    CommandValidationError, ExpositionReleaseError,
)
from apps.museum.models import (
    Artefact, Exposition, LocationEvent, reserves_location,
)

logger = logging.getLogger(__name__)


# Fields written by the state machine
CUSTODY_FIELDS = [
    'location', 'on_permanent_display', 'in_exposition',
    'exposition', 'admitted_at', 'updated_at',
]

# Fields the update endpoint may change; identification and custody stay put
DESCRIPTIVE_FIELDS = [
    'name', 'object_description', 'object_type', 'material',
    'cultural_phase', 'period_description', 'start_year', 'end_year',
    'date_of_entry', 'image_url', 'culture',
]


# ══════════════════════════════════════════════════
# HELPERS
# ══════════════════════════════════════════════════

def _actor(user):
    """Ledger author: a username, or the SYSTEM:<name> tag of a task."""
    if isinstance(user, str):
        return user
    if user is None or not user.is_authenticated:
        return 'ANONYMOUS'
    return user.get_username()


def _record_move(artefact, event_type, from_location, user,
                 exposition=None, to_location=None):
    """Append a LocationEvent for a move that was just saved."""
    return LocationEvent.objects.create(
        artefact=artefact,
        event_type=event_type,
        from_location=from_location or '',
        to_location=to_location or artefact.location,
        exposition=exposition,
        emitted_by=_actor(user),
    )


def _lock_artefact(artefact):
    return Artefact.objects.select_for_update().get(pk=artefact.pk)


def _lock_exposition(exposition):
    return Exposition.objects.select_for_update().get(pk=exposition.pk)


# ══════════════════════════════════════════════════
# ARTEFACT CRUD
# ══════════════════════════════════════════════════

def create_artefact(data):
    """New artefacts start off display, in the reserves unless a location is given."""
    identification = data.get('identification')
    if not identification:
        raise CommandValidationError('An inventory identification is required.')
    if Artefact.objects.filter(identification=identification).exists():
        raise CommandValidationError(
            f'Artefact {identification} already exists.'
        )

    fields = {k: v for k, v in data.items() if k in DESCRIPTIVE_FIELDS}
    artefact = Artefact.objects.create(
        identification=identification,
        location=data.get('location') or reserves_location(),
        **fields,
    )
    logger.info(f"Artefact {identification} registered at {artefact.location}")
    return artefact


def update_artefact(artefact, data):
    with transaction.atomic():
        artefact = _lock_artefact(artefact)
        changed = []
        for field in DESCRIPTIVE_FIELDS:
            if field in data:
                setattr(artefact, field, data[field])
                changed.append(field)
        if changed:
            artefact.save(update_fields=changed + ['updated_at'])
    return artefact


def delete_artefact(artefact):
    """An artefact on loan must be released before it can be deleted."""
    with transaction.atomic():
        artefact = _lock_artefact(artefact)
        artefact.check_not_on_loan()
        identification = artefact.identification
        artefact.delete()
    logger.info(f"Artefact {identification} deleted")


# ══════════════════════════════════════════════════
# ARTEFACT MOVES
# ══════════════════════════════════════════════════

def move_artefact_to_room(artefact, room, user):
    with transaction.atomic():
        artefact = _lock_artefact(artefact)
        previous = artefact.location
        artefact.move_to_room(room)
        artefact.save(update_fields=CUSTODY_FIELDS)
        event = _record_move(artefact, LocationEventType.ROOM, previous, user)
    return artefact, [event]


def send_artefact_to_reserves(artefact, user, reserve_location=None):
    with transaction.atomic():
        artefact = _lock_artefact(artefact)
        previous = artefact.location
        artefact.move_to_reserves(reserve_location)
        artefact.save(update_fields=CUSTODY_FIELDS)
        event = _record_move(artefact, LocationEventType.RESERVES, previous, user)
    return artefact, [event]


def release_artefact(artefact, user, destination=None):
    """
    Take a single artefact out of its exposition. Without a destination it
    goes to the reserves; with one it is relocated straight to that room.
    """
    with transaction.atomic():
        artefact = _lock_artefact(artefact)
        previous = artefact.location
        exposition = artefact.exposition
        artefact.release_from_exposition()
        events = []
        if destination:
            released_to = artefact.location
            artefact.relocate(destination)
            artefact.save(update_fields=CUSTODY_FIELDS)
            events.append(_record_move(
                artefact, LocationEventType.RELEASED, previous, user,
                exposition=exposition, to_location=released_to))
            events.append(_record_move(
                artefact, LocationEventType.RELOCATED, released_to, user))
        else:
            artefact.save(update_fields=CUSTODY_FIELDS)
            events.append(_record_move(
                artefact, LocationEventType.RELEASED, previous, user,
                exposition=exposition))
    return artefact, events


def change_artefact_location(artefact, room, user, destination=None):
    """
    PATCH dispatcher on the ``room`` value:
    'reserves' → reserves, 'off expo' → release, anything else → room code.
    """
    if room is None or not str(room).strip():
        raise CommandValidationError('The room parameter is required.')

    if room == ROOM_KEYWORD_RESERVES:
        return send_artefact_to_reserves(artefact, user)
    if room == ROOM_KEYWORD_OFF_EXPO:
        return release_artefact(artefact, user, destination=destination)
    return move_artefact_to_room(artefact, room, user)


# ══════════════════════════════════════════════════
# EXPOSITIONS
# ══════════════════════════════════════════════════

def create_exposition(data):
    exposition = Exposition.objects.create(**data)
    logger.info(f"Exposition {exposition.pk} '{exposition.title}' created")
    return exposition


def update_exposition(exposition, data, user=None):
    """
    Members carry the exposition title as their location, so a new title
    moves them too; each such move gets a RELOCATED ledger row.
    """
    with transaction.atomic():
        exposition = _lock_exposition(exposition)
        previous_title = exposition.title
        changed = []
        for field, value in data.items():
            setattr(exposition, field, value)
            changed.append(field)
        if changed:
            exposition.save(update_fields=changed + ['updated_at'])
        if 'title' in changed and exposition.title != previous_title:
            members = exposition.exposed_artefacts.select_for_update().order_by(
                'admitted_at', 'identification')
            for artefact in members:
                previous = artefact.location
                artefact.location = exposition.title
                artefact.save(update_fields=['location', 'updated_at'])
                _record_move(artefact, LocationEventType.RELOCATED, previous, user,
                             exposition=exposition)
    return exposition


def add_visitors(exposition, number_of_visitors):
    with transaction.atomic():
        exposition = _lock_exposition(exposition)
        exposition.add_visitors(number_of_visitors)
        exposition.save(update_fields=['visitor_count', 'updated_at'])
    return exposition


def admit_artefacts(exposition, identifiers, user):
    """
    Bulk admission, all-or-nothing. Unknown identifiers are rejected
    before anything moves.
    """
    if not identifiers:
        raise CommandValidationError('At least one artefact identifier is required.')

    with transaction.atomic():
        exposition = _lock_exposition(exposition)
        found = {
            artefact.identification: artefact
            for artefact in Artefact.objects.select_for_update().filter(
                identification__in=identifiers)
        }
        missing = [i for i in identifiers if i not in found]
        if missing:
            raise NotFound(f'Unknown artefacts: {", ".join(missing)}.')

        artefacts = [found[i] for i in identifiers]
        previous = {a.identification: a.location for a in artefacts}
        exposition.admit_artefacts(artefacts)

        events = []
        for artefact in artefacts:
            artefact.save(update_fields=CUSTODY_FIELDS)
            events.append(_record_move(
                artefact, LocationEventType.ADMITTED,
                previous[artefact.identification], user,
                exposition=exposition))

    logger.info(
        f"Exposition {exposition.pk}: admitted {len(artefacts)} artefact(s)"
    )
    return exposition, events


def _release_members(exposition, user):
    """
    Release every member of a locked exposition and save them.
    Returns (events, failure); failure is the ExpositionReleaseError for
    members that were not on loan, already detached, or None.
    Must run inside transaction.atomic().
    """
    members = list(
        exposition.exposed_artefacts.select_for_update()
        .order_by('admitted_at', 'identification')
    )
    previous = {a.identification: a.location for a in members}

    failure = None
    try:
        exposition.end_exposition(members)
    except ExpositionReleaseError as exc:
        failure = exc

    failed = set(failure.identifiers) if failure else set()
    events = []
    for artefact in members:
        artefact.save(update_fields=CUSTODY_FIELDS)
        if artefact.identification not in failed:
            events.append(_record_move(
                artefact, LocationEventType.RELEASED,
                previous[artefact.identification], user,
                exposition=exposition))
    return events, failure


def end_exposition(exposition, user):
    """
    Release every member. The cleared membership is committed even when
    some members were not on loan; the ExpositionReleaseError is raised
    after the commit.
    """
    with transaction.atomic():
        exposition = _lock_exposition(exposition)
        events, failure = _release_members(exposition, user)

    if failure is not None:
        logger.warning(
            f"Exposition {exposition.pk} ended with stale members: "
            f"{failure.identifiers}"
        )
        raise failure

    logger.info(
        f"Exposition {exposition.pk} ended, {len(events)} artefact(s) released"
    )
    return exposition, events


def delete_exposition(exposition, user):
    """
    Release the members and remove the exposition in one transaction.
    Stale members are detached like the others and only reported, so the
    delete always goes through. Returns (events, stale_identifiers).
    """
    with transaction.atomic():
        exposition = _lock_exposition(exposition)
        pk = exposition.pk
        events, failure = _release_members(exposition, user)
        exposition.delete()

    stale = failure.identifiers if failure else []
    if stale:
        logger.warning(f"Exposition {pk} deleted with stale members: {stale}")
    logger.info(f"Exposition {pk} deleted, {len(events)} artefact(s) released")
    return events, stale
