import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from apps.core.models import TimestampMixin, AppendOnlyModel
from .enums import CustodyState, LocationEventType
from .exceptions import (
    LoanConflictError, NotOnLoanError, ExpositionReleaseError,
)
from .validators import validate_room_code


DEFAULT_RESERVES_LOCATION = 'In reserves'


def reserves_location():
    """Location marker written when an artefact goes back to the reserves."""
    return getattr(settings, 'MUSEUM_RESERVES_LOCATION', DEFAULT_RESERVES_LOCATION)


# ──────────────────────────────────────────────────
# Culture
# ──────────────────────────────────────────────────

class Culture(TimestampMixin):
    """A historical culture artefacts can be attributed to."""
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    period_description = models.CharField(
        max_length=255, blank=True,
        help_text='e.g. "first half of 2nd century BC"')
    culture_map = models.CharField(max_length=500, blank=True,
                                   help_text='Link to a map of the territory')
    start_year = models.IntegerField(blank=True, null=True)
    end_year = models.IntegerField(blank=True, null=True)

    class Meta:
        verbose_name = 'Culture'
        verbose_name_plural = 'Cultures'
        ordering = ['start_year', 'name']

    def __str__(self):
        return self.name


# ──────────────────────────────────────────────────
# Exposition
# ──────────────────────────────────────────────────

class Exposition(TimestampMixin):
    """
    A temporary exposition. Its members are the artefacts whose
    ``exposition`` handle points at it; the exposition keeps no list of
    its own.
    """
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    image_url = models.CharField(max_length=500, blank=True)
    visitor_count = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name = 'Exposition'
        verbose_name_plural = 'Expositions'
        ordering = ['-start_date', 'title']

    def __str__(self):
        return self.title

    @property
    def members(self):
        """Artefacts currently on loan to this exposition, in admission order."""
        if self.pk is None:
            return []
        return list(self.exposed_artefacts.order_by('admitted_at', 'identification'))

    def is_active(self, today=None):
        today = today or timezone.localdate()
        return self.end_date is None or self.end_date >= today

    def add_visitors(self, number_of_visitors):
        if number_of_visitors > 0:
            self.visitor_count += number_of_visitors

    def admit_artefact(self, artefact):
        artefact.admit_to_exposition(self)
        return artefact

    def admit_artefacts(self, artefacts):
        """
        All-or-nothing admission: every artefact is checked before any of
        them is touched. An artefact listed twice conflicts with itself.
        """
        if artefacts is None:
            return []

        seen = set()
        for artefact in artefacts:
            if artefact.identification in seen:
                raise LoanConflictError(artefact.identification)
            artefact.check_not_on_loan()
            seen.add(artefact.identification)

        return [self.admit_artefact(artefact) for artefact in artefacts]

    def end_exposition(self, members=None):
        """
        Release every member back to the reserves.

        Members that turn out not to be on loan are detached as well, so the
        membership is always empty afterwards; their identifiers are then
        reported together in a single ExpositionReleaseError.
        Returns the processed members.
        """
        if members is None:
            members = self.members
        if not members:
            return []

        problems = []
        for artefact in members:
            try:
                artefact.release_from_exposition()
            except NotOnLoanError:
                problems.append(artefact.identification)
                artefact.detach_from_exposition()

        if problems:
            raise ExpositionReleaseError(problems)
        return members


# ──────────────────────────────────────────────────
# Artefact
# ──────────────────────────────────────────────────

class Artefact(TimestampMixin):
    """
    A museum object, identified by its inventory code.
    ``location`` holds a room code, an exposition title or a place in the
    reserves. The transition methods only change fields in memory; the
    caller saves.
    """
    identification = models.CharField(primary_key=True, max_length=50,
                                      help_text='Inventory code, e.g. EG1000')
    name = models.CharField(max_length=255, blank=True)
    object_description = models.TextField(blank=True)
    object_type = models.CharField(max_length=100, blank=True,
                                   help_text='e.g. statue, amphora')
    material = models.CharField(max_length=100, blank=True)
    cultural_phase = models.CharField(max_length=255, blank=True)
    period_description = models.CharField(
        max_length=255, blank=True,
        help_text='e.g. "second half of 2nd century AD"')
    start_year = models.IntegerField(blank=True, null=True)
    end_year = models.IntegerField(blank=True, null=True)
    date_of_entry = models.DateField(blank=True, null=True)
    image_url = models.CharField(max_length=500, blank=True)
    culture = models.ForeignKey(Culture,
                                on_delete=models.SET_NULL,
                                blank=True, null=True,
                                related_name='artefacts')
    # --- Custody state ---
    location = models.CharField(max_length=255, blank=True)
    on_permanent_display = models.BooleanField(default=False)
    in_exposition = models.BooleanField(default=False)
    exposition = models.ForeignKey(Exposition,
                                   on_delete=models.PROTECT,
                                   blank=True, null=True,
                                   related_name='exposed_artefacts')
    admitted_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        verbose_name = 'Artefact'
        verbose_name_plural = 'Artefacts'
        ordering = ['identification']
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(in_exposition=True, on_permanent_display=True),
                name='artefact_single_custody_state',
            ),
        ]

    def __str__(self):
        return f"{self.identification} - {self.name}"

    @property
    def is_on_loan(self):
        return self.in_exposition

    @property
    def custody_state(self):
        if self.in_exposition:
            return CustodyState.EXPOSITION
        if self.on_permanent_display:
            return CustodyState.ROOM
        return CustodyState.RESERVES

    def check_not_on_loan(self):
        if self.in_exposition:
            raise LoanConflictError(self.identification)

    def move_to_room(self, room_id):
        self.check_not_on_loan()
        validate_room_code(room_id)
        self.location = room_id
        self.on_permanent_display = True

    def move_to_reserves(self, reserve_location=None):
        self.check_not_on_loan()
        self.on_permanent_display = False
        self.location = reserve_location or reserves_location()

    def admit_to_exposition(self, exposition):
        self.check_not_on_loan()
        self.on_permanent_display = False
        self.in_exposition = True
        self.location = exposition.title
        self.exposition = exposition
        self.admitted_at = timezone.now()

    def release_from_exposition(self):
        if not self.in_exposition:
            raise NotOnLoanError(self.identification)
        self.in_exposition = False
        self.location = reserves_location()
        self.detach_from_exposition()

    def detach_from_exposition(self):
        self.exposition = None
        self.admitted_at = None

    def relocate(self, room):
        """
        Move to a room without the loan check. The caller must release the
        artefact from its exposition first, otherwise both custody flags end
        up set and the save is refused by the database.
        """
        validate_room_code(room)
        self.on_permanent_display = True
        self.location = room


# ──────────────────────────────────────────────────
# LocationEvent (append-only custody ledger)
# ──────────────────────────────────────────────────

class LocationEvent(AppendOnlyModel):
    """One row per custody move of an artefact."""
    event_id = models.UUIDField(primary_key=True, default=uuid.uuid4,
                                editable=False)
    artefact = models.ForeignKey(Artefact,
                                 on_delete=models.CASCADE,
                                 related_name='location_events')
    event_type = models.CharField(max_length=20,
                                  choices=LocationEventType.choices)
    from_location = models.CharField(max_length=255, blank=True)
    to_location = models.CharField(max_length=255, blank=True)
    exposition = models.ForeignKey(Exposition,
                                   on_delete=models.SET_NULL,
                                   blank=True, null=True,
                                   related_name='location_events')
    emitted_by = models.CharField(max_length=150,
                                  help_text='username, or SYSTEM:<task>')

    class Meta:
        verbose_name = 'Location Event'
        verbose_name_plural = 'Location Events'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['artefact', 'created_at'],
                         name='idx_locevent_artefact'),
        ]

    def __str__(self):
        return f"{self.artefact_id} {self.event_type}: {self.from_location} → {self.to_location}"
