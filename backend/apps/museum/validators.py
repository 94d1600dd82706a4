"""
Room validation hook.

Room codes are free text. No room registry exists yet, so the default
validator only rejects blank codes. Point ``MUSEUM_ROOM_VALIDATOR`` at a
callable ``validator(room)`` raising ``InvalidLocationError`` to plug in a
real check without touching the state machine.
"""
from django.conf import settings
from django.utils.module_loading import import_string

from apps.museum.exceptions import InvalidLocationError


def _load_validator():
    path = getattr(settings, 'MUSEUM_ROOM_VALIDATOR', None)
    if not path:
        return None
    return import_string(path)


def validate_room_code(room):
    if room is None or not str(room).strip():
        raise InvalidLocationError('A room code is required.')

    validator = _load_validator()
    if validator is not None:
        validator(room)
