from django.db import models


# --- Artefact custody ---

class CustodyState(models.TextChoices):
    ROOM = 'ROOM', 'Permanent display'
    RESERVES = 'RESERVES', 'Reserves'
    EXPOSITION = 'EXPOSITION', 'On loan to an exposition'


# --- LocationEvent enums ---

class LocationEventType(models.TextChoices):
    ROOM = 'ROOM', 'Moved to room'
    RESERVES = 'RESERVES', 'Sent to reserves'
    ADMITTED = 'ADMITTED', 'Admitted to exposition'
    RELEASED = 'RELEASED', 'Released from exposition'
    RELOCATED = 'RELOCATED', 'Relocated'


# Values of the ``room`` parameter that are not room codes
ROOM_KEYWORD_RESERVES = 'reserves'
ROOM_KEYWORD_OFF_EXPO = 'off expo'
