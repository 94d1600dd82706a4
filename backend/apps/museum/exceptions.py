"""
Typed exceptions for artefact custody.
Raised by the model transitions and the services layer; DRF turns them
into responses with the status codes below.
"""
from rest_framework.exceptions import APIException


class CommandValidationError(APIException):
    """Input invalid or precondition not met → 400 Bad Request."""
    status_code = 400
    default_detail = 'Command validation failed.'
    default_code = 'command_validation_error'


class InvalidLocationError(APIException):
    """Room code rejected by the room validation hook → 400 Bad Request."""
    status_code = 400
    default_detail = 'Invalid location.'
    default_code = 'invalid_location'


class LoanConflictError(APIException):
    """Artefact is on loan to an exposition → 409 Conflict."""
    status_code = 409
    default_detail = 'Artefact is currently on loan to an exposition.'
    default_code = 'loan_conflict'

    def __init__(self, identification, detail=None):
        self.identification = identification
        if detail is None:
            detail = f'Artefact {identification} is currently on loan to an exposition.'
        super().__init__(detail)


class NotOnLoanError(APIException):
    """Release attempted on an artefact that is not on loan → 409 Conflict."""
    status_code = 409
    default_detail = 'Artefact is not on loan to an exposition.'
    default_code = 'not_on_loan'

    def __init__(self, identification, detail=None):
        self.identification = identification
        if detail is None:
            detail = f'Artefact {identification} is not on loan to an exposition.'
        super().__init__(detail)


class ExpositionReleaseError(APIException):
    """
    Raised once by ``end_exposition`` after every member was processed,
    listing the members that were not actually on loan → 409 Conflict.
    """
    status_code = 409
    default_detail = 'Some artefacts were not on loan to an exposition.'
    default_code = 'exposition_release_failed'

    def __init__(self, identifiers):
        self.identifiers = list(identifiers)
        super().__init__({
            'detail': (
                'These artefacts were not on loan to an exposition: '
                + ', '.join(self.identifiers)
            ),
            'identifiers': self.identifiers,
        })
