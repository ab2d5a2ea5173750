"""
Registry Errors

Every rejected registry operation raises one of these. The numeric codes
are stable: other ledgers branch on them, so never renumber.

Raising inside a service method also aborts its ``transaction.atomic``
block, so a rejected operation never leaves partial writes behind.
"""

from enum import IntEnum

from rest_framework import status


class RegistryErrorCode(IntEnum):
    UNAUTHORIZED = 100
    ALREADY_REGISTERED = 101
    INVALID_DETAILS = 102
    NOT_FOUND = 103
    INVALID_CERTIFICATION = 104  # reserved
    MAX_COLLABORATORS = 105  # reserved
    INVALID_PERCENTAGE = 106
    PAUSED = 107


class RegistryError(Exception):
    """Base class for all registry operation failures."""

    code = None
    kind = 'RegistryError'
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = 'Registry operation failed'

    def __init__(self, message=None, fields=None):
        self.message = message or self.default_message
        self.fields = fields
        super().__init__(self.message)

    def to_dict(self):
        body = {
            'success': False,
            'error': self.kind,
            'code': int(self.code),
            'message': self.message,
        }
        if self.fields:
            body['fields'] = self.fields
        return body


class Unauthorized(RegistryError):
    code = RegistryErrorCode.UNAUTHORIZED
    kind = 'Unauthorized'
    http_status = status.HTTP_403_FORBIDDEN
    default_message = 'Caller is not allowed to perform this operation'


class AlreadyRegistered(RegistryError):
    code = RegistryErrorCode.ALREADY_REGISTERED
    kind = 'AlreadyRegistered'
    http_status = status.HTTP_409_CONFLICT
    default_message = 'Record already exists'


class InvalidDetails(RegistryError):
    code = RegistryErrorCode.INVALID_DETAILS
    kind = 'InvalidDetails'
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid details'


class HistoryFull(InvalidDetails):
    """The farm's audit history has reached MAX_HISTORY_ENTRIES."""

    default_message = 'Farm history is full'


class NotFound(RegistryError):
    code = RegistryErrorCode.NOT_FOUND
    kind = 'NotFound'
    http_status = status.HTTP_404_NOT_FOUND
    default_message = 'Record not found'


class InvalidCertification(RegistryError):
    code = RegistryErrorCode.INVALID_CERTIFICATION
    kind = 'InvalidCertification'
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = 'Invalid certification'


class MaxCollaborators(RegistryError):
    code = RegistryErrorCode.MAX_COLLABORATORS
    kind = 'MaxCollaborators'
    http_status = status.HTTP_409_CONFLICT
    default_message = 'Collaborator limit reached'


class InvalidPercentage(RegistryError):
    code = RegistryErrorCode.INVALID_PERCENTAGE
    kind = 'InvalidPercentage'
    http_status = status.HTTP_400_BAD_REQUEST
    default_message = 'Percentage must be between 0 and 100'


class Paused(RegistryError):
    code = RegistryErrorCode.PAUSED
    kind = 'Paused'
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = 'Registry is paused'

