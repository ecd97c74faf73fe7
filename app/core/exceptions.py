"""
Domain errors raised by the service layer.

Every error carries the HTTP status and machine-readable code used when the
API renders it, so routes never translate them by hand.
"""

from fastapi import status


class TechMeetError(Exception):
    """Base class for all domain errors"""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "error"
    default_message = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(TechMeetError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "not_found"

    def __init__(self, resource: str = "Resource", message: str | None = None):
        self.resource = resource
        super().__init__(message or f"{resource} not found")


class EventNotFoundError(NotFoundError):
    error_code = "event_not_found"

    def __init__(self, message: str | None = None):
        super().__init__("Event", message)


class DuplicateEntityError(TechMeetError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "duplicate_entity"
    default_message = "Record already exists"


class DuplicateEmailError(DuplicateEntityError):
    error_code = "duplicate_email"
    default_message = "User with this email already exists"


class DuplicateRegistrationError(DuplicateEntityError):
    error_code = "duplicate_registration"
    default_message = "User is already registered for this event"


class CapacityExceededError(TechMeetError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "capacity_exceeded"
    default_message = "Capacity exceeded"


class EventFullError(CapacityExceededError):
    error_code = "event_full"
    default_message = "Event is full"


class InvalidCredentialsError(TechMeetError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "invalid_credentials"
    default_message = "Invalid email or password"


class LegacyAccountError(InvalidCredentialsError):
    """Account was created before passwords were stored"""

    error_code = "legacy_account"
    default_message = "Please contact support to reset your password"


class PermissionDeniedError(TechMeetError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "forbidden"
    default_message = "You do not have permission to perform this action"


class InvalidValueError(TechMeetError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    error_code = "invalid_value"
    default_message = "Invalid value"
