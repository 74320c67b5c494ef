# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service error taxonomy.
Raised by services, translated to HTTP responses by the handler in main.py.
"""


class ServiceError(Exception):
    """Base class — carries the caller-facing message and HTTP status."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = 400
    default_message = "Invalid request body"


class DuplicateEmailError(ServiceError):
    status_code = 400
    default_message = "User already exists"


class EngineerNotAssignedError(ServiceError):
    status_code = 400
    default_message = "Engineer is not assigned to this project"


class MissingTokenError(ServiceError):
    status_code = 401
    default_message = "No Token Provided!"


class InvalidCredentialsError(ServiceError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidTokenError(ServiceError):
    status_code = 403
    default_message = "Invalid Token!"


class ForbiddenError(ServiceError):
    status_code = 403
    default_message = "Unauthorized"


class NotFoundError(ServiceError):
    status_code = 404
    default_message = "User not found"


class NotFoundOrUnauthorizedError(ServiceError):
    """Project lookups answer 404 whether the record is missing or foreign."""

    status_code = 404
    default_message = "Project not found or unauthorized"


class ProjectNotFoundError(NotFoundOrUnauthorizedError):
    pass


class ProjectAccessDeniedError(NotFoundOrUnauthorizedError):
    pass


class InternalError(ServiceError):
    status_code = 500
