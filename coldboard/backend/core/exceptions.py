"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ExternalServiceError(ApplicationError):
    """Raised when an external service call fails."""

    def __init__(
        self,
        message: str = "External service error",
        status_code: int | None = None,
        server_message: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.server_message = server_message
        super().__init__(message, code="SYS_EXTERNAL_SERVICE_ERROR")


class MalformedResponseError(ExternalServiceError):
    """Raised when an external service answers with an unexpected payload."""

    def __init__(self, message: str = "Malformed response from notes API") -> None:
        super().__init__(message)
        self.code = "SYS_MALFORMED_RESPONSE"
