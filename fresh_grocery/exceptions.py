"""Domain-specific exceptions with user-ready messages."""


class ConfigurationError(Exception):
    """Raised when application configuration is invalid."""

    pass


class BusinessLogicException(Exception):
    """Base exception class for business logic errors."""

    def __init__(self, message: str, error_code: str) -> None:
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class RecordNotFoundException(BusinessLogicException):
    """Exception raised when a requested record is not found."""

    def __init__(self, resource_type: str, identifier: str | int) -> None:
        message = f"{resource_type} {identifier} was not found"
        super().__init__(message, error_code="RECORD_NOT_FOUND")


class ResourceConflictException(BusinessLogicException):
    """Exception raised when attempting to create a resource that already exists."""

    def __init__(self, resource_type: str, identifier: str | int) -> None:
        message = f"A {resource_type.lower()} with {identifier} already exists"
        super().__init__(message, error_code="RESOURCE_CONFLICT")


class InvalidOperationException(BusinessLogicException):
    """Exception raised when an operation cannot be performed due to business rules."""

    def __init__(self, operation: str, cause: str) -> None:
        self.operation = operation
        self.cause = cause
        message = f"Cannot {operation} because {cause}"
        super().__init__(message, error_code="INVALID_OPERATION")


class InvalidStatusTransitionException(InvalidOperationException):
    """Exception raised when a status change is not allowed from the current status."""

    def __init__(self, resource_type: str, current: str, requested: str) -> None:
        self.resource_type = resource_type
        self.current = current
        self.requested = requested
        super().__init__(
            f"move {resource_type.lower()} to '{requested}'",
            f"it is currently '{current}'",
        )
        self.error_code = "INVALID_STATUS_TRANSITION"


class DependencyException(BusinessLogicException):
    """Exception raised when a resource cannot be deleted due to dependencies."""

    def __init__(self, resource_type: str, identifier: str | int, dependency_desc: str) -> None:
        message = f"Cannot delete {resource_type} {identifier} because {dependency_desc}"
        super().__init__(message, error_code="DEPENDENCY_IN_USE")


class AuthenticationException(BusinessLogicException):
    """Exception raised when authentication fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="AUTHENTICATION_REQUIRED")


class AuthorizationException(BusinessLogicException):
    """Exception raised when the authenticated user lacks required permissions."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="AUTHORIZATION_FAILED")


class ValidationException(BusinessLogicException):
    """Exception raised for request validation failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_code="VALIDATION_FAILED")
