"""Project and user related exceptions."""

from .base import AppPermissionError, AuthenticationError, ConflictError, NotFoundError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project is not found."""

    def __init__(self, message: str = "Project not found"):
        super().__init__(message=message, error_code="PROJECT_NOT_FOUND")


class ProjectPermissionError(AppPermissionError):
    """Raised when user is not allowed to act on a project."""

    def __init__(self, message: str = "Access denied. You are not a member of this project"):
        super().__init__(message=message, error_code="PROJECT_PERMISSION_DENIED")


class DuplicateMemberError(ConflictError):
    """Raised when adding a user who already belongs to the project."""

    def __init__(self, message: str = "User is already a member of this project"):
        super().__init__(message=message, error_code="DUPLICATE_MEMBER")


class UserNotFoundError(NotFoundError):
    """Raised when a user is not found."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message=message, error_code="USER_NOT_FOUND")


class UserAlreadyExistsError(ConflictError):
    """Raised when registering an email that is already taken."""

    def __init__(self, message: str = "User already exists"):
        super().__init__(message=message, error_code="USER_ALREADY_EXISTS")


class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password do not match."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS")


class SelfDemotionError(ConflictError):
    """Raised when an admin tries to remove their own admin role."""

    def __init__(self, message: str = "You cannot remove your own admin role"):
        super().__init__(message=message, error_code="SELF_DEMOTION")
