"""Task, attachment and comment exceptions."""

from .base import AppPermissionError, NotFoundError, UpstreamUnavailableError, ValidationError


class TaskNotFoundError(NotFoundError):
    """Raised when a task is not found."""

    def __init__(self, message: str = "Task not found"):
        super().__init__(message=message, error_code="TASK_NOT_FOUND")


class TaskPermissionError(AppPermissionError):
    """Raised when user doesn't have access to a task's project."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(message=message, error_code="TASK_PERMISSION_DENIED")


class AttachmentNotFoundError(NotFoundError):
    """Raised when an attachment is not present on the task."""

    def __init__(self, message: str = "Attachment not found"):
        super().__init__(message=message, error_code="ATTACHMENT_NOT_FOUND")


class AttachmentValidationError(ValidationError):
    """Raised when an uploaded file is rejected before reaching storage."""

    def __init__(self, message: str = "Invalid attachment"):
        super().__init__(message=message, error_code="ATTACHMENT_VALIDATION_ERROR")


class StorageNotConfiguredError(UpstreamUnavailableError):
    """Raised when the blob store has no credentials configured."""

    def __init__(
        self,
        message: str = "File storage is not configured. Please set the R2 environment variables.",
    ):
        super().__init__(message=message, error_code="STORAGE_NOT_CONFIGURED")


class StorageUploadError(UpstreamUnavailableError):
    """Raised when the blob store rejects or fails an upload."""

    def __init__(self, message: str = "Failed to upload file"):
        super().__init__(message=message, error_code="STORAGE_UPLOAD_FAILED")


class CommentNotFoundError(NotFoundError):
    """Raised when a comment is not found."""

    def __init__(self, message: str = "Comment not found"):
        super().__init__(message=message, error_code="COMMENT_NOT_FOUND")


class CommentPermissionError(AppPermissionError):
    """Raised when user may not change a comment."""

    def __init__(self, message: str = "You can only edit your own comments"):
        super().__init__(message=message, error_code="COMMENT_PERMISSION_DENIED")
