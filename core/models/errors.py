"""Exception types raised by the AMI workflow."""

from typing import Optional


class AMIWorkflowError(Exception):
    """Base exception for AMI workflow operations."""

    pass


class ValidationError(AMIWorkflowError, ValueError):
    """Raised when the workflow input is missing or malformed."""

    pass


class ConfigurationError(AMIWorkflowError, ValueError):
    """Raised when configuration values are invalid."""

    pass


class WorkflowTimeout(AMIWorkflowError, TimeoutError):
    """Raised when the time budget runs out while waiting."""

    def __init__(self, subject: str, message: Optional[str] = None):
        self.subject = subject
        super().__init__(message or f"Timeout waiting for {subject}")


class ImageCreationFailed(AMIWorkflowError):
    """Raised when EC2 reports the image in the failed state."""

    def __init__(self, image_id: str):
        self.image_id = image_id
        super().__init__(f"AMI creation failed for image {image_id}")


class ProviderError(AMIWorkflowError):
    """Raised when EC2 rejects or fails a request."""

    def __init__(
        self,
        operation: str,
        message: str,
        error_code: Optional[str] = None,
    ):
        self.operation = operation
        self.error_code = error_code
        self.message = message
        if error_code:
            super().__init__(f"{operation} failed ({error_code}): {message}")
        else:
            super().__init__(f"{operation} failed: {message}")
