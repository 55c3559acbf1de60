"""Domain exceptions shared by the tool surface, the job runner and providers."""


class ImageServiceError(Exception):
    """Base exception for the image generation service."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when tool arguments are malformed or empty."""

    def __init__(self, message: str = "Validation error"):
        super().__init__(message, 400)


class ConfigurationError(ImageServiceError):
    """Raised when a provider credential or setting is missing."""

    def __init__(self, message: str = "Configuration error"):
        super().__init__(message, 500)


class ProviderError(ImageServiceError):
    """Raised on a non-2xx provider response or an unusable provider payload."""

    def __init__(self, message: str = "Provider error", status_code: int = 502):
        super().__init__(message, status_code)


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its time budget."""

    def __init__(self, message: str = "Provider request timed out"):
        super().__init__(message, 504)


class NotFoundError(ImageServiceError):
    """Raised for an unknown job id or a missing image file."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, 404)


class JobCancelledError(ImageServiceError):
    """Raised inside a runner when its cancellation token is set."""

    def __init__(self, message: str = "Job cancelled"):
        super().__init__(message, 409)
