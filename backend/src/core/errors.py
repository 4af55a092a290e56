"""Domain errors mapped to HTTP responses by the exception handlers in api.main."""


class BlogPlatformError(Exception):
    """Base class for errors that carry their own HTTP status."""

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(BlogPlatformError):
    """Raised when a referenced blog or user does not exist."""

    status_code = 404


class ForbiddenError(BlogPlatformError):
    """Raised when the authenticated caller does not own the resource."""

    status_code = 403
