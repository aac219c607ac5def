"""Error taxonomy for link allocation and redirect accounting.

Every error carries the HTTP status it maps to and a client-facing message.
The FastAPI exception handlers in ``tinylink.main`` render them as
``{"error": message, "error_type": error_type}``.

::
    TinyLinkError
    ├─ AllocationError
    │  ├─ InvalidTargetUrl      (400)
    │  ├─ InvalidCodeFormat     (400)
    │  ├─ CodeAlreadyExists     (409)
    │  └─ AllocationExhausted   (500)
    └─ CodeNotFound             (404)
"""

__all__ = [
    "TinyLinkError",
    "AllocationError",
    "InvalidTargetUrl",
    "InvalidCodeFormat",
    "CodeAlreadyExists",
    "AllocationExhausted",
    "CodeNotFound",
]


class TinyLinkError(Exception):
    """Base class for errors that map onto a client-visible response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def error_type(self) -> str:
        return type(self).__name__


class AllocationError(TinyLinkError):
    """Raised when a new link cannot be created."""


class InvalidTargetUrl(AllocationError):
    status_code = 400
    default_message = "Invalid URL provided"


class InvalidCodeFormat(AllocationError):
    status_code = 400
    default_message = "Code must be 6-8 alphanumeric characters"


class CodeAlreadyExists(AllocationError):
    status_code = 409
    default_message = "Code already exists"

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        super().__init__(message)


class AllocationExhausted(AllocationError):
    status_code = 500
    default_message = "Failed to generate unique code"

    def __init__(self, attempts: int, message: str | None = None) -> None:
        self.attempts = attempts
        super().__init__(message)


class CodeNotFound(TinyLinkError):
    status_code = 404
    default_message = "Link not found"

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        super().__init__(message)
