"""
Error taxonomy for conversion requests.

Every error carries the HTTP status it maps to and a message that is safe
to show to the client. Engine internals stay in the logs.
"""

from typing import Optional


class DocVerseError(Exception):
    """Base class for all DocVerse errors."""

    http_status: int = 500
    public_message: str = "An unexpected error occurred"
    # Client errors echo their message; server errors keep the generic one.
    expose_message: bool = False

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.public_message)
        if message and self.expose_message:
            self.public_message = message


class ConfigurationError(DocVerseError):
    """Cloud engine requested without credentials."""

    http_status = 503
    public_message = "Cloud PDF engine is not configured"


class InvalidInputError(DocVerseError):
    """Bad request: wrong file count, corrupt bytes, unsupported type."""

    http_status = 400
    public_message = "Invalid input"
    expose_message = True


class FileTooLargeError(InvalidInputError):
    http_status = 413
    public_message = "File too large"


class EngineError(DocVerseError):
    """An external engine failed."""

    public_message = "Processing failed"


class CloudEngineError(EngineError):
    """Any step of a cloud job failed."""

    def __init__(self, message: Optional[str] = None, step: Optional[str] = None):
        super().__init__(message)
        self.step = step


class LocalToolError(EngineError):
    """A local executable exited non-zero or produced no output."""

    def __init__(
        self,
        message: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ConversionFailedError(DocVerseError):
    """Uniform failure raised at the engine selection boundary."""

    public_message = "Processing failed"
