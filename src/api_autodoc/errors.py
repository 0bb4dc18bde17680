"""Error types and classification for the autodoc service."""

from sqlalchemy.exc import SQLAlchemyError

DATABASE = "database"
PROCESSING = "processing"

MESSAGES = {
    DATABASE: "Database operation failed",
    PROCESSING: "Documentation operation failed",
}


class AutodocError(Exception):
    """Base class for errors raised by the service."""


class GenerationError(AutodocError):
    """The model call failed or returned output that does not validate."""


class ConfigurationError(AutodocError):
    """A required setting is missing."""


def classify_error(exc: BaseException) -> str:
    """Return ``"database"`` or ``"processing"`` for a failed request.

    Database drivers attach a ``code`` to their errors; anything else counts
    as a processing failure.
    """
    if isinstance(exc, SQLAlchemyError) or getattr(exc, "code", None) is not None:
        return DATABASE
    return PROCESSING


def error_message(exc: BaseException) -> str:
    return MESSAGES[classify_error(exc)]
