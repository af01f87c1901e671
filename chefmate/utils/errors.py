"""Error taxonomy for ChefMate.

Each error carries the HTTP status it maps to, so the API layer can turn any
ChefMateError into a `{"error": message}` body with a single handler.
Built-in bases are kept (ValueError, LookupError, RuntimeError) so callers that
only know the standard hierarchy still catch them sensibly.
"""


class ChefMateError(Exception):
    """Base class for all ChefMate errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ChefMateError, ValueError):
    """Missing or malformed request fields (caller's fault)."""

    status_code = 400


class NotFoundError(ChefMateError, LookupError):
    """Requested record does not exist (expected for new users)."""

    status_code = 404


class ConfigurationError(ChefMateError, RuntimeError):
    """Provider credential or other required setting is missing (operator's fault)."""

    status_code = 500


class GenerationError(ChefMateError, RuntimeError):
    """Provider call failed, timed out, or returned no usable content."""

    status_code = 500


class StoreError(ChefMateError, RuntimeError):
    """Underlying persistence failure."""

    status_code = 500


class ConversationBusyError(ChefMateError, RuntimeError):
    """A recipe turn is already pending for this user."""

    status_code = 409
