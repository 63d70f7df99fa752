# verbico/services/exceptions.py
"""
Shared exception types across the translation and speech services.

Kept free of third-party imports so every layer (bridges, client wrappers,
UI) can depend on it.
"""

# User-facing message for any translation failure
TRANSLATION_FAILED_MESSAGE = "Failed to translate text. Please try again."


class VerbicoError(Exception):
    """Base class for Verbico errors."""

    pass


class TranslationError(VerbicoError):
    """Raised when a translation cannot be produced."""

    pass


class TransportError(TranslationError):
    """Network failure or non-200 reply from an HTTP peer."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamShapeError(TranslationError):
    """Upstream reply could not be decoded into the expected payload."""

    pass


class ValidationError(VerbicoError):
    """A detected language code is not in the supported catalog."""

    pass


class CapabilityError(VerbicoError):
    """The platform lacks a speech capability (recognition or synthesis)."""

    pass
