"""Exception hierarchy for the OutfitAI application.

``AppException`` carries the HTTP status and the user-facing ``detail`` that the
exception handler in ``outfitai.main`` renders. The internal reason stays in
``str(exc)`` for logs only.
"""

from typing import Optional

GENERIC_FAILURE_MESSAGE = (
    "Failed to generate outfit suggestions. The AI model might be unavailable "
    "or the image could not be processed. Please try again later."
)


class AppException(Exception):
    """Base application exception rendered as ``{"error": detail}``."""

    status_code: int = 500
    default_detail: str = "Internal server error"

    def __init__(self, message: str = "", detail: Optional[str] = None):
        super().__init__(message or self.default_detail)
        self.detail = detail or self.default_detail


class InvalidImageError(AppException):
    """Raised when an uploaded payload is not an acceptable raster image."""

    status_code = 422

    def __init__(self, message: str):
        # The reason is safe to show; it describes the caller's own upload.
        super().__init__(message, detail=message)


class PipelineError(AppException):
    """Base class for failures of the suggestion pipeline."""

    status_code = 502
    default_detail = GENERIC_FAILURE_MESSAGE


class UpstreamModelError(PipelineError):
    """The model endpoint returned an error, timed out or was unreachable."""


class SchemaValidationError(PipelineError):
    """Model output did not conform to the expected structured shape."""


class ImageGenerationError(PipelineError):
    """An image-generation call completed without a usable image."""


class NoSuggestionsError(PipelineError):
    """The recommendation stage produced no usable outfit suggestions."""
