"""Validation utilities for the OutfitAI application.

Small checks shared by the image helpers and the HTTP layer. Each returns a
``(is_valid, error_message)`` tuple so callers decide which exception to raise.
"""

from typing import List, Optional

ValidationResult = tuple[bool, Optional[str]]

DEFAULT_ALLOWED_TYPES = ['image/jpeg', 'image/png', 'image/webp']


def validate_image_format(
    mime_type: str,
    allowed_types: Optional[List[str]] = None
) -> ValidationResult:
    """Validate image MIME type."""
    if allowed_types is None:
        allowed_types = DEFAULT_ALLOWED_TYPES

    if mime_type not in allowed_types:
        return False, f"Unsupported image format. Allowed: {', '.join(allowed_types)}"

    return True, None


def validate_image_size(
    size: int,
    max_size: int = 10 * 1024 * 1024  # 10MB default
) -> ValidationResult:
    """Validate image file size."""
    if size == 0:
        return False, "Image is empty"

    if size > max_size:
        return False, f"Image too large. Maximum size: {max_size/1024/1024:g}MB"

    return True, None


def validate_non_blank(value: str) -> ValidationResult:
    """Validate that a model-produced string carries content."""
    if not value or not value.strip():
        return False, "Must not be blank"

    return True, None
