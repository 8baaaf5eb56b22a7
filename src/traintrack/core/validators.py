"""Reusable validation utilities for input sanitization."""

import re


def validate_title(
    value: str,
    field_name: str = "Title",
    min_length: int = 1,
    max_length: int = 200,
) -> str:
    """
    Validate a free-text title (course or session name).

    Args:
        value: Text to validate
        field_name: Name for error messages
        min_length: Minimum length
        max_length: Maximum length

    Returns:
        Stripped and validated text

    Raises:
        ValueError: If validation fails
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")

    cleaned = value.strip()

    if len(cleaned) < min_length:
        raise ValueError(f"{field_name} must be at least {min_length} characters")

    if len(cleaned) > max_length:
        raise ValueError(f"{field_name} cannot exceed {max_length} characters")

    if re.search(r"[<>]", cleaned):
        raise ValueError(f"{field_name} cannot contain angle brackets")

    return cleaned


def sanitize_html(value: str | None) -> str | None:
    """
    Strip HTML tags from free text (descriptions, notes, reasons).

    Returns:
        Sanitized text or None if nothing is left
    """
    if not value:
        return None

    cleaned = re.sub(r"<[^>]+>", "", value).strip()
    return cleaned or None


def validate_email(value: str) -> str:
    """
    Basic email format validation.

    Returns:
        Lowercase email

    Raises:
        ValueError: If format is invalid
    """
    cleaned = value.strip().lower()

    pattern = r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$"
    if not re.match(pattern, cleaned):
        raise ValueError("Invalid email format")

    return cleaned


def normalize_reason(value: str | None) -> str | None:
    """Collapse a decision reason to None when it is blank."""
    if value is None:
        return None
    return sanitize_html(value)
