"""
Input validation functions for spandex.

Provides validation for group and snippet names before they are used as
file or directory names by file-backed expanders.
"""


# ---------------------------------------------------------------------------
# Error message formatting helpers
# ---------------------------------------------------------------------------


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Snippet name")
        reason: Description of validation failure (e.g., "cannot be empty")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


_FORBIDDEN_CHARS = ("/", "\\", "\x00")


def validate_entry_name(
    name: str, field_name: str = "Name"
) -> tuple[bool, str]:
    """
    Validate a group or snippet name used as a single path component.

    Args:
        name: The name to validate
        field_name: Human-readable label used in the error message

    Returns:
        Tuple of (is_valid, error_message).
        Returns (True, "") if valid, (False, reason) if invalid.

    Validation rules:
        - Cannot be empty or whitespace-only
        - Cannot be '.' or '..'
        - Cannot contain path separators or NUL
        - Cannot start with '.' (hidden entries are skipped on load)
    """
    if not name or not name.strip():
        return (
            False,
            format_validation_error(field_name, "cannot be empty"),
        )

    if name in (".", ".."):
        return (
            False,
            format_validation_error(
                field_name, f"cannot be '{name}'"
            ),
        )

    for char in _FORBIDDEN_CHARS:
        if char in name:
            return (
                False,
                format_validation_error(
                    field_name, f"cannot contain {char!r}: {name!r}"
                ),
            )

    if name.startswith("."):
        return (
            False,
            format_validation_error(
                field_name, f"cannot start with '.': {name!r}"
            ),
        )

    return (True, "")
