"""
Enum conversion utilities.

Parses wire values into enums with case-insensitive matching and a
fallback default.
"""

from typing import Any, Type, TypeVar

T = TypeVar("T")


def parse_enum(value: Any, enum_class: Type[T], default: T, normalize: bool = False) -> T:
    """
    Parse value to enum with fallback to default.

    Args:
        value: Value to parse (string, int, enum, or None)
        enum_class: Enum class to parse to
        default: Default enum value if parsing fails
        normalize: Whether to match string values case-insensitively

    Returns:
        Parsed enum value or default

    Example:
        >>> parse_enum("SRCOVER", BlendMode, BlendMode.SRC_OVER, normalize=True)
        >>> # Returns BlendMode.SRC_OVER for "srcOver", "srcover", "SRCOVER"
    """
    # Already an enum instance
    if isinstance(value, enum_class):
        return value

    # None or missing value
    if value is None:
        return default

    try:
        return enum_class(value)
    except (ValueError, TypeError):
        pass

    if normalize and isinstance(value, str):
        lowered = value.lower()
        for member in enum_class:
            if str(member.value).lower() == lowered or member.name.lower() == lowered:
                return member

    return default

