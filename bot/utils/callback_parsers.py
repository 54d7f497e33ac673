"""
Callback data parsing utilities.

Helpers for extracting values from ``prefix:value`` callback data.
"""


def parse_callback_value(callback_data: str | None, prefix: str) -> str | None:
    """
    Extract the value after ``prefix``.

    Args:
        callback_data: Callback data (e.g. "setdefault:abc-123")
        prefix: Expected prefix (e.g. "setdefault:")

    Returns:
        str | None: Value or None if the prefix doesn't match or the value is empty

    Examples:
        >>> parse_callback_value("network:POLYGON", "network:")
        'POLYGON'
        >>> parse_callback_value("network:", "network:")
        None
    """
    if not callback_data or not isinstance(callback_data, str):
        return None

    if not callback_data.startswith(prefix):
        return None

    value = callback_data[len(prefix):]
    return value or None


def parse_callback_index(callback_data: str | None, prefix: str) -> int | None:
    """
    Extract a non-negative integer index after ``prefix``.

    Examples:
        >>> parse_callback_index("copy:2", "copy:")
        2
        >>> parse_callback_index("copy:abc", "copy:")
        None
    """
    value = parse_callback_value(callback_data, prefix)
    if value is None or not value.isdigit():
        return None

    try:
        return int(value)
    except (ValueError, OverflowError):
        return None
