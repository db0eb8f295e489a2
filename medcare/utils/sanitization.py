import html
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_text_field(value: Optional[str]) -> Optional[str]:
    """
    Trim surrounding whitespace and escape a free-text field for storage.

    Idempotent: a value read back from storage and submitted again is stored
    unchanged instead of being escaped a second time.
    """
    if value is None:
        return None
    return sanitize_string(html.unescape(str(value).strip()))
