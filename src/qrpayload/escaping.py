"""
Backslash escaping for the text formats carried inside QR payloads.

Each format reserves a small alphabet of delimiter characters. Values are
escaped by prefixing every reserved character with a backslash, one
character class at a time, backslash first so that inserted backslashes are
never escaped a second time. Escaping is not idempotent: escaping an already
escaped value escapes it again.
"""

# Reserved characters per format. Backslash must stay first.
VCARD_SPECIAL_CHARS = "\\,;"    # RFC 6350 / RFC 2426
WIFI_SPECIAL_CHARS = "\\;,:\"'"  # ZXing Wi-Fi network config
ICAL_SPECIAL_CHARS = "\\,;"     # RFC 5545


def _escape_special_chars(value: str, chars: str) -> str:
    """Prefix each character of *chars* found in *value* with a backslash."""
    if not value:
        return ""
    result = value
    for char in chars:
        result = result.replace(char, "\\" + char)
    return result


def escape_vcard(value: str) -> str:
    """Escape ``\\``, ``,`` and ``;`` for a vCard property value."""
    return _escape_special_chars(value, VCARD_SPECIAL_CHARS)


def escape_wifi(value: str) -> str:
    """Escape ``\\ ; , : " '`` for a ``WIFI:`` join string."""
    return _escape_special_chars(value, WIFI_SPECIAL_CHARS)


def escape_ical(value: str) -> str:
    """Escape ``\\``, ``,`` and ``;`` for an iCalendar text value."""
    return _escape_special_chars(value, ICAL_SPECIAL_CHARS)
