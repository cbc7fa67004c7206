"""
Regex-based payload type detection.

Classifies a raw QR string by its prefix or structure and parses it back into
the fields of the matching payload model. Rules are tried in a fixed order and
the first match wins; anything unmatched is plain text. Each parser is the
(lossy) inverse of the generator for the same type.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, NamedTuple
from urllib.parse import parse_qs

from .datetimes import format_date_from_ical
from .models import DetectionResult, PayloadType

ParsedData = dict[str, Any]

_ENCRYPTION_TYPES = frozenset({"nopass", "wep", "wpa"})

_VCARD_VERSIONS: dict[str, str] = {"2.1": "2", "3.0": "3", "4.0": "4"}

# TEL lines, matched on the parameter segment before the first colon.
_TEL_WORK_RE = re.compile(r'^TEL[^:]*(?:TYPE=WORK|WORK)[^:]*:', re.IGNORECASE)
_TEL_HOME_RE = re.compile(r'^TEL[^:]*(?:TYPE=HOME|HOME)[^:]*:', re.IGNORECASE)
_TEL_CELL_RE = re.compile(r'^TEL[^:]*(?:TYPE=CELL|CELL|TYPE=MOBILE|MOBILE)[^:]*:', re.IGNORECASE)
_TEL_ANY_RE = re.compile(r'^TEL', re.IGNORECASE)
_EMAIL_RE = re.compile(r'^EMAIL[^:]*:', re.IGNORECASE)
_URL_RE = re.compile(r'^URL[^:]*:', re.IGNORECASE)
_ADR_RE = re.compile(r'^ADR[^:]*:', re.IGNORECASE)

# Segment patterns for WIFI: strings. Escaped delimiters are not honored.
_WIFI_SSID_RE = re.compile(r'S:([^;]*);', re.IGNORECASE)
_WIFI_TYPE_RE = re.compile(r'T:([^;]*);', re.IGNORECASE)
_WIFI_PASSWORD_RE = re.compile(r'P:([^;]*);', re.IGNORECASE)
_WIFI_HIDDEN_RE = re.compile(r'H:(true|false);', re.IGNORECASE)

# iCalendar properties, each value running to the end of its line.
_EVENT_SUMMARY_RE = re.compile(r'SUMMARY:([^\n\r]*)', re.IGNORECASE)
_EVENT_LOCATION_RE = re.compile(r'LOCATION:([^\n\r]*)', re.IGNORECASE)
_EVENT_START_RE = re.compile(r'DTSTART(?:[^:]*):([^\n\r]*)', re.IGNORECASE)
_EVENT_END_RE = re.compile(r'DTEND(?:[^:]*):([^\n\r]*)', re.IGNORECASE)


def _strip_prefix(data: str, prefix: str) -> str:
    """Remove a case-insensitive *prefix* from *data* if present."""
    if data[:len(prefix)].lower() == prefix.lower():
        return data[len(prefix):]
    return data


def _field_value(line: str) -> str:
    """Return the value after the first colon of a content line, trimmed."""
    return line.split(":", 1)[1].strip() if ":" in line else ""


def _strip_tel_uri(value: str) -> str:
    return value[4:] if value.startswith("tel:") else value


def _query_value(params: dict[str, list[str]], key: str) -> str:
    values = params.get(key)
    return values[-1] if values else ""


# ---------------------------------------------------------------------------
# Per-type parsers
# ---------------------------------------------------------------------------

def _parse_vcard(data: str) -> ParsedData:
    parsed: ParsedData = {}
    lines = data.replace("\r", "").split("\n")

    version = "3"
    for line in lines:
        if line[:8].upper() == "VERSION:":
            version = _VCARD_VERSIONS.get(line[8:].strip(), "3")
            break
    parsed["version"] = version

    for line in lines:
        if line[:2].upper() == "N:":
            name_parts = line[2:].split(";")
            if len(name_parts) >= 2:
                parsed["last_name"] = name_parts[0].strip()
                parsed["first_name"] = name_parts[1].strip()
            break

    # FN is only consulted when N gave nothing usable.
    if not parsed.get("first_name") and not parsed.get("last_name"):
        for line in lines:
            if line[:3].upper() == "FN:":
                full_name = line[3:].strip()
                first, _, rest = full_name.partition(" ")
                parsed["first_name"] = first
                if rest:
                    parsed["last_name"] = rest
                break

    for line in lines:
        upper = line.upper()
        if upper.startswith("ORG:"):
            parsed["org"] = line[4:].strip()
        elif upper.startswith("TITLE:"):
            parsed["position"] = line[6:].strip()
        elif _TEL_WORK_RE.match(line):
            parsed["phone_work"] = _strip_tel_uri(_field_value(line))
        elif _TEL_HOME_RE.match(line):
            parsed["phone_private"] = _strip_tel_uri(_field_value(line))
        elif _TEL_CELL_RE.match(line):
            parsed["phone_mobile"] = _strip_tel_uri(_field_value(line))
        elif _TEL_ANY_RE.match(line) and not any(
            parsed.get(key) for key in ("phone_work", "phone_private", "phone_mobile")
        ):
            parsed["phone_mobile"] = _strip_tel_uri(_field_value(line))
        elif _EMAIL_RE.match(line):
            parsed["email"] = _field_value(line)
        elif _URL_RE.match(line):
            parsed["website"] = _field_value(line)
        elif _ADR_RE.match(line):
            # PO box; extended; street; city; region; postal code; country
            parts = line.split(":", 1)[1].split(";")
            if len(parts) >= 7:
                parsed["street"] = parts[2].strip()
                parsed["city"] = parts[3].strip()
                parsed["state"] = parts[4].strip()
                parsed["zipcode"] = parts[5].strip()
                parsed["country"] = parts[6].strip()

    return parsed


def _parse_url(data: str) -> ParsedData:
    return {"url": data}


def _parse_email(data: str) -> ParsedData:
    address, sep, query = _strip_prefix(data, "mailto:").partition("?")
    parsed: ParsedData = {"address": address}
    if sep:
        params = parse_qs(query, keep_blank_values=True)
        for key in ("subject", "body", "cc", "bcc"):
            parsed[key] = _query_value(params, key)
    return parsed


def _parse_phone(data: str) -> ParsedData:
    return {"phone": _strip_prefix(data, "tel:")}


def _parse_sms(data: str) -> ParsedData:
    if data[:6].upper() == "SMSTO:":
        phone, _, message = data[6:].partition(":")
        return {"phone": phone.strip(), "message": message.strip()}

    phone, sep, query = _strip_prefix(data, "sms:").partition("?")
    parsed: ParsedData = {"phone": phone.strip()}
    if sep:
        parsed["message"] = _query_value(parse_qs(query, keep_blank_values=True), "body")
    return parsed


def _parse_wifi(data: str) -> ParsedData:
    parsed: ParsedData = {}

    match = _WIFI_SSID_RE.search(data)
    if match:
        parsed["ssid"] = match.group(1)

    match = _WIFI_TYPE_RE.search(data)
    encryption = match.group(1).lower() if match else "nopass"
    parsed["encryption"] = encryption if encryption in _ENCRYPTION_TYPES else "nopass"

    match = _WIFI_PASSWORD_RE.search(data)
    if match:
        parsed["password"] = match.group(1)

    match = _WIFI_HIDDEN_RE.search(data)
    parsed["hidden"] = bool(match) and match.group(1).lower() == "true"

    return parsed


def _parse_location(data: str) -> ParsedData:
    coords = _strip_prefix(data, "geo:").split(",")
    if len(coords) < 2:
        return {}
    return {"latitude": coords[0], "longitude": coords[1]}


def _parse_event(data: str) -> ParsedData:
    parsed: ParsedData = {}

    match = _EVENT_SUMMARY_RE.search(data)
    if match:
        parsed["title"] = match.group(1)

    match = _EVENT_LOCATION_RE.search(data)
    if match:
        parsed["location"] = match.group(1)

    match = _EVENT_START_RE.search(data)
    if match and match.group(1):
        parsed["start_time"] = format_date_from_ical(match.group(1))

    match = _EVENT_END_RE.search(data)
    if match and match.group(1):
        parsed["end_time"] = format_date_from_ical(match.group(1))

    return parsed


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

class DetectionRule(NamedTuple):
    """A payload type, the pattern that selects it, and its parser."""
    payload_type: PayloadType
    pattern: re.Pattern[str]
    parser: Callable[[str], ParsedData]


# Order is significant: first match wins.
DETECTION_RULES: tuple[DetectionRule, ...] = (
    DetectionRule(PayloadType.VCARD, re.compile(r'^BEGIN:VCARD', re.IGNORECASE), _parse_vcard),
    DetectionRule(PayloadType.URL, re.compile(r'^https?://', re.IGNORECASE), _parse_url),
    DetectionRule(PayloadType.EMAIL, re.compile(r'^mailto:', re.IGNORECASE), _parse_email),
    DetectionRule(PayloadType.PHONE, re.compile(r'^tel:', re.IGNORECASE), _parse_phone),
    DetectionRule(PayloadType.SMS, re.compile(r'^(?:SMSTO|sms):', re.IGNORECASE), _parse_sms),
    DetectionRule(PayloadType.WIFI, re.compile(r'^WIFI:', re.IGNORECASE), _parse_wifi),
    DetectionRule(PayloadType.LOCATION, re.compile(r'^geo:', re.IGNORECASE), _parse_location),
    DetectionRule(PayloadType.EVENT, re.compile(r'BEGIN:(?:VCALENDAR|VEVENT)', re.IGNORECASE), _parse_event),
)


def detect_data_type(data: str) -> DetectionResult:
    """
    Detect the payload type of a raw QR string and parse its fields.

    Args:
        data: The decoded QR content.

    Returns:
        A DetectionResult. Unrecognized or empty input is classified as
        ``text`` with the input in ``parsed_data["text"]``.
    """
    if data:
        for rule in DETECTION_RULES:
            if rule.pattern.search(data):
                return DetectionResult(type=rule.payload_type, parsed_data=rule.parser(data))
    return DetectionResult(type=PayloadType.TEXT, parsed_data={"text": data})
