"""
Payload string generators, one per payload type.

Every generator takes either its payload model or a plain mapping and returns
the string to hand to a QR renderer. Generators never fail on missing input:
when a required field is absent or invalid the result is ``""`` and the
caller decides what that means. A value of a type that cannot be coerced
counts as missing.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import ValidationError

from .datetimes import format_ical_datetime, utcnow
from .escaping import escape_ical, escape_vcard, escape_wifi
from .models import (
    EmailPayload,
    EventPayload,
    LocationPayload,
    Payload,
    PayloadType,
    PhonePayload,
    SmsPayload,
    TextPayload,
    UrlPayload,
    VCardPayload,
    VCardVersion,
    WifiPayload,
)

logger = logging.getLogger(__name__)

PayloadInput = Payload | Mapping[str, Any] | None

_P = TypeVar("_P", bound=Payload)

# Decimal or scientific notation with optional sign and surrounding blanks.
_NUMERIC_RE = re.compile(r'^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$')

# Per-version line prefixes. Keys are VCardVersion values.
_VCARD_VERSION_LINE = {"2": "VERSION:2.1", "3": "VERSION:3.0", "4": "VERSION:4.0"}

_VCARD_TEL_PREFIX = {
    "work": {"2": "TEL;WORK;VOICE:", "3": "TEL;TYPE=WORK,VOICE:", "4": "TEL;TYPE=work,voice;VALUE=uri:tel:"},
    "home": {"2": "TEL;HOME;VOICE:", "3": "TEL;TYPE=HOME,VOICE:", "4": "TEL;TYPE=home,voice;VALUE=uri:tel:"},
    "cell": {"2": "TEL;CELL;VOICE:", "3": "TEL;TYPE=CELL,VOICE:", "4": "TEL;TYPE=cell,voice;VALUE=uri:tel:"},
}

_VCARD_EMAIL_PREFIX = {"2": "EMAIL;INTERNET:", "3": "EMAIL:", "4": "EMAIL;TYPE=work:"}
_VCARD_URL_PREFIX = {"2": "URL:", "3": "URL:", "4": "URL;TYPE=work:"}
_VCARD_ADR_PREFIX = {"2": "ADR;WORK:;;", "3": "ADR;TYPE=WORK:;;", "4": "ADR;TYPE=work:;;"}


class UnsupportedPayloadTypeError(ValueError):
    """Raised by generate_data() for a tag that is not a PayloadType."""


def _coerce(model: type[_P], data: PayloadInput) -> _P:
    """
    Return *data* as an instance of *model*, validating mappings.

    Fields whose value cannot be coerced to the field type are dropped and
    fall back to their defaults, so a bad value reads as a missing one.
    """
    if isinstance(data, model):
        return data
    if isinstance(data, Payload):
        data = data.model_dump()
    if not isinstance(data, Mapping):
        if data is not None:
            logger.warning("Ignoring %s input of type %s", model.__name__, type(data).__name__)
        data = {}
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        invalid = {err["loc"][0] for err in exc.errors() if err["loc"]}
        # Error locations may name the field or its alias.
        dropped = {
            key
            for name, field in model.model_fields.items()
            if name in invalid or field.alias in invalid
            for key in (name, field.alias)
        }
        logger.warning("Dropping invalid %s fields: %s", model.__name__, ", ".join(sorted(map(str, invalid))))
        return model.model_validate({k: v for k, v in data.items() if k not in dropped})


def _dialect(version: str) -> str:
    """Map a requested vCard version onto one of the three dialect keys."""
    if version in (VCardVersion.V2.value, VCardVersion.V4.value):
        return version
    return VCardVersion.V3.value


def _is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    return isinstance(value, str) and bool(_NUMERIC_RE.match(value))


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------

def generate_text_data(data: PayloadInput) -> str:
    """Return the ``text`` field verbatim."""
    return _coerce(TextPayload, data).text or ""


def generate_url_data(data: PayloadInput) -> str:
    """Return ``url``, prefixed with ``https://`` unless it already has an http(s) scheme."""
    url = _coerce(UrlPayload, data).url or ""
    if not url:
        return ""
    if url.startswith(("http://", "https://")):
        return url
    return "https://" + url


def generate_email_data(data: PayloadInput) -> str:
    """
    Build a ``mailto:`` URI.

    The optional subject, body, cc and bcc are percent-encoded (space becomes
    ``%20``, newline ``%0A``) and appended in that fixed order, each only when
    non-empty.

    Returns:
        ``mailto:<address>[?<query>]``, or ``""`` without an address.
    """
    payload = _coerce(EmailPayload, data)
    if not payload.address:
        return ""

    parts = []
    for key in ("subject", "body", "cc", "bcc"):
        value = getattr(payload, key)
        if value:
            parts.append(f"{key}={quote(value, safe='-_.~')}")

    query = "?" + "&".join(parts) if parts else ""
    return f"mailto:{payload.address}{query}"


def generate_phone_data(data: PayloadInput) -> str:
    """Build a ``tel:`` URI, or ``""`` without a phone number."""
    phone = _coerce(PhonePayload, data).phone
    return f"tel:{phone}" if phone else ""


def generate_sms_data(data: PayloadInput) -> str:
    """Build an ``SMSTO:<phone>:<message>`` string, or ``""`` without a phone number."""
    payload = _coerce(SmsPayload, data)
    if not payload.phone:
        return ""
    return f"SMSTO:{payload.phone}:{payload.message or ''}"


def generate_wifi_data(data: PayloadInput) -> str:
    """
    Build a ``WIFI:`` network join string.

    SSID and password are escaped for the Wi-Fi format. Open networks
    (``encryption="nopass"``) carry no password segment. A hidden network
    gets ``H:true;``.

    Returns:
        The join string, or ``""`` without an SSID.
    """
    payload = _coerce(WifiPayload, data)
    if not payload.ssid:
        return ""

    ssid = escape_wifi(payload.ssid)
    hidden = "H:true;" if payload.hidden else ""

    if payload.encryption == "nopass":
        return f"WIFI:T:nopass;S:{ssid};;{hidden};"

    password = escape_wifi(payload.password or "")
    return f"WIFI:T:{payload.encryption};S:{ssid};P:{password};{hidden};"


def generate_vcard_data(data: PayloadInput) -> str:
    """
    Build a vCard in the 2.1, 3.0 or 4.0 dialect selected by ``version``.

    Every property is emitted only when its value is present; ``N``/``FN``
    need a first or last name and ``ADR`` needs at least one address
    component. All values are vCard-escaped. Lines are joined with ``\\n``.
    """
    payload = _coerce(VCardPayload, data)
    version = _dialect(payload.version)

    lines = ["BEGIN:VCARD", _VCARD_VERSION_LINE[version]]

    first_name = escape_vcard(payload.first_name or "")
    last_name = escape_vcard(payload.last_name or "")
    if first_name or last_name:
        lines.append(f"N:{last_name};{first_name};;;")
        lines.append("FN:" + f"{first_name} {last_name}".strip())

    if payload.org:
        lines.append("ORG:" + escape_vcard(payload.org))
    if payload.position:
        lines.append("TITLE:" + escape_vcard(payload.position))

    phones = (
        ("work", payload.phone_work),
        ("home", payload.phone_private),
        ("cell", payload.phone_mobile),
    )
    for kind, phone in phones:
        if phone:
            lines.append(_VCARD_TEL_PREFIX[kind][version] + escape_vcard(phone))

    if payload.email:
        lines.append(_VCARD_EMAIL_PREFIX[version] + escape_vcard(payload.email))
    if payload.website:
        lines.append(_VCARD_URL_PREFIX[version] + escape_vcard(payload.website))

    address = [
        escape_vcard(component or "")
        for component in (payload.street, payload.city, payload.state, payload.zipcode, payload.country)
    ]
    if any(address):
        lines.append(_VCARD_ADR_PREFIX[version] + ";".join(address))

    lines.append("END:VCARD")
    return "\n".join(lines)


def generate_location_data(data: PayloadInput) -> str:
    """Build a ``geo:<lat>,<lng>`` URI; both coordinates must be numeric, else ``""``."""
    payload = _coerce(LocationPayload, data)
    if not (_is_numeric(payload.latitude) and _is_numeric(payload.longitude)):
        return ""
    return f"geo:{payload.latitude},{payload.longitude}"


def generate_event_data(data: PayloadInput) -> str:
    """
    Build an iCalendar ``VEVENT`` wrapped in a ``VCALENDAR``.

    ``SUMMARY`` and ``LOCATION`` are iCal-escaped. ``DTSTART``/``DTEND`` are
    emitted only when the time is present and can be formatted. ``DTSTAMP``
    is always the current instant.
    """
    payload = _coerce(EventPayload, data)

    lines = ["BEGIN:VEVENT"]
    if payload.title:
        lines.append("SUMMARY:" + escape_ical(payload.title))
    if payload.location:
        lines.append("LOCATION:" + escape_ical(payload.location))

    dt_start = format_ical_datetime(payload.start_time) if payload.start_time else ""
    dt_end = format_ical_datetime(payload.end_time) if payload.end_time else ""
    if dt_start:
        lines.append(f"DTSTART:{dt_start}")
    if dt_end:
        lines.append(f"DTEND:{dt_end}")

    lines.append("DTSTAMP:" + format_ical_datetime(utcnow()))
    lines.append("END:VEVENT")

    return "\n".join(["BEGIN:VCALENDAR", "VERSION:2.0", *lines, "END:VCALENDAR"])


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

GENERATORS: Mapping[PayloadType, Callable[[PayloadInput], str]] = MappingProxyType({
    PayloadType.TEXT: generate_text_data,
    PayloadType.URL: generate_url_data,
    PayloadType.EMAIL: generate_email_data,
    PayloadType.PHONE: generate_phone_data,
    PayloadType.SMS: generate_sms_data,
    PayloadType.WIFI: generate_wifi_data,
    PayloadType.VCARD: generate_vcard_data,
    PayloadType.LOCATION: generate_location_data,
    PayloadType.EVENT: generate_event_data,
})


def generate_data(payload_type: PayloadType | str, data: PayloadInput) -> str:
    """
    Generate the payload string for *payload_type*.

    Args:
        payload_type: A PayloadType or its tag, e.g. ``"wifi"``.
        data: The payload model or mapping for that type.

    Raises:
        UnsupportedPayloadTypeError: If *payload_type* is not one of the
            nine payload tags.
    """
    try:
        key = PayloadType(payload_type)
    except ValueError:
        raise UnsupportedPayloadTypeError(f"Unsupported payload type: {payload_type!r}") from None
    return GENERATORS[key](data)
