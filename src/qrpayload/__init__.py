"""
QRPayload: build and detect the text payloads carried by QR codes.

Generates mailto/tel/SMS/geo URIs, Wi-Fi join strings, vCards and iCalendar
events from structured fields, and classifies raw payload strings back into
those fields. No QR image rendering; the output string goes to any QR library.
"""

__version__ = "0.1.0"

from .detector import detect_data_type
from .escaping import escape_ical, escape_vcard, escape_wifi
from .generators import (
    UnsupportedPayloadTypeError,
    generate_data,
    generate_email_data,
    generate_event_data,
    generate_location_data,
    generate_phone_data,
    generate_sms_data,
    generate_text_data,
    generate_url_data,
    generate_vcard_data,
    generate_wifi_data,
)
from .models import (
    DetectionResult,
    EmailPayload,
    EventPayload,
    LocationPayload,
    PayloadType,
    PhonePayload,
    SmsPayload,
    TextPayload,
    UrlPayload,
    VCardPayload,
    VCardVersion,
    WifiPayload,
)

__all__ = [
    "DetectionResult",
    "EmailPayload",
    "EventPayload",
    "LocationPayload",
    "PayloadType",
    "PhonePayload",
    "SmsPayload",
    "TextPayload",
    "UnsupportedPayloadTypeError",
    "UrlPayload",
    "VCardPayload",
    "VCardVersion",
    "WifiPayload",
    "detect_data_type",
    "escape_ical",
    "escape_vcard",
    "escape_wifi",
    "generate_data",
    "generate_email_data",
    "generate_event_data",
    "generate_location_data",
    "generate_phone_data",
    "generate_sms_data",
    "generate_text_data",
    "generate_url_data",
    "generate_vcard_data",
    "generate_wifi_data",
]
