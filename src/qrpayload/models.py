"""
Pydantic models for all QRPayload data structures.

All payload shapes are defined here for single-source-of-truth. Generators
accept either one of these models or a plain mapping, which is validated into
the matching model. Field names are snake_case; the camelCase spellings used
by most QR front ends (``firstName``, ``phoneWork``, ``startTime``) are
accepted as aliases.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# --- Enums ---

class PayloadType(str, Enum):
    TEXT = "text"
    URL = "url"
    EMAIL = "email"
    PHONE = "phone"
    SMS = "sms"
    WIFI = "wifi"
    VCARD = "vcard"
    LOCATION = "location"
    EVENT = "event"


class VCardVersion(str, Enum):
    V2 = "2"
    V3 = "3"
    V4 = "4"


# --- Payloads ---

class Payload(BaseModel):
    """Base for all payload models: lenient input, immutable once built."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
        frozen=True,
    )


class TextPayload(Payload):
    text: str | None = None


class UrlPayload(Payload):
    url: str | None = None


class EmailPayload(Payload):
    """Content of a ``mailto:`` URI."""
    address: str | None = None
    subject: str | None = None
    body: str | None = None
    cc: str | None = None  # comma separated, encoded as a single value
    bcc: str | None = None


class PhonePayload(Payload):
    phone: str | None = None


class SmsPayload(Payload):
    phone: str | None = None
    message: str | None = None


class WifiPayload(Payload):
    """
    Credentials for a ``WIFI:`` join string.

    ``encryption`` is passed through as given when generating (``WPA``,
    ``WEP``, ``nopass``...). Detection normalizes it to lowercase.
    """
    ssid: str | None = None
    encryption: str = "nopass"
    password: str | None = None
    hidden: bool = False

    @field_validator("encryption", mode="before")
    @classmethod
    def _default_encryption(cls, value: Any) -> Any:
        return "nopass" if value is None else value

    @field_validator("hidden", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() not in {"", "0", "false", "no", "off"}
        return bool(value)


class VCardPayload(Payload):
    """A contact card. ``version`` selects the 2.1, 3.0 or 4.0 dialect."""
    first_name: str | None = None
    last_name: str | None = None
    org: str | None = None
    position: str | None = None
    phone_work: str | None = None
    phone_private: str | None = None
    phone_mobile: str | None = None
    email: str | None = None
    website: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipcode: str | None = None
    country: str | None = None
    version: str = VCardVersion.V3.value

    @field_validator("version", mode="before")
    @classmethod
    def _default_version(cls, value: Any) -> Any:
        if value is None:
            return VCardVersion.V3.value
        if isinstance(value, VCardVersion):
            return value.value
        return value


class LocationPayload(Payload):
    # Kept as given; the numeric check happens at generation time.
    latitude: Any = None
    longitude: Any = None


class EventPayload(Payload):
    """
    A calendar event.

    Times may be datetimes, dates or ISO-like strings. They are kept as given
    and anything unformattable is dropped when the event is generated.
    """
    title: str | None = None
    location: str | None = None
    start_time: Any = None
    end_time: Any = None


PAYLOAD_MODELS: dict[PayloadType, type[Payload]] = {
    PayloadType.TEXT: TextPayload,
    PayloadType.URL: UrlPayload,
    PayloadType.EMAIL: EmailPayload,
    PayloadType.PHONE: PhonePayload,
    PayloadType.SMS: SmsPayload,
    PayloadType.WIFI: WifiPayload,
    PayloadType.VCARD: VCardPayload,
    PayloadType.LOCATION: LocationPayload,
    PayloadType.EVENT: EventPayload,
}


# --- Detection ---

class DetectionResult(BaseModel):
    """
    Result of classifying a raw QR string.

    ``parsed_data`` holds only the fields the parser found, keyed by the
    snake_case field names of the matching payload model, so it can be fed
    back into the generator for ``type``.
    """
    model_config = ConfigDict(populate_by_name=True)

    type: PayloadType
    parsed_data: dict[str, Any] = Field(default_factory=dict, alias="parsedData")
