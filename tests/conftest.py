"""
Shared pytest fixtures for all QRPayload tests.

Provides sample payload strings as produced by common QR generators and a
fixture that pins the clock used for iCalendar DTSTAMP lines.
"""

from datetime import datetime, timezone

import pytest

from qrpayload import generators

# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------

SAMPLE_VCARD_V3 = (
    "BEGIN:VCARD\n"
    "VERSION:3.0\n"
    "N:Doe;John;;;\n"
    "FN:John Doe\n"
    "TEL;TYPE=WORK,VOICE:+1234567890\n"
    "EMAIL:john@example.com\n"
    "END:VCARD"
)

SAMPLE_EVENT = (
    "BEGIN:VCALENDAR\n"
    "VERSION:2.0\n"
    "BEGIN:VEVENT\n"
    "SUMMARY:Meeting\n"
    "LOCATION:Office\n"
    "DTSTART:20240115T100000Z\n"
    "DTEND:20240115T110000Z\n"
    "END:VEVENT\n"
    "END:VCALENDAR"
)

SAMPLE_WIFI = "WIFI:T:WPA;S:MyNetwork;P:password123;H:true;"

FROZEN_NOW = datetime(2024, 6, 1, 8, 30, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def frozen_now(monkeypatch):
    """Pin the DTSTAMP clock to FROZEN_NOW."""
    monkeypatch.setattr(generators, "utcnow", lambda: FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture
def vcard_v3() -> str:
    return SAMPLE_VCARD_V3


@pytest.fixture
def event_text() -> str:
    return SAMPLE_EVENT


@pytest.fixture
def wifi_text() -> str:
    return SAMPLE_WIFI
