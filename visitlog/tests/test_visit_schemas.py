from __future__ import annotations

import pytest

pytestmark = pytest.mark.unit

from visitlog.domains.visits.schemas.visit_schemas import TrackRequest, clean_text


def test_clean_text_trims_truncates_and_drops_blank():
    assert clean_text("  /home  ", 512) == "/home"
    assert clean_text("x" * 600, 512) == "x" * 512
    assert clean_text("   ", 512) is None
    assert clean_text(42, 512) is None
    assert clean_text(None, 512) is None


def test_track_request_applies_field_limits():
    data = TrackRequest.from_payload(
        {
            "page": "p" * 1000,
            "referrer": "r" * 1000,
            "tz": "t" * 1000,
            "screen": "s" * 1000,
        }
    )
    assert len(data.page) == 512
    assert len(data.referrer) == 512
    assert len(data.tz) == 128
    assert len(data.screen) == 64


def test_malformed_fields_are_dropped_not_fatal():
    data = TrackRequest.from_payload(
        {"page": {"nested": True}, "referrer": 7, "tz": ["Europe/Amsterdam"], "screen": "", "languages": "en-US"}
    )
    assert data.page is None
    assert data.referrer is None
    assert data.tz is None
    assert data.screen is None
    assert data.languages == []


def test_languages_are_sanitized_and_capped():
    raw = [" en-US ", "", None, 5, "x" * 40] + [f"l{i}" for i in range(20)]
    data = TrackRequest.from_payload({"languages": raw})
    assert data.languages[0] == "en-US"
    assert data.languages[1] == "x" * 32
    assert len(data.languages) == 10


@pytest.mark.parametrize("payload", [None, [], "page=/", 12])
def test_non_object_payloads_yield_empty_request(payload):
    data = TrackRequest.from_payload(payload)
    assert data.model_dump() == {"page": None, "referrer": None, "tz": None, "screen": None, "languages": []}


def test_unknown_fields_ignored():
    data = TrackRequest.from_payload({"page": "/", "ip": "1.2.3.4", "id": "forged"})
    assert data.page == "/"
    assert not hasattr(data, "ip")
