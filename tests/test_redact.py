from __future__ import annotations

from homerun._redact import redact_for_log


def test_redact_for_log_redacts_api_keys() -> None:
    payload = {
        "address": "Migdal Tefen, Israel",
        "key": "AIza-secret",
        "headers": {"X-Goog-Api-Key": "AIza-secret", "X-Goog-FieldMask": "routes.duration"},
    }

    redacted = redact_for_log(payload)
    assert redacted["key"] == "<redacted>"
    assert redacted["headers"]["X-Goog-Api-Key"] == "<redacted>"
    assert redacted["headers"]["X-Goog-FieldMask"] == "routes.duration"
    assert redacted["address"] == "Migdal Tefen, Israel"


def test_redact_for_log_can_hide_addresses() -> None:
    body = {"origin": {"address": "Work"}, "destination": {"address": "Home"}, "travelMode": "DRIVE"}

    redacted = redact_for_log(body, redact_addresses=True)
    assert redacted == {
        "origin": {"address": "<redacted>"},
        "destination": {"address": "<redacted>"},
        "travelMode": "DRIVE",
    }


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]
