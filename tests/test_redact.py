from __future__ import annotations

from pyhc3._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "name": "main",
        "Password": "pw",
        "nested": {"authorization": "Basic YWRtaW46c2VjcmV0"},
    }

    redacted = redact_for_log(payload)
    assert redacted["name"] == "main"
    assert redacted["Password"] == "<redacted>"
    assert redacted["nested"]["authorization"] == "<redacted>"


def test_redact_for_log_summarizes_file_content() -> None:
    redacted = redact_for_log({"name": "main", "content": "x" * 5000})
    assert redacted["content"] == "<5000 chars>"


def test_redact_for_log_truncates_long_strings() -> None:
    redacted = redact_for_log([{"value": "y" * 600}], max_string=10)
    assert redacted[0]["value"].startswith("y" * 10)
    assert redacted[0]["value"].endswith("<600 chars>")
