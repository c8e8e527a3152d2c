"""Request id sanitizing."""

from visita.middleware.request_id import sanitize_request_id


def test_valid_request_id_is_kept() -> None:
    assert sanitize_request_id("  req_123-abc ") == "req_123-abc"


def test_unsafe_request_id_is_replaced() -> None:
    for raw in (None, "", "a" * 65, "bad id", "x\nInjected: yes"):
        replaced = sanitize_request_id(raw)
        assert replaced != raw
        assert replaced.isalnum()
