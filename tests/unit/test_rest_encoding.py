"""Firestore REST value encoding."""

from datetime import UTC, datetime

import pytest

from visita.infrastructure.firebase._rest_encoding import (
    _parse_timestamp,
    decode_document,
    encode_document,
)


def test_encode_document_value_types() -> None:
    body = encode_document(
        {
            "name": "Loboc Church",
            "count": 3,
            "ratio": 0.5,
            "reviewed": True,
            "note": None,
            "at": datetime(2025, 1, 15, 12, 0, 0, 250000, tzinfo=UTC),
            "changes": ({"field": "status"},),
        }
    )
    fields = body["fields"]
    assert fields["name"] == {"stringValue": "Loboc Church"}
    assert fields["count"] == {"integerValue": "3"}
    assert fields["ratio"] == {"doubleValue": 0.5}
    assert fields["reviewed"] == {"booleanValue": True}
    assert fields["note"] == {"nullValue": None}
    assert fields["at"] == {"timestampValue": "2025-01-15T12:00:00.250000Z"}
    assert fields["changes"] == {
        "arrayValue": {
            "values": [
                {"mapValue": {"fields": {"field": {"stringValue": "status"}}}}
            ]
        }
    }


def test_encode_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        encode_document({"x": object()})


def test_decode_document_reads_fields_map() -> None:
    data = decode_document(
        {
            "status": {"stringValue": "pending"},
            "count": {"integerValue": "7"},
            "actor": {"mapValue": {"fields": {"uid": {"stringValue": "u1"}}}},
            "empty": {"arrayValue": {}},
        }
    )
    assert data == {"status": "pending", "count": 7, "actor": {"uid": "u1"}, "empty": []}
    assert decode_document(None) == {}


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("2025-01-15T12:00:00Z", datetime(2025, 1, 15, 12, tzinfo=UTC)),
        ("2025-01-15T12:00:00.5Z", datetime(2025, 1, 15, 12, 0, 0, 500000, tzinfo=UTC)),
        (
            "2025-01-15T12:00:00.123456789Z",
            datetime(2025, 1, 15, 12, 0, 0, 123456, tzinfo=UTC),
        ),
    ],
)
def test_parse_timestamp_fraction_lengths(raw: str, expected: datetime) -> None:
    assert _parse_timestamp(raw) == expected
