"""
Unit tests for the Entry record and timestamp helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from paste_platform.models import Entry, from_iso, now_iso, to_iso


def _entry(**overrides):
    values = dict(
        id="abc12",
        content="<b>hi</b>",
        edit_code="secret99",
        created_at="2025-01-01T12:00:00.000Z",
        updated_at="2025-01-01T12:00:01.000Z",
    )
    values.update(overrides)
    return Entry(**values)


def test_to_record_uses_persisted_layout():
    record = _entry().to_record()
    assert record == {
        "id": "abc12",
        "content": "<b>hi</b>",
        "editCode": "secret99",
        "createdAt": "2025-01-01T12:00:00.000Z",
        "updatedAt": "2025-01-01T12:00:01.000Z",
    }


def test_public_record_omits_edit_code():
    record = _entry().public_record()
    assert "editCode" not in record
    assert set(record) == {"id", "content", "createdAt", "updatedAt"}


def test_from_record_round_trip():
    entry = _entry()
    assert Entry.from_record(entry.to_record()) == entry


def test_from_record_missing_field():
    record = _entry().to_record()
    del record["editCode"]
    with pytest.raises(KeyError):
        Entry.from_record(record)


def test_from_record_rejects_non_string():
    record = _entry().to_record()
    record["content"] = 42
    with pytest.raises(TypeError):
        Entry.from_record(record)


def test_copy_leaves_original_untouched():
    entry = _entry()
    changed = entry.copy(content="new")
    assert entry.content == "<b>hi</b>"
    assert changed.content == "new"
    assert changed.created_at == entry.created_at


def test_to_iso_format():
    value = datetime(2025, 3, 4, 5, 6, 7, 891234, tzinfo=timezone.utc)
    assert to_iso(value) == "2025-03-04T05:06:07.891Z"


def test_to_iso_normalizes_offsets_and_naive_values():
    plus_two = timezone(timedelta(hours=2))
    assert to_iso(datetime(2025, 1, 1, 14, 0, tzinfo=plus_two)) == "2025-01-01T12:00:00.000Z"
    assert to_iso(datetime(2025, 1, 1, 12, 0)) == "2025-01-01T12:00:00.000Z"


def test_from_iso_round_trip():
    stamp = "2025-01-01T12:00:00.123Z"
    assert to_iso(from_iso(stamp)) == stamp


def test_now_iso_uses_clock():
    fixed = datetime(2030, 6, 1, tzinfo=timezone.utc)
    assert now_iso(lambda: fixed) == "2030-06-01T00:00:00.000Z"
    assert now_iso().endswith("Z")
