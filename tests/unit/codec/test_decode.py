"""Unit tests for document decoding."""

from pathlib import Path

import pytest
from pydantic import BaseModel

from gitjsondb.codec import (
    GENERATED_NOTICE,
    WRAPPER_LOOKAHEAD,
    decode,
    decode_many,
    encode_many,
    encode_one,
    payload_bounds,
    remove_zero_values,
    zero_value,
)
from gitjsondb.exceptions import DocumentDecodeError


class Item(BaseModel):
    id: int
    name: str = ""


class Counter(BaseModel):
    count: int = 0


@pytest.fixture
def doc(tmp_path: Path) -> Path:
    return tmp_path / "doc.json"


class TestPayloadBounds:
    def test_bare_json_spans_whole_input(self) -> None:
        data = b'{"a":1}\n'

        assert payload_bounds(data) == (0, len(data))

    def test_wrapper_is_stripped(self) -> None:
        data = b'cb(\n{"a":1}\n)\n'
        start, end = payload_bounds(data)

        assert data[start:end].strip() == b'{"a":1}'

    def test_paren_inside_payload_is_not_a_wrapper(self) -> None:
        data = b'{"a":"(x)"}'

        assert payload_bounds(data) == (0, len(data))

    def test_wrapper_beyond_lookahead_is_not_detected(self) -> None:
        data = b" " * WRAPPER_LOOKAHEAD + b"cb([1])"
        start, _ = payload_bounds(data)

        assert start == 0


class TestDecode:
    def test_missing_file_returns_default(self, doc: Path) -> None:
        sentinel = {"fallback": True}

        assert decode(doc, default=sentinel) is sentinel

    def test_missing_file_returns_none_without_default(self, doc: Path) -> None:
        assert decode(doc) is None

    def test_bare_record(self, doc: Path) -> None:
        _ = doc.write_bytes(b'{"v": 1}')

        assert decode(doc) == {"v": 1}

    def test_wrapped_record(self, doc: Path) -> None:
        _ = doc.write_bytes(encode_one({"v": 1}, wrapper="load"))

        assert decode(doc) == {"v": 1}

    def test_typed_record(self, doc: Path) -> None:
        _ = doc.write_bytes(b'{"id": 7, "name": "x"}')

        assert decode(doc, Item) == Item(id=7, name="x")

    def test_invalid_json_raises(self, doc: Path) -> None:
        _ = doc.write_bytes(b"{not json")

        with pytest.raises(DocumentDecodeError) as exc_info:
            _ = decode(doc)

        assert exc_info.value.path == doc
        assert exc_info.value.cause is not None

    def test_validation_failure_raises(self, doc: Path) -> None:
        _ = doc.write_bytes(b'{"id": "not a number"}')

        with pytest.raises(DocumentDecodeError, match="expected type"):
            _ = decode(doc, Item)

    def test_decode_error_is_value_error(self, doc: Path) -> None:
        _ = doc.write_bytes(b"")

        with pytest.raises(ValueError, match="Failed to parse"):
            _ = decode(doc)


class TestDecodeMany:
    def test_missing_file_returns_default(self, doc: Path) -> None:
        assert decode_many(doc, default=[]) == []

    def test_empty_collection(self, doc: Path) -> None:
        _ = doc.write_bytes(encode_many([]))

        assert decode_many(doc) == []

    def test_terminator_is_stripped(self, doc: Path) -> None:
        _ = doc.write_bytes(encode_many([{"a": 1}, {"a": 2}]))

        assert decode_many(doc) == [{"a": 1}, {"a": 2}]

    def test_wrapped_collection(self, doc: Path) -> None:
        _ = doc.write_bytes(encode_many([1, 2], wrapper="items"))

        assert decode_many(doc) == [1, 2]

    def test_nulls_are_removed_in_order(self, doc: Path) -> None:
        _ = doc.write_bytes(b"[1, null, 2, null, 3]")

        assert decode_many(doc) == [1, 2, 3]

    def test_untyped_keeps_falsy_non_null_values(self, doc: Path) -> None:
        _ = doc.write_bytes(b'[0, "", false, {}, null]')

        assert decode_many(doc) == [0, "", False, {}]

    def test_typed_removes_zero_values(self, doc: Path) -> None:
        _ = doc.write_bytes(b"[0, 1, 0, 2, null]")

        assert decode_many(doc, int) == [1, 2]

    def test_typed_model_removes_default_instances(self, doc: Path) -> None:
        _ = doc.write_bytes(b'[{"count": 0}, {"count": 5}, null]')

        assert decode_many(doc, Counter) == [Counter(count=5)]

    def test_typed_model_without_zero_value(self, doc: Path) -> None:
        _ = doc.write_bytes(b'[{"id": 1}, {"id": 2}, null]')

        assert decode_many(doc, Item) == [Item(id=1), Item(id=2)]

    def test_non_array_raises(self, doc: Path) -> None:
        _ = doc.write_bytes(b'{"a": 1}')

        with pytest.raises(DocumentDecodeError, match="not an array"):
            _ = decode_many(doc)

    def test_element_validation_failure_raises(self, doc: Path) -> None:
        _ = doc.write_bytes(b'[{"id": "x"}, null]')

        with pytest.raises(DocumentDecodeError):
            _ = decode_many(doc, Item)

    def test_notice_line_is_ignored(self, doc: Path) -> None:
        _ = doc.write_bytes(GENERATED_NOTICE + b"\ncb(\n[\n1,\nnull\n]\n)\n")

        assert decode_many(doc) == [1]


class TestZeroValues:
    def test_untyped_has_no_zero_value(self) -> None:
        assert remove_zero_values([0, None, ""]) == [0, ""]

    def test_zero_value_of_builtin(self) -> None:
        assert zero_value(int) == 0
        assert zero_value(str) == ""

    def test_unconstructible_type_has_no_zero_value(self) -> None:
        assert zero_value(Item) not in [Item(id=0)]

    def test_remove_preserves_order(self) -> None:
        assert remove_zero_values(["b", "", "a", "c"], str) == ["b", "a", "c"]
