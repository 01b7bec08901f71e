# ruff: noqa: TC003  # Path needed at runtime for signature annotations
"""Document decoding.

Files may hold bare JSON or a JSONP-style wrapped payload. The wrapper is
detected with bounded lookahead over the first and last bytes of the file
rather than a full parse, so wrapper text and surrounding whitespace must fit
within WRAPPER_LOOKAHEAD bytes of either edge.

Decoded sequences drop every zero-valued element. This strips the ``null``
terminator written by encode_many, and also removes legitimately zero-valued
elements, which cannot be told apart from the terminator.
"""

from pathlib import Path
from typing import Any, Final, overload

import orjson
from pydantic import TypeAdapter, ValidationError

from gitjsondb.exceptions import DocumentDecodeError

WRAPPER_LOOKAHEAD: Final = 100

_NO_ZERO: Final = object()


def _find_first(data: bytes, chars: bytes) -> int:
    positions = [pos for pos in (data.find(bytes([c])) for c in chars) if pos >= 0]
    return min(positions, default=-1)


def _find_last(data: bytes, chars: bytes) -> int:
    return max(data.rfind(bytes([c])) for c in chars)


def payload_bounds(data: bytes) -> tuple[int, int]:
    """Locate the JSON payload inside a possibly wrapped document.

    Only the first and last WRAPPER_LOOKAHEAD bytes are inspected. A ``(``
    before the earliest ``[`` or ``{`` of the head marks a wrapper prefix; a
    ``)`` after the latest ``]`` or ``}`` of the tail marks a wrapper suffix.

    Args:
        data: The raw document bytes.

    Returns:
        Tuple of (start, end) offsets of the payload.
    """
    start, end = 0, len(data)

    head = data[:WRAPPER_LOOKAHEAD]
    opening = _find_first(head, b"[{")
    paren = head.find(b"(")
    if paren > -1 and paren < opening:
        start = paren + 1

    tail_offset = max(len(data) - WRAPPER_LOOKAHEAD, 0)
    tail = data[tail_offset:]
    closing = _find_last(tail, b"]}")
    paren = tail.rfind(b")")
    if paren > -1 and paren > closing:
        end = tail_offset + paren

    return start, end


def _load(path: Path) -> object:
    data = path.read_bytes()
    start, end = payload_bounds(data)
    try:
        return orjson.loads(data[start:end])
    except orjson.JSONDecodeError as e:
        msg = f"Failed to parse document {path}: {e}"
        raise DocumentDecodeError(msg, path=path, cause=e) from e


def _validate[T](path: Path, adapter: TypeAdapter[T], raw: object) -> T:
    try:
        return adapter.validate_python(raw)
    except ValidationError as e:
        msg = f"Document {path} does not match the expected type: {e}"
        raise DocumentDecodeError(msg, path=path, cause=e) from e


def zero_value(item_type: type[Any] | None) -> object:  # pyright: ignore[reportExplicitAny]
    """Get the zero value of a type.

    The zero value is what the type constructs with no arguments (0, "",
    False, or a model with all defaults). Types that cannot be constructed
    that way have no zero value besides None.

    Args:
        item_type: The element type, or None for untyped JSON.

    Returns:
        The zero value, or a sentinel that compares equal to nothing.
    """
    if item_type is None:
        return _NO_ZERO
    try:
        return item_type()
    except Exception:  # noqa: BLE001 - any constructor failure means no zero value
        return _NO_ZERO


def remove_zero_values[T](items: list[T], item_type: type[T] | None = None) -> list[T]:
    """Remove zero-valued elements, preserving the order of the rest.

    None is always a zero value. When item_type is given, elements equal to
    its zero value are removed as well.

    Args:
        items: The decoded elements.
        item_type: The element type, or None for untyped JSON.

    Returns:
        A new list without zero-valued elements.
    """
    zero = zero_value(item_type)
    return [item for item in items if item is not None and item != zero]


@overload
def decode(path: Path, type_: None = None, *, default: object = None) -> object: ...


@overload
def decode[T](path: Path, type_: type[T], *, default: T | None = None) -> T | None: ...


def decode(
    path: Path,
    type_: type[Any] | None = None,  # pyright: ignore[reportExplicitAny]
    *,
    default: object = None,
) -> object:
    """Decode a single-record document.

    Args:
        path: The document file.
        type_: Optional type to validate the record into.
        default: Returned unchanged when the file does not exist.

    Returns:
        The decoded record, or default if the file is missing.

    Raises:
        DocumentDecodeError: If the file cannot be parsed or validated.
    """
    try:
        raw = _load(path)
    except FileNotFoundError:
        return default
    if type_ is None:
        return raw
    return _validate(path, TypeAdapter(type_), raw)


@overload
def decode_many(
    path: Path, item_type: None = None, *, default: list[object] | None = None
) -> list[object] | None: ...


@overload
def decode_many[T](
    path: Path, item_type: type[T], *, default: list[T] | None = None
) -> list[T] | None: ...


def decode_many(
    path: Path,
    item_type: type[Any] | None = None,  # pyright: ignore[reportExplicitAny]
    *,
    default: list[Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[Any] | None:  # pyright: ignore[reportExplicitAny]
    """Decode a collection document.

    Null entries are dropped before validation, then every element equal to
    the zero value of item_type is removed.

    Args:
        path: The document file.
        item_type: Optional element type to validate into.
        default: Returned unchanged when the file does not exist.

    Returns:
        The decoded elements, or default if the file is missing.

    Raises:
        DocumentDecodeError: If the file cannot be parsed, is not an array,
            or an element fails validation.
    """
    try:
        raw = _load(path)
    except FileNotFoundError:
        return default
    if not isinstance(raw, list):
        msg = f"Document {path} is not an array"
        raise DocumentDecodeError(msg, path=path)

    items: list[Any] = [item for item in raw if item is not None]  # pyright: ignore[reportExplicitAny,reportUnknownVariableType]
    if item_type is not None:
        items = _validate(path, TypeAdapter(list[item_type]), items)
    return remove_zero_values(items, item_type)
