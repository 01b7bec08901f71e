"""Document encoding.

Values are encoded to JSON bytes with orjson. Sequences are written one
element per line and always end with a ``null`` terminator entry, so the
array stays well-formed when empty and every real entry carries a trailing
separator. An optional wrapper name produces a JSONP-style payload that can be
loaded directly as a script.
"""

from collections.abc import Iterable, Sequence
from typing import Any, Final

import orjson
from pydantic import BaseModel

from gitjsondb.codec._types import OMIT, Marshaler, Omit, Transform
from gitjsondb.exceptions import MarshalError, TransformError

GENERATED_NOTICE: Final = b"// Generated by gitjsondb. DO NOT EDIT."

_TERMINATOR: Final = b"null"


def _default(value: Any) -> Any:  # pyright: ignore[reportAny,reportExplicitAny]
    """Serialize values orjson does not support natively."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Marshaler):
        return orjson.Fragment(value.marshal_json())
    if isinstance(value, (set, frozenset)):
        return list(value)  # pyright: ignore[reportUnknownArgumentType]
    msg = f"Type is not JSON serializable: {type(value).__name__}"
    raise TypeError(msg)


def marshal(value: object, *, index: int | None = None) -> bytes:
    """Marshal a single value to JSON bytes.

    A value implementing Marshaler encodes itself; anything else goes
    through orjson.

    Args:
        value: The value to marshal.
        index: Position of the value in its sequence, for error context.

    Returns:
        The JSON encoding.

    Raises:
        MarshalError: If the marshal hook fails or the value is not
            serializable.
    """
    try:
        if isinstance(value, Marshaler):
            return value.marshal_json()
        return orjson.dumps(value, default=_default)
    except Exception as e:
        msg = f"Failed to marshal {type(value).__name__}: {e}"
        raise MarshalError(msg, index=index, cause=e) from e


def _apply_transforms[T](
    item: T, transforms: Sequence[Transform[T]], index: int
) -> T | Omit:
    for transform in transforms:
        try:
            result = transform(item)
        except Exception as e:
            name = getattr(transform, "__name__", repr(transform))
            msg = f"Transform {name} failed on element {index}: {e}"
            raise TransformError(msg, index=index, cause=e) from e
        if result is OMIT:
            return OMIT
        item = result
    return item


def _wrap(payload: bytes, wrapper: str) -> bytes:
    if not wrapper:
        return payload
    prefix = GENERATED_NOTICE + b"\n" + wrapper.encode() + b"(\n"
    return prefix + payload + b")\n"


def encode_one(value: object, *, wrapper: str = "") -> bytes:
    """Encode a single record.

    Args:
        value: The record to encode.
        wrapper: Optional JSONP callback name.

    Returns:
        The encoded document.

    Raises:
        MarshalError: If the value cannot be marshaled.
    """
    return _wrap(marshal(value) + b"\n", wrapper)


def encode_many[T](
    values: Iterable[T], *transforms: Transform[T], wrapper: str = ""
) -> bytes:
    """Encode a sequence of records.

    Each element runs through the transforms in order. A transform returning
    OMIT drops the element and no later transform sees it.

    Args:
        values: The records to encode.
        *transforms: Write-time transforms applied to every element.
        wrapper: Optional JSONP callback name.

    Returns:
        The encoded document.

    Raises:
        TransformError: If a transform raises.
        MarshalError: If an element cannot be marshaled.

    Example:
        >>> encode_many([{"a": 1}, {"a": 2}])
        b'[\\n{"a":1},\\n{"a":2},\\nnull\\n]\\n'
    """
    lines = [b"["]
    for index, item in enumerate(values):
        transformed = _apply_transforms(item, transforms, index)
        if transformed is OMIT:
            continue
        lines.append(marshal(transformed, index=index) + b",")
    lines.append(_TERMINATOR)
    lines.append(b"]")
    return _wrap(b"\n".join(lines) + b"\n", wrapper)


def encode[T](
    value: T | Sequence[T], *transforms: Transform[T], wrapper: str = ""
) -> bytes:
    """Encode a record or a sequence of records.

    Lists and tuples are encoded with encode_many, anything else with
    encode_one. Transforms only apply to sequences.

    Args:
        value: The value to encode.
        *transforms: Write-time transforms for sequence elements.
        wrapper: Optional JSONP callback name.

    Returns:
        The encoded document.

    Raises:
        TransformError: If a transform raises.
        MarshalError: If a value cannot be marshaled.
    """
    if isinstance(value, (list, tuple)):
        return encode_many(value, *transforms, wrapper=wrapper)  # pyright: ignore[reportUnknownArgumentType]
    return encode_one(value, wrapper=wrapper)
