"""Document codec.

Stateless encoding and decoding of single records and record sequences to
and from JSON, with optional JSONP-style wrappers and write-time transforms.

Functions:
    encode: Encode a record or sequence, dispatching on the value shape.
    encode_one: Encode a single record.
    encode_many: Encode a sequence with transforms and a null terminator.
    decode: Decode a single-record document file.
    decode_many: Decode a collection document file, dropping zero values.

Example:
    >>> from gitjsondb.codec import OMIT, encode_many
    >>> payload = encode_many(
    ...     [{"id": 1, "secret": "x"}, {"id": 2, "secret": "y"}],
    ...     lambda item: OMIT if item["id"] == 2 else item,
    ...     wrapper="loadItems",
    ... )
"""

from gitjsondb.codec._decode import (
    WRAPPER_LOOKAHEAD,
    decode,
    decode_many,
    payload_bounds,
    remove_zero_values,
    zero_value,
)
from gitjsondb.codec._encode import (
    GENERATED_NOTICE,
    encode,
    encode_many,
    encode_one,
    marshal,
)
from gitjsondb.codec._types import OMIT, Marshaler, Omit, Transform

__all__ = [
    "GENERATED_NOTICE",
    "OMIT",
    "WRAPPER_LOOKAHEAD",
    "Marshaler",
    "Omit",
    "Transform",
    "decode",
    "decode_many",
    "encode",
    "encode_many",
    "encode_one",
    "marshal",
    "payload_bounds",
    "remove_zero_values",
    "zero_value",
]
