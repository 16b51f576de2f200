"""Tagged-type wire format.

Plain JSON cannot tell a 32-bit int from a 64-bit long, a date from a
timestamp, or a document reference from an ordinary object. The wire format
wraps such values in single-key objects whose key is a tag:

    {"@int": "1"}                 32-bit integer
    {"@long": "2147483648"}       64-bit integer
    {"@double": "1.5"}            IEEE double
    {"@date": "2023-03-09"}       calendar date
    {"@time": "2023-03-09T00:00:00Z"}  instant
    {"@mod": "Authors"}           module / collection reference
    {"@doc": "Authors:123"}       document reference
    {"@ref": {...}}, {"@set": {...}}  opaque descriptors
    {"@object": {...}}            escape for objects with "@" keys

Numeric payloads are always decimal strings so the receiver parses them at
full precision.

Usage:
    from fqlclient.wire.tagged import TaggedTypeFormat

    wire = TaggedTypeFormat.encode({"age": 42})     # {"age": {"@int": "42"}}
    value = TaggedTypeFormat.decode('{"@long": "9007199254740993"}')
"""

from __future__ import annotations

import json
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, Tuple, Union

from fqlclient.errors import DocumentFormatError, PrecisionLossError
from fqlclient.values import DateStub, DocumentReference, Module, TimeStub

TAG_PREFIX = "@"

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1
LONG_MIN = -(2 ** 63)
LONG_MAX = 2 ** 63 - 1
# Largest magnitude a double holds without losing integer precision
SAFE_INTEGER_MAX = 2 ** 53 - 1


class Tag(str, Enum):
    """Wire tag keys, in decode priority order."""
    MOD = "@mod"
    DOC = "@doc"
    REF = "@ref"
    SET = "@set"
    INT = "@int"
    LONG = "@long"
    DOUBLE = "@double"
    DATE = "@date"
    TIME = "@time"
    OBJECT = "@object"


DECODE_PRIORITY: Tuple[Tag, ...] = tuple(Tag)


# =============================================================================
# NUMERIC WIDTH INFERENCE
# =============================================================================

def infer_numeric_tag(value: Union[int, float]) -> Tag:
    """Choose the narrowest wire tag that holds ``value`` exactly.

    ints: 32-bit -> @int, 64-bit -> @long, wider -> PrecisionLossError.
    floats: integral and 32-bit -> @int, integral and safe -> @long,
    anything else -> @double. Infinities raise PrecisionLossError.
    """
    if isinstance(value, int):
        if INT_MIN <= value <= INT_MAX:
            return Tag.INT
        if LONG_MIN <= value <= LONG_MAX:
            return Tag.LONG
        raise PrecisionLossError(
            f"Precision loss when converting {value} to a 64-bit integer"
        )

    if math.isinf(value):
        raise PrecisionLossError(f"Cannot convert {value} to a wire number")
    if value.is_integer():
        if INT_MIN <= value <= INT_MAX:
            return Tag.INT
        if -SAFE_INTEGER_MAX <= value <= SAFE_INTEGER_MAX:
            return Tag.LONG
    return Tag.DOUBLE


def _encode_number(value: Union[int, float]) -> Dict[str, str]:
    tag = infer_numeric_tag(value)
    if isinstance(value, float):
        if math.isnan(value):
            text = "NaN"
        elif tag is Tag.DOUBLE:
            text = repr(value)
        else:
            text = str(int(value))
    else:
        text = str(value)
    return {tag.value: text}


# =============================================================================
# DECODE HANDLERS
# =============================================================================

def _decode_doc(payload: Any) -> Any:
    if isinstance(payload, str):
        return DocumentReference.from_string(payload)
    if isinstance(payload, dict):
        # Full document or a reference with extra metadata
        return payload
    raise DocumentFormatError(
        f"Expected a 'collection:id' string or an object but received {payload!r}"
    )


def _passthrough(payload: Any) -> Any:
    return payload


_DECODERS: Dict[Tag, Callable[[Any], Any]] = {
    Tag.MOD: Module,
    Tag.DOC: _decode_doc,
    Tag.REF: _passthrough,
    Tag.SET: _passthrough,
    Tag.INT: int,
    Tag.LONG: int,
    Tag.DOUBLE: float,
    Tag.DATE: DateStub.from_string,
    Tag.TIME: TimeStub.from_string,
    Tag.OBJECT: _passthrough,
}


def _decode_node(node: Any) -> Any:
    if isinstance(node, list):
        return [_decode_node(item) for item in node]
    if not isinstance(node, dict):
        return node
    for tag in DECODE_PRIORITY:
        if tag.value in node:
            payload = node[tag.value]
            if tag is Tag.OBJECT and isinstance(payload, dict):
                # Keys of an escaped object are data, never tags
                return {key: _decode_node(item) for key, item in payload.items()}
            return _DECODERS[tag](_decode_node(payload))
    return {key: _decode_node(item) for key, item in node.items()}


# =============================================================================
# PUBLIC API
# =============================================================================

class TaggedTypeFormat:
    """Encoding and decoding between Python values and tagged JSON."""

    @staticmethod
    def encode(value: Any) -> Any:
        """Encode a Python value into its tagged JSON form.

        Args:
            value: None, bool, str, int, float, DateStub, TimeStub, date,
                datetime, Module, DocumentReference, or a list/tuple/dict of
                those.

        Returns:
            JSON-serializable structure.

        Raises:
            PrecisionLossError: Number outside every wire numeric range.
            TypeError: Unsupported value type or non-string mapping key.
        """
        if value is None:
            return None
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return value
        if isinstance(value, Module):
            return {Tag.MOD.value: str(value)}
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)):
            return _encode_number(value)
        if isinstance(value, DateStub):
            return {Tag.DATE.value: value.date_string}
        if isinstance(value, TimeStub):
            return {Tag.TIME.value: value.iso_string}
        # datetime before date: datetime is a date subclass
        if isinstance(value, datetime):
            return {Tag.TIME.value: TimeStub.from_datetime(value).iso_string}
        if isinstance(value, date):
            return {Tag.DATE.value: DateStub.from_date(value).date_string}
        if isinstance(value, DocumentReference):
            return {Tag.DOC.value: f"{value.coll}:{value.id}"}
        if isinstance(value, (list, tuple)):
            return [TaggedTypeFormat.encode(item) for item in value]
        if isinstance(value, dict):
            return TaggedTypeFormat._encode_mapping(value)
        raise TypeError(f"Cannot encode value of type {type(value).__name__}")

    @staticmethod
    def _encode_mapping(mapping: Dict[Any, Any]) -> Dict[str, Any]:
        wrapped = False
        out: Dict[str, Any] = {}
        for key, item in mapping.items():
            if not isinstance(key, str):
                raise TypeError(
                    f"Object keys must be strings, got {type(key).__name__}"
                )
            if key.startswith(TAG_PREFIX):
                wrapped = True
            out[key] = TaggedTypeFormat.encode(item)
        return {Tag.OBJECT.value: out} if wrapped else out

    @staticmethod
    def decode(text: Union[str, bytes]) -> Any:
        """Decode tagged JSON text into Python values.

        Payloads are decoded before the tag that wraps them, so nested tags
        are already native values when their parent is converted. Keys
        inside an @object escape are never read as tags.

        Raises:
            json.JSONDecodeError: Text is not JSON.
            DateTimeFormatError: Malformed @date / @time payload.
            DocumentFormatError: Malformed @doc payload.
        """
        return _decode_node(json.loads(text))


__all__ = [
    "TAG_PREFIX",
    "Tag",
    "DECODE_PRIORITY",
    "INT_MIN",
    "INT_MAX",
    "LONG_MIN",
    "LONG_MAX",
    "SAFE_INTEGER_MAX",
    "TaggedTypeFormat",
    "infer_numeric_tag",
]
