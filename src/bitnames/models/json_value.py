"""JSON value model shared by records and descriptors.

The value space is closed: null, boolean, number, string, array, object.
Python's json module is more permissive than the producers of BitNames
records, so decoding is tightened here:
- NaN / Infinity literals are rejected.
- Integers outside the 64-bit range decode as floats, as they would for
  a producer without arbitrary-precision integers.
- Strings and keys holding lone surrogates (e.g. "\\ud800") are rejected;
  they have no UTF-8 encoding and so no canonical form.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from typing import Any, Union

from bitnames.errors import DecodeError


JsonValue = Union[None, bool, int, float, str, list["JsonValue"], dict[str, "JsonValue"]]

_INT_MIN = -(2 ** 63)
_INT_MAX = 2 ** 64  # exclusive
# 2**64 has 20 digits; anything longer is out of range without parsing it
_INT_MAX_DIGITS = 20

_SURROGATE_PATTERN = re.compile(r"[\ud800-\udfff]")


def _parse_int(text: str) -> int | float:
    if len(text.lstrip("-")) > _INT_MAX_DIGITS:
        return _parse_float(text)
    value = int(text)
    if _INT_MIN <= value < _INT_MAX:
        return value
    return _parse_float(text)


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise DecodeError(f"number out of range: {text[:40]}")
    return value


def _reject_constant(name: str) -> Any:
    raise DecodeError(f"non-standard JSON literal: {name}")


def load_json(data: bytes | str) -> JsonValue:
    """Decode a JSON document into the value model.

    Raises DecodeError on malformed input.
    """
    try:
        value = json.loads(
            data,
            parse_int=_parse_int,
            parse_float=_parse_float,
            parse_constant=_reject_constant,
        )
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid JSON: {e}") from e

    try:
        return check_value(value)
    except ValueError as e:
        raise DecodeError(f"invalid JSON: {e}") from e


def load_json_object(data: bytes | str) -> dict[str, JsonValue]:
    """Decode a JSON document whose top level must be an object."""
    value = load_json(data)
    if not isinstance(value, dict):
        raise DecodeError(
            f"expected a JSON object at top level, got {type(value).__name__}"
        )
    return value


def check_value(value: Any) -> JsonValue:
    """Return a detached copy of value, checked against the value model.

    Mappings become dicts and sequences become lists. Raises TypeError
    for objects outside the model (including non-str keys) and ValueError
    for non-finite floats and strings holding lone surrogates.
    """
    if value is None or isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f"non-finite number: {value!r}")
        return value
    if isinstance(value, str):
        _check_string(value)
        return value
    if isinstance(value, (list, tuple)):
        return [check_value(item) for item in value]
    if isinstance(value, Mapping):
        checked: dict[str, JsonValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"object keys must be str, got {type(key).__name__}")
            _check_string(key)
            checked[key] = check_value(item)
        return checked
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def _check_string(text: str) -> None:
    match = _SURROGATE_PATTERN.search(text)
    if match is not None:
        raise ValueError(
            f"lone surrogate U+{ord(match.group()):04X} at index {match.start()}"
        )
