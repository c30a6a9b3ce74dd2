"""Canonical JSON serialization (RFC 8785 / JCS) and content commitments.

A record's commitment is SHA-256 over its canonical UTF-8 bytes. The
commitment is anchored elsewhere by whoever published the record, so the
canonical form here must match theirs byte for byte:
- Object members sorted by the UTF-16 code units of their keys.
- No insignificant whitespace, no trailing newline.
- Strings escaped minimally: quote, backslash and control characters only.
- Numbers in ECMAScript Number.prototype.toString form.

json.dumps(sort_keys=True) is close but not sufficient: it sorts by code
point and formats floats in Python's repr style (1e+16 vs 1e16, 1.0 vs 1).
"""

from __future__ import annotations

import hashlib
import json
import math
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bitnames.models.json_value import JsonValue


COMMITMENT_SIZE = 32


def canonicalize(value: JsonValue) -> bytes:
    """Serialize a JSON value to its canonical UTF-8 bytes.

    Raises TypeError for values outside the JSON value model and
    ValueError for non-finite floats.
    """
    parts: list[str] = []
    _write(value, parts)
    return "".join(parts).encode("utf-8")


def sha256_commitment(value: JsonValue) -> bytes:
    """Compute the 32-byte SHA-256 commitment over the canonical form."""
    return hashlib.sha256(canonicalize(value)).digest()


def format_number(value: int | float) -> str:
    """Format a number the way ECMAScript's Number.prototype.toString does.

    Integers are written out in full; floats use the shortest digits that
    round-trip, switching to exponent form outside [1e-6, 1e21).
    """
    if isinstance(value, int):
        return str(value)
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"non-finite number cannot be canonicalized: {value!r}")
    if value == 0:
        return "0"  # includes -0.0

    sign = "-" if value < 0 else ""
    # repr() yields the shortest round-trip digits
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k  # position of the decimal point relative to digits

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * (-n) + digits

    e = n - 1
    mantissa = digits if k == 1 else f"{digits[0]}.{digits[1:]}"
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def _utf16_key(key: str) -> bytes:
    return key.encode("utf-16-be", "surrogatepass")


def _write(value: JsonValue, parts: list[str]) -> None:
    if value is None:
        parts.append("null")
    elif value is True:
        parts.append("true")
    elif value is False:
        parts.append("false")
    elif isinstance(value, (int, float)):
        parts.append(format_number(value))
    elif isinstance(value, str):
        parts.append(json.dumps(value, ensure_ascii=False))
    elif isinstance(value, (list, tuple)):
        parts.append("[")
        for i, item in enumerate(value):
            if i:
                parts.append(",")
            _write(item, parts)
        parts.append("]")
    elif isinstance(value, dict):
        for key in value:
            if not isinstance(key, str):
                raise TypeError(f"object keys must be str, got {type(key).__name__}")
        parts.append("{")
        for i, key in enumerate(sorted(value, key=_utf16_key)):
            if i:
                parts.append(",")
            parts.append(json.dumps(key, ensure_ascii=False))
            parts.append(":")
            _write(value[key], parts)
        parts.append("}")
    else:
        raise TypeError(f"not a JSON value: {type(value).__name__}")
