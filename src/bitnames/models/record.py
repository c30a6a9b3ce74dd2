"""Web record — the document a BitName resolves to.

A web record is a JSON object fetched from the address in the name's
descriptor. It is accepted only if:
1. It declares the supported schema version ("version": "0.0.1").
2. Its content commitment matches the expected commitment, when one is
   supplied (usually the descriptor's on-chain commitment).

The commitment is SHA-256 over the record's RFC 8785 canonical form, so
key order and whitespace in the fetched bytes do not affect it.

After validation, callers read optional enrichment fields through the
typed accessors. Accessors never raise: a missing key or a value of the
wrong type yields None.
"""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Iterator, Optional

from bitnames.crypto.canonical import canonicalize, sha256_commitment
from bitnames.errors import CommitmentMismatch, UnsupportedVersion, ValidationError
from bitnames.models.json_value import JsonValue, check_value, load_json_object


logger = logging.getLogger(__name__)

SUPPORTED_VERSION = "0.0.1"

VERSION_KEY = "version"
TELEGRAM_KEY = "telegram"
INTRODUCTIONS_KEY = "introductions"
FEE_KEY = "fee"

# Plain decimal notation only: no exponent, no NaN/Infinity, no whitespace
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


class WebRecord(Mapping):
    """A resolved web record. Read-only mapping of str to JSON value.

    Usage:
        record = WebRecord.from_json(fetched_bytes)
        record.validate(descriptor.commitment)
        fee = record.introduction_fee()
    """

    def __init__(self, document: Mapping[str, JsonValue]) -> None:
        """Take a detached, checked copy of document.

        Raises TypeError for a non-mapping document, non-str keys or values
        outside the JSON model, and ValueError for values with no canonical
        form (non-finite floats, lone surrogates).
        """
        if not isinstance(document, Mapping):
            raise TypeError(f"record must be a mapping, got {type(document).__name__}")
        self._document: dict[str, JsonValue] = check_value(document)

    @classmethod
    def from_json(cls, data: bytes | str) -> WebRecord:
        """Decode a record from JSON. Raises DecodeError if malformed."""
        return cls(load_json_object(data))

    def __getitem__(self, key: str) -> JsonValue:
        return _detached(self._document[key])

    def __iter__(self) -> Iterator[str]:
        return iter(self._document)

    def __len__(self) -> int:
        return len(self._document)

    def __repr__(self) -> str:
        return f"WebRecord({self._document!r})"

    # ------------------------------------------------------------------
    # Commitment
    # ------------------------------------------------------------------

    def canonical_bytes(self) -> bytes:
        return canonicalize(self._document)

    def commitment(self) -> bytes:
        """SHA-256 over the canonical form. Always 32 bytes."""
        return sha256_commitment(self._document)

    def commitment_hex(self) -> str:
        return self.commitment().hex()

    def commitment_ok(self, expected: bytes) -> bool:
        return self.commitment() == bytes(expected)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def version_ok(self) -> bool:
        """True only if "version" is exactly the supported string."""
        version = self._document.get(VERSION_KEY)
        return isinstance(version, str) and version == SUPPORTED_VERSION

    def validate(self, expected_commitment: Optional[bytes] = None) -> None:
        """Check version, then commitment if one is expected.

        Raises UnsupportedVersion or CommitmentMismatch.
        """
        if not self.version_ok():
            version = self._document.get(VERSION_KEY)
            logger.debug("record rejected: unsupported version %r", version)
            raise UnsupportedVersion(version)

        if expected_commitment is not None:
            actual = self.commitment()
            if actual != bytes(expected_commitment):
                logger.debug(
                    "record rejected: commitment %s != expected %s",
                    actual.hex(), bytes(expected_commitment).hex(),
                )
                raise CommitmentMismatch(bytes(expected_commitment), actual)

        logger.debug(
            "record validated (commitment %s)",
            "checked" if expected_commitment is not None else "not pinned",
        )

    def is_valid(self, expected_commitment: Optional[bytes] = None) -> bool:
        try:
            self.validate(expected_commitment)
        except ValidationError:
            return False
        return True

    # ------------------------------------------------------------------
    # Typed fields
    # ------------------------------------------------------------------

    def handle(self) -> str | None:
        """The Telegram handle, if present as a string."""
        value = self._document.get(TELEGRAM_KEY)
        return value if isinstance(value, str) else None

    telegram = handle

    def introductions(self) -> dict[str, JsonValue] | None:
        value = self._introductions()
        return _detached(value) if value is not None else None

    def _introductions(self) -> dict[str, JsonValue] | None:
        value = self._document.get(INTRODUCTIONS_KEY)
        return value if isinstance(value, dict) else None

    def introduction_fee(self, handle: str = TELEGRAM_KEY) -> Decimal | None:
        """Resolve the introduction fee for a handle.

        The handle-specific entry wins if the key exists at all; only when
        it is absent does the generic "fee" entry apply. The chosen entry
        must be a decimal string.
        """
        introductions = self._introductions()
        if introductions is None:
            return None
        if handle in introductions:
            raw = introductions[handle]
        else:
            raw = introductions.get(FEE_KEY)
        return _parse_fee(raw)


def _detached(value: JsonValue) -> JsonValue:
    # Containers are copied so callers cannot change the committed content
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


def _parse_fee(raw: JsonValue) -> Decimal | None:
    if not isinstance(raw, str) or not _DECIMAL_PATTERN.fullmatch(raw):
        return None
    try:
        return Decimal(raw)
    except InvalidOperation:
        return None
