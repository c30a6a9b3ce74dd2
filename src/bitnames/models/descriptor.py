"""Record descriptor — the header half of a BitNames resolution.

A descriptor says where a name's web record lives and what it should hash
to. It arrives as a structured envelope:

    {
        "commitment": "<64 hex chars>",
        "ip4_addr": "203.0.113.7",
        "ip6_addr": "2001:db8::7"
    }

Every field is optional. A missing key or null value means absent; a
present but malformed value fails the whole decode. No partially-valid
descriptor is ever constructed.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from bitnames.crypto.canonical import COMMITMENT_SIZE
from bitnames.errors import DecodeError
from bitnames.models.json_value import load_json_object


logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_COMMITMENT_PATTERN = re.compile(r"[0-9a-fA-F]{%d}" % (COMMITMENT_SIZE * 2))


@dataclass(frozen=True)
class RecordDescriptor:
    """Decoded descriptor fields. Immutable, compared by value."""
    commitment: Optional[bytes] = None
    address_v4: Optional[ipaddress.IPv4Address] = None
    address_v6: Optional[ipaddress.IPv6Address] = None

    @classmethod
    def from_dict(cls, envelope: Mapping[str, Any]) -> RecordDescriptor:
        """Decode a descriptor from its envelope.

        Raises DecodeError if any present field is malformed.
        """
        return cls(
            commitment=_decode_optional(envelope, "commitment", decode_commitment),
            address_v4=_decode_optional(envelope, "ip4_addr", _decode_ipv4),
            address_v6=_decode_optional(envelope, "ip6_addr", _decode_ipv6),
        )

    @classmethod
    def from_json(cls, data: bytes | str) -> RecordDescriptor:
        return cls.from_dict(load_json_object(data))

    def resolved_address(self) -> IPAddress | None:
        """Return the IPv6 address if present, else IPv4, else None."""
        if self.address_v6 is not None:
            return self.address_v6
        return self.address_v4

    def commitment_hex(self) -> str | None:
        return self.commitment.hex() if self.commitment is not None else None

    def to_dict(self) -> dict[str, str]:
        """Envelope form. Absent fields are omitted."""
        envelope: dict[str, str] = {}
        if self.commitment is not None:
            envelope["commitment"] = self.commitment.hex()
        if self.address_v4 is not None:
            envelope["ip4_addr"] = str(self.address_v4)
        if self.address_v6 is not None:
            envelope["ip6_addr"] = str(self.address_v6)
        return envelope


def decode_commitment(text: str) -> bytes:
    """Decode a hex-encoded 32-byte commitment.

    Exactly 64 hex digits, either case, no prefix or separators.
    """
    if not isinstance(text, str):
        raise DecodeError(f"commitment must be a hex string, got {type(text).__name__}")
    if not _COMMITMENT_PATTERN.fullmatch(text):
        raise DecodeError(
            f"commitment must be {COMMITMENT_SIZE * 2} hex characters, "
            f"got: {text[:80]!r}"
        )
    return bytes.fromhex(text)


def _decode_ipv4(text: str) -> ipaddress.IPv4Address:
    if not isinstance(text, str):
        raise DecodeError(f"ip4_addr must be a string, got {type(text).__name__}")
    try:
        return ipaddress.IPv4Address(text)
    except ValueError as e:
        raise DecodeError(f"invalid IPv4 address: {text!r}") from e


def _decode_ipv6(text: str) -> ipaddress.IPv6Address:
    if not isinstance(text, str):
        raise DecodeError(f"ip6_addr must be a string, got {type(text).__name__}")
    # Zone identifiers are not part of an address literal
    if "%" in text:
        raise DecodeError(f"invalid IPv6 address: {text!r}")
    try:
        return ipaddress.IPv6Address(text)
    except ValueError as e:
        raise DecodeError(f"invalid IPv6 address: {text!r}") from e


def _decode_optional(
    envelope: Mapping[str, Any], key: str, decode: Callable[[Any], Any]
) -> Any:
    raw = envelope.get(key)
    if raw is None:
        return None
    try:
        return decode(raw)
    except DecodeError as e:
        logger.debug("descriptor field %s rejected: %s", key, e)
        raise
