"""Cryptographic primitives — canonical JSON and SHA-256 commitments."""

from bitnames.crypto.canonical import (
    COMMITMENT_SIZE,
    canonicalize,
    format_number,
    sha256_commitment,
)

__all__ = ["COMMITMENT_SIZE", "canonicalize", "format_number", "sha256_commitment"]
