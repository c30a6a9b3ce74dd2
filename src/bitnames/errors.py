"""Exception hierarchy for record decoding and validation.

Two stages can fail:
1. Decoding — a descriptor envelope or record document is malformed.
   Raised at construction time; no partially-decoded object is returned.
2. Validation — a well-formed record declares an unsupported version or
   does not match the expected commitment. Both are terminal.

Configuration problems in the command-line tools raise ConfigError.
"""

from __future__ import annotations


class BitnamesError(Exception):
    """Base class for all errors raised by this package."""


class DecodeError(BitnamesError, ValueError):
    """A descriptor or record could not be decoded from its input."""


class ValidationError(BitnamesError):
    """A decoded record failed validation."""


class UnsupportedVersion(ValidationError):
    """The record's version is missing, not a string, or not supported."""

    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(f"version number missing or unsupported: {version!r}")


class CommitmentMismatch(ValidationError):
    """The record's recomputed commitment differs from the expected one."""

    def __init__(self, expected: bytes, actual: bytes) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "commitment does not match expected commitment "
            f"(expected {expected.hex()}, got {actual.hex()})"
        )


class ConfigError(BitnamesError, ValueError):
    """A setting from the environment or .env file is invalid."""
