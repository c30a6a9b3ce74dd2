"""Validation of BitNames web records against their descriptors."""

from bitnames.errors import (
    BitnamesError,
    CommitmentMismatch,
    ConfigError,
    DecodeError,
    UnsupportedVersion,
    ValidationError,
)
from bitnames.models import RecordDescriptor, SUPPORTED_VERSION, WebRecord

__version__ = "0.1.0"

__all__ = [
    "BitnamesError",
    "CommitmentMismatch",
    "ConfigError",
    "DecodeError",
    "RecordDescriptor",
    "SUPPORTED_VERSION",
    "UnsupportedVersion",
    "ValidationError",
    "WebRecord",
]
