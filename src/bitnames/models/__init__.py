"""Data models for resolved BitNames records."""

from bitnames.models.json_value import JsonValue, load_json, load_json_object
from bitnames.models.descriptor import RecordDescriptor, decode_commitment
from bitnames.models.record import SUPPORTED_VERSION, WebRecord

__all__ = [
    "JsonValue",
    "RecordDescriptor",
    "SUPPORTED_VERSION",
    "WebRecord",
    "decode_commitment",
    "load_json",
    "load_json_object",
]
