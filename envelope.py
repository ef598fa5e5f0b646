"""gNMI JSON envelope decoding.

The envelope is the JSON array gnmic-style collectors print for a Get/Subscribe:

    [
      {
        "source": "192.168.151.7:6030",
        "time": "1970-01-01T01:00:00+01:00",
        "updates": [
          {"Path": "interfaces/interface[name=Ethernet8]/state/counters",
           "values": {"interfaces/interface/state/counters": {...}}}
        ]
      }
    ]

Usage:
    from envelope import parse_envelope
    responses = parse_envelope(raw_bytes)

Decoding is all-or-nothing: any JSON or shape error raises EnvelopeDecodeError
and no responses are returned.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, List, Optional, Tuple, Union

from jsonschema import Draft202012Validator
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from errors import EnvelopeDecodeError

ENVELOPE_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "gNMI JSON envelope",
    "type": "array",
    "items": {"$ref": "#/$defs/response"},
    "$defs": {
        "response": {
            "type": "object",
            "required": ["source", "time", "updates"],
            "properties": {
                "source": {"type": "string"},
                "time": {"type": "string"},
                "updates": {"type": "array", "items": {"$ref": "#/$defs/update"}},
            },
        },
        "update": {
            "type": "object",
            # gnmic prints "Path"; accept the lower-case spelling as well
            "anyOf": [{"required": ["Path"]}, {"required": ["path"]}],
            "properties": {
                "Path": {"type": "string"},
                "path": {"type": "string"},
                "values": {"type": ["object", "null"]},
            },
        },
    },
}

_VALIDATOR = Draft202012Validator(ENVELOPE_SCHEMA)


class TelemetryUpdate(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(validation_alias=AliasChoices("Path", "path"))
    values: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("values", mode="before")
    @classmethod
    def _null_values(cls, v: Any) -> Any:
        # a null map behaves like an update without counters
        return {} if v is None else v


class TelemetryResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    time: str
    updates: Tuple[TelemetryUpdate, ...] = ()


_RESPONSES = TypeAdapter(List[TelemetryResponse])


def schema_errors(doc: Any) -> List[str]:
    """Return human readable schema violations, empty when the document is valid."""
    errors = sorted(_VALIDATOR.iter_errors(doc), key=lambda e: e.json_path)
    return [f"{err.json_path}: {err.message}" for err in errors]


def parse_envelope(raw: Union[bytes, str]) -> List[TelemetryResponse]:
    try:
        doc = json.loads(raw)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueError
        raise EnvelopeDecodeError(f"unmarshaling JSON: {e}") from e

    problems = schema_errors(doc)
    if problems:
        raise EnvelopeDecodeError("unexpected envelope shape: " + "; ".join(problems))

    try:
        return _RESPONSES.validate_python(doc)
    except ValidationError as e:
        raise EnvelopeDecodeError(f"decoding envelope: {e}") from e


def read_input(path: Optional[str]) -> bytes:
    """Read raw bytes from a file path, or stdin for None / '-'."""
    if not path or path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def load_envelope(path: Optional[str]) -> List[TelemetryResponse]:
    return parse_envelope(read_input(path))
