"""Interface counter extraction (openconfig-interfaces state/counters).

Only updates whose path points into a ``/state/counters`` subtree are used.
The counters live under a fixed key of the update's value map and are decoded
into a flat CounterRecord. Leaf names may carry the module prefix
(``openconfig-interfaces:in-octets``) or not (``in-octets``); values may be
JSON numbers or decimal strings, as most collectors encode uint64 as strings.
"""
from __future__ import annotations

import json
from typing import Annotated, Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from envelope import TelemetryUpdate
from errors import CounterDecodeError, ExtractionError

COUNTERS_PATH_MARKER = "/state/counters"
COUNTERS_KEY = "interfaces/interface/state/counters"
OC_PREFIX = "openconfig-interfaces:"
MAX_COUNTER64 = 2 ** 64 - 1


def _uint_or_digits(v: Any) -> int:
    # JSON numbers must be integral (bool is rejected); strings must be plain decimal digits
    if isinstance(v, bool) or not isinstance(v, (int, str)):
        raise ValueError(f"counter must be an integer or a decimal string, got {type(v).__name__}")
    if isinstance(v, str):
        if not (v.isascii() and v.isdigit()):
            raise ValueError(f"counter string {v!r} is not a decimal integer")
        return int(v)
    return v


Counter64 = Annotated[int, BeforeValidator(_uint_or_digits), Field(ge=0, le=MAX_COUNTER64)]


def _leaf(name: str):
    return Field(default=None, validation_alias=AliasChoices(OC_PREFIX + name, name))


class CounterRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    in_octets: Optional[Counter64] = _leaf("in-octets")
    in_unicast_pkts: Optional[Counter64] = _leaf("in-unicast-pkts")
    in_broadcast_pkts: Optional[Counter64] = _leaf("in-broadcast-pkts")
    in_multicast_pkts: Optional[Counter64] = _leaf("in-multicast-pkts")
    in_discards: Optional[Counter64] = _leaf("in-discards")
    in_errors: Optional[Counter64] = _leaf("in-errors")
    in_unknown_protos: Optional[Counter64] = _leaf("in-unknown-protos")
    in_fcs_errors: Optional[Counter64] = _leaf("in-fcs-errors")
    out_octets: Optional[Counter64] = _leaf("out-octets")
    out_unicast_pkts: Optional[Counter64] = _leaf("out-unicast-pkts")
    out_broadcast_pkts: Optional[Counter64] = _leaf("out-broadcast-pkts")
    out_multicast_pkts: Optional[Counter64] = _leaf("out-multicast-pkts")
    out_discards: Optional[Counter64] = _leaf("out-discards")
    out_errors: Optional[Counter64] = _leaf("out-errors")
    carrier_transitions: Optional[Counter64] = _leaf("carrier-transitions")

    def present(self) -> Dict[str, int]:
        """Fields that were reported, in declaration order."""
        return {k: v for k, v in self if v is not None}


def is_counters_path(path: str) -> bool:
    return COUNTERS_PATH_MARKER in path


def decode_counters(value: Any) -> CounterRecord:
    # round-trip through JSON so numbers and strings go through the same decoder
    try:
        sub_json = json.dumps(value)
    except (TypeError, ValueError) as e:
        raise CounterDecodeError(f"marshaling counters: {e}") from e
    try:
        return CounterRecord.model_validate_json(sub_json)
    except ValidationError as e:
        raise CounterDecodeError(f"unmarshaling counters: {e}") from e


def extract_counters(update: TelemetryUpdate) -> CounterRecord:
    if COUNTERS_KEY not in update.values:
        raise ExtractionError("no counters found in update")
    return decode_counters(update.values[COUNTERS_KEY])
