"""gNMI envelope -> N-Triples pipeline.

    responses -> updates (path filter) -> CounterRecord -> InterfaceEntity -> triples

A failing update is reported through ``on_error`` and skipped; its siblings
and the following responses are still converted. Only an envelope decode
error stops a conversion.
"""
from __future__ import annotations

import os
import sys
from typing import Callable, Dict, Iterable, Iterator, List, NamedTuple, Optional, Union

from rdflib import URIRef

from config import Settings
from counters import extract_counters, is_counters_path
from envelope import TelemetryResponse, TelemetryUpdate, parse_envelope
from errors import ConversionError, ExtractionError, ResponseProcessingError
from ifname import parse_interface_name
from ntriples import ALL_COUNTER_PREDICATES, DEFAULT_PREDICATES, InterfaceEntity, Triple, to_triples

ErrorHandler = Callable[[ResponseProcessingError], None]


class ConversionResult(NamedTuple):
    triples: List[Triple]
    errors: List[ResponseProcessingError]


def report_error(err: ResponseProcessingError) -> None:
    print(f"[gnmi-nt] failed to process update from {err.source}: {err}", file=sys.stderr)


def predicates_for(settings: Settings) -> Dict[str, URIRef]:
    return ALL_COUNTER_PREDICATES if settings.all_counters else DEFAULT_PREDICATES


def process_update(update: TelemetryUpdate, source: str = "", settings: Optional[Settings] = None) -> List[Triple]:
    """Triples for one update; [] when the path is not a counters subtree."""
    if not is_counters_path(update.path):
        return []
    settings = settings or Settings()

    stage = "extracting counters"
    try:
        counters = extract_counters(update)
        stage = "resolving interface name"
        name = parse_interface_name(update.path)
        if not name:
            raise ExtractionError(f"invalid interface name in path: {update.path}")
        stage = "converting to N-Triples"
        iface = InterfaceEntity(name=name, counters=counters)
        return to_triples(iface, predicates_for(settings), settings.base_uri)
    except ConversionError as e:
        raise ResponseProcessingError(f"{stage}: {e}", source=source, path=update.path) from e


def process_response(
    resp: TelemetryResponse,
    settings: Optional[Settings] = None,
    on_error: ErrorHandler = report_error,
) -> List[Triple]:
    if os.getenv("GNMI_NT_DEBUG") == "1":
        print(f"[gnmi-nt] response source={resp.source} time={resp.time} updates={len(resp.updates)}", file=sys.stderr)
    out: List[Triple] = []
    for update in resp.updates:
        try:
            out.extend(process_update(update, resp.source, settings))
        except ResponseProcessingError as e:
            on_error(e)
    return out


def convert(
    responses: Iterable[TelemetryResponse],
    settings: Optional[Settings] = None,
    on_error: ErrorHandler = report_error,
) -> Iterator[Triple]:
    for resp in responses:
        yield from process_response(resp, settings, on_error)


def convert_document(raw: Union[bytes, str], settings: Optional[Settings] = None) -> ConversionResult:
    """Decode an envelope and convert it, collecting per-update errors.

    Raises EnvelopeDecodeError when the document itself cannot be decoded.
    """
    responses = parse_envelope(raw)
    errors: List[ResponseProcessingError] = []
    triples = list(convert(responses, settings, on_error=errors.append))
    return ConversionResult(triples, errors)
