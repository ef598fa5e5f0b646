#!/usr/bin/env python3
"""gNMI JSON (interface counters) -> RDF N-Triples converter.

Usage:
    python gnmi_to_ntriples.py data/sample_gnmi.json > counters.nt
    gnmic ... get --format json | python gnmi_to_ntriples.py -
    python gnmi_to_ntriples.py in.json -o out.nt --all-counters --event-log ./logs

Exit codes:
    0 converted (per-update errors are reported on stderr)
    1 --strict and at least one update failed
    2 input / config / envelope error, nothing converted
"""
from __future__ import annotations

import argparse
import contextlib
import os
import sys
from typing import List, Optional

from config import load_settings
from envelope import parse_envelope, read_input
from errors import ConfigError, EnvelopeDecodeError, ResponseProcessingError
from eventlog import EventLog
from ntriples import format_triple
from pipeline import convert, report_error


def _open_output(path: Optional[str]):
    if not path or path == "-":
        return contextlib.nullcontext(sys.stdout)
    return open(path, "w", encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Convert gNMI interface counters to RDF N-Triples")
    ap.add_argument("input", nargs="?", default=os.getenv("GNMI_NT_INPUT"),
                    help="gNMI JSON file ('-' or omitted = stdin)")
    ap.add_argument("-o", "--output", help="Write N-Triples here instead of stdout")
    ap.add_argument("--config", default=os.getenv("GNMI_NT_CONFIG"), help="YAML settings file")
    ap.add_argument("--all-counters", action="store_true", default=None,
                    help="Emit every counter, not only inOctets/inBroadcastPkts")
    ap.add_argument("--base-uri", metavar="TEMPLATE", help="Subject IRI template containing {name}")
    ap.add_argument("--event-log", metavar="DIR", help="Directory for the JSONL event log")
    ap.add_argument("--strict", action="store_true", help="Exit 1 if any update failed")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            base_uri=args.base_uri,
            all_counters=args.all_counters,
            log_dir=args.event_log,
        )
    except ConfigError as e:
        print(f"[gnmi-nt] config error: {e}", file=sys.stderr)
        return 2

    events = EventLog.open(settings.log_dir)
    events.write("start", {"input": args.input or "-", "settings": settings.model_dump()})

    try:
        raw = read_input(args.input)
    except OSError as e:
        print(f"[gnmi-nt] cannot read input: {e}", file=sys.stderr)
        events.write("input_error", str(e))
        return 2

    try:
        responses = parse_envelope(raw)
    except EnvelopeDecodeError as e:
        print(f"[gnmi-nt] failed to parse gNMI JSON: {e}", file=sys.stderr)
        events.write("envelope_error", str(e))
        return 2

    failed: List[ResponseProcessingError] = []

    def on_error(err: ResponseProcessingError) -> None:
        failed.append(err)
        report_error(err)
        events.write("update_error", err.as_dict())

    count = 0
    try:
        with _open_output(args.output) as out:
            for triple in convert(responses, settings, on_error):
                out.write(format_triple(triple) + "\n")
                count += 1
    except OSError as e:
        print(f"[gnmi-nt] cannot write output: {e}", file=sys.stderr)
        events.write("output_error", str(e))
        return 2

    events.write("done", {"responses": len(responses), "triples": count, "errors": len(failed)})
    if failed and args.strict:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
