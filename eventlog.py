"""JSONL event log, one file per run.

    log = EventLog.open(Path("./logs"))
    log.write("update_error", {...})

Each line: {"ts": ISO-8601 UTC, "no": sequence, "tag": str, "content": any}.
Write failures are ignored; the event log must never stop a conversion.
"""
from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

TS_FMT = "%Y%m%d-%H%M%S"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class EventLog:
    def __init__(self, path: Optional[Path] = None):
        self.path = path
        self._no = 0

    @classmethod
    def open(cls, log_dir: Optional[str]) -> "EventLog":
        if not log_dir:
            return cls(None)
        d = Path(log_dir).expanduser().resolve()
        try:
            d.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            print(f"[gnmi-nt] event log disabled: {e}", file=sys.stderr)
            return cls(None)
        start = datetime.now(timezone.utc).strftime(TS_FMT)
        return cls(d / f"gnmi_nt_events_{start}.jsonl")

    def write(self, tag: str, content: Any) -> None:
        if self.path is None:
            return
        self._no += 1
        rec = {"ts": _now(), "no": self._no, "tag": tag, "content": content}
        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(rec, ensure_ascii=False) + "\n")
        except OSError:
            pass
