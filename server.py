#!/usr/bin/env python3
# gnmi-ntriples HTTP service
# For local run: uvicorn server:app --host 0.0.0.0 --port 9002
import os
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from fastapi.concurrency import run_in_threadpool

from config import load_settings
from errors import ConfigError, EnvelopeDecodeError
from ntriples import serialize
from pipeline import convert_document, report_error

CONFIG_PATH = os.getenv("GNMI_NT_CONFIG")
NTRIPLES_MEDIA_TYPE = "application/n-triples"

app = FastAPI(title="gnmi-ntriples")


@app.get("/health")
def health():
    info = {"ok": True, "ts": datetime.now(timezone.utc).isoformat(), "config": CONFIG_PATH}
    try:
        settings = load_settings(CONFIG_PATH)
        info["base_uri"] = settings.base_uri
        info["all_counters"] = settings.all_counters
    except ConfigError as e:
        info["ok"] = False
        info["error"] = str(e)
    return info


@app.post("/convert")
async def convert(request: Request, all_counters: Optional[bool] = None):
    try:
        settings = load_settings(CONFIG_PATH, all_counters=all_counters)
    except ConfigError as e:
        return JSONResponse({"ok": False, "error": f"config error: {e}"}, status_code=500)

    raw = await request.body()
    try:
        result = await run_in_threadpool(convert_document, raw, settings)
    except EnvelopeDecodeError as e:
        return JSONResponse({"ok": False, "error": str(e)}, status_code=400)

    for err in result.errors:
        report_error(err)
    return Response(
        content=serialize(result.triples),
        media_type=NTRIPLES_MEDIA_TYPE,
        headers={"X-Conversion-Errors": str(len(result.errors))},
    )
