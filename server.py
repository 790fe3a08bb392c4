# server.py
from __future__ import annotations

import json
import logging
import os
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from catalogs.trucks import CATALOG_VERSION, catalog_to_json
from db import get_engine
from domain.errors import ConfigurationError
from domain.types import DebugLogFn
from services.planning import load_truck_catalog, plan_rows_to_viewer_json
from settings import SETTINGS

logger = logging.getLogger(__name__)

# -------------------------
# App / DB
# -------------------------

engine = get_engine()

app = FastAPI(title="Load Planner API", version="0.4.0")

app.add_middleware(
  CORSMiddleware,
  allow_origins=["*"],
  allow_credentials=False,
  allow_methods=["GET", "POST"],
  allow_headers=["*"],
)

# -------------------------
# Debug (per-request file)
# -------------------------

DEBUG_ENABLED = SETTINGS.DEBUG_ENABLED
DEBUG_DIR = SETTINGS.DEBUG_DIR
DEBUG_RETURN_PATH = SETTINGS.DEBUG_RETURN_PATH


def _ts_name_utc() -> str:
  return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _safe_fs_name(s: str) -> str:
  s = re.sub(r"[^a-zA-Z0-9._-]+", "_", s)
  return s[:120] if len(s) > 120 else s


def _make_file_logger(run_id: str, label: str) -> tuple[DebugLogFn, str]:
  os.makedirs(DEBUG_DIR, exist_ok=True)
  fname = f"{_ts_name_utc()}__{_safe_fs_name(label)}__{run_id}.jsonl"
  path = os.path.join(DEBUG_DIR, fname)

  def log(evt: str, payload: Dict[str, Any]) -> None:
    rec = {
      "ts": datetime.now(timezone.utc).isoformat(),
      "evt": evt,
      "payload": payload,
    }
    with open(path, "a", encoding="utf-8") as f:
      f.write(json.dumps(rec, ensure_ascii=False, default=str) + "\n")

  return log, path


# -------------------------
# Models
# -------------------------

class PlanRequest(BaseModel):
  items: List[Dict[str, Any]]
  limits: Dict[str, Any] = Field(default_factory=dict)


# -------------------------
# Health / catalog
# -------------------------

@app.get("/health")
def health() -> Dict[str, Any]:
  return {"ok": True}


@app.get("/trucks")
def get_trucks() -> Dict[str, Any]:
  catalog, source = load_truck_catalog(engine)
  return {
    "version": CATALOG_VERSION,
    "source": source,
    "trucks": catalog_to_json(catalog),
  }


# -------------------------
# Main endpoint
# -------------------------

@app.post("/plan")
def post_plan(req: PlanRequest) -> Dict[str, Any]:
  run_id = uuid.uuid4().hex[:10]

  debug_log: Optional[DebugLogFn] = None
  debug_path: Optional[str] = None
  if DEBUG_ENABLED:
    debug_log, debug_path = _make_file_logger(run_id, "plan")
    debug_log("request", {"items": len(req.items), "limits": req.limits})

  try:
    payload = plan_rows_to_viewer_json(req.items, limits=req.limits, engine=engine, debug_log=debug_log)
  except ConfigurationError as exc:
    if debug_log:
      debug_log("config_error", {"error": f"{type(exc).__name__}: {exc}"})
    raise HTTPException(status_code=400, detail=f"{type(exc).__name__}: {exc}")
  except Exception as exc:
    logger.exception("planning run %s failed", run_id)
    if debug_log:
      debug_log("server_error", {"error": f"{type(exc).__name__}: {exc}"})
    raise HTTPException(status_code=500, detail=f"{type(exc).__name__}: {exc}")

  if DEBUG_RETURN_PATH and debug_path:
    payload["_debug"] = {"runId": run_id, "path": debug_path}

  return payload
