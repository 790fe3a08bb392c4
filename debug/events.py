# debug/events.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from domain.types import DebugEvent, DebugLogFn

logger = logging.getLogger(__name__)


def emit(log: Optional[DebugLogFn], evt: str, payload: Dict[str, Any]) -> None:
  if not log:
    return
  try:
    log(evt, payload)
  except Exception:
    # a broken debug sink must not break planning
    logger.warning("debug sink failed on event %s", evt, exc_info=True)


def emit_error(log: Optional[DebugLogFn], evt: str, payload: Dict[str, Any], exc: Exception) -> None:
  p = dict(payload)
  p["error"] = f"{type(exc).__name__}: {exc}"
  emit(log, evt, p)


def forward(log: Optional[DebugLogFn], events: Iterable[DebugEvent]) -> None:
  for e in events:
    emit(log, e.evt, e.payload)
