# services/planning.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from catalogs.item import fmt_lbs
from catalogs.trucks import CATALOG_VERSION, CATEGORY_NAMES, TRUCK_CATALOG
from debug.events import emit, emit_error
from domain.errors import ValidationError
from domain.types import CargoItem, DebugLogFn, LegalLimits, LoadPlan, TruckType
from services.fetch import fetch_truck_type_rows
from services.normalize import normalize_cargo_row, normalize_truck_record
from solver.planner import plan_loads

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Truck catalog source
# -----------------------------------------------------------------------------

def load_truck_catalog(
  engine: Optional[Engine],
  limits: Optional[LegalLimits] = None,
  debug_log: Optional[DebugLogFn] = None,
) -> Tuple[Tuple[TruckType, ...], str]:
  """
  (catalog, source). Active truck_types rows when a database is configured and
  yields at least one valid record, the static catalog otherwise.
  """
  if engine is None:
    return TRUCK_CATALOG, f"static:{CATALOG_VERSION}"

  try:
    rows = fetch_truck_type_rows(engine)
  except SQLAlchemyError as exc:
    logger.warning("truck_types unavailable, using the static catalog", exc_info=True)
    emit_error(debug_log, "catalog_fetch_failed", {}, exc)
    return TRUCK_CATALOG, f"static:{CATALOG_VERSION}"

  trucks: List[TruckType] = []
  bad = 0
  for r in rows:
    try:
      trucks.append(normalize_truck_record(r, limits))
    except ValidationError as exc:
      bad += 1
      logger.warning("skipping truck_types row %r: %s", r.get("id"), exc)
      emit_error(debug_log, "catalog_row_invalid", {"id": r.get("id")}, exc)

  emit(debug_log, "catalog_loaded", {"rows": len(rows), "trucks": len(trucks), "bad": bad})

  if not trucks:
    logger.warning("truck_types has no usable rows, using the static catalog")
    return TRUCK_CATALOG, f"static:{CATALOG_VERSION}"
  return tuple(trucks), "database"


# -----------------------------------------------------------------------------
# Viewer JSON adapter
# -----------------------------------------------------------------------------

def plan_summary(plan: LoadPlan) -> str:
  """
  Short human readable summary of a plan (quote cards, emails).
  """
  if not plan.loads:
    if plan.unassignedItems:
      return f"No loads planned; {len(plan.unassignedItems)} item(s) unassigned"
    return "No cargo to plan"

  lines = [
    f"{plan.totalTrucks} truck(s), {plan.totalItems} piece(s), {fmt_lbs(plan.totalWeight)} total",
  ]
  for ld in plan.loads:
    t = ld.recommendedTruck
    status = "legal" if ld.isLegal else ("permits: " + ", ".join(ld.permitsRequired))
    lines.append(
      f"{ld.id}: {t.name} ({CATEGORY_NAMES[t.category]}), {ld.item_count()} piece(s), "
      f"{fmt_lbs(ld.weight)} ({ld.utilization.weightPercent:.0f}% weight, "
      f"{ld.utilization.spacePercent:.0f}% deck), {status}"
    )
  if plan.unassignedItems:
    lines.append(f"Unassigned: {', '.join(it.id for it in plan.unassignedItems)}")
  return "\n".join(lines)


def plan_to_viewer_json(plan: LoadPlan) -> Dict[str, Any]:
  payload = plan.to_dict()

  legal = sum(1 for ld in plan.loads if ld.isLegal)
  permits = sorted({p for ld in plan.loads for p in ld.permitsRequired})

  payload["aggregates"] = {
    "counts": {
      "loads": len(plan.loads),
      "legalLoads": legal,
      "permitLoads": len(plan.loads) - legal,
      "placements": sum(len(ld.placements) for ld in plan.loads),
      "unassigned": len(plan.unassignedItems),
    },
    "permitsRequired": permits,
    "utilization": [
      {
        "loadId": ld.id,
        "truckId": ld.recommendedTruck.id,
        "weightPercent": ld.utilization.weightPercent,
        "spacePercent": ld.utilization.spacePercent,
      }
      for ld in plan.loads
    ],
  }
  payload["summary"] = plan_summary(plan)
  return payload


# -----------------------------------------------------------------------------
# Main service: normalize -> plan -> viewer json
# -----------------------------------------------------------------------------

def plan_rows_to_viewer_json(
  rows: List[Dict[str, Any]],
  limits: Optional[Dict[str, Any]] = None,
  engine: Optional[Engine] = None,
  debug_log: Optional[DebugLogFn] = None,
) -> Dict[str, Any]:
  # 1) limits (bad config raises ConfigurationError)
  legal = LegalLimits.from_mapping(limits)

  # 2) catalog
  catalog, source = load_truck_catalog(engine, legal, debug_log=debug_log)

  # 3) normalize
  items: List[CargoItem] = [normalize_cargo_row(r, i) for i, r in enumerate(rows)]
  emit(debug_log, "normalize_done", {"rows": len(rows), "items": len(items)})

  # 4) plan
  plan = plan_loads(items, config=legal, catalog=catalog, debug_log=debug_log)

  # 5) viewer json
  payload = plan_to_viewer_json(plan)
  payload["catalogSource"] = source
  emit(debug_log, "viewer_ready", {
    "loads": plan.totalTrucks,
    "unassigned": len(plan.unassignedItems),
    "catalogSource": source,
  })
  return payload
