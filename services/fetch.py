import logging
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


SQL_TRUCK_TYPES = text("""
select
    tt.id,
    tt.name,
    tt.category,
    tt.description,

    tt.deck_length_ft,
    tt.deck_width_ft,
    tt.deck_height_ft,
    tt.well_length_ft,
    tt.max_cargo_weight_lbs,
    tt.max_legal_cargo_height_ft,
    tt.tare_weight_lbs,

    tt.loading_method,
    tt.features,
    tt.best_for

from truck_types tt

where tt.is_active

order by tt.sort_order, tt.name
""")


def fetch_truck_type_rows(engine: Engine) -> List[Dict[str, Any]]:
  with engine.connect() as conn:
    rows = conn.execute(SQL_TRUCK_TYPES).mappings().all()

  seen = set()
  out: List[Dict[str, Any]] = []
  dup = 0
  for r in rows:
    tid = r.get("id")
    if tid in seen:
      dup += 1
      continue
    seen.add(tid)
    out.append(dict(r))

  if dup > 0:
    logger.warning("truck_types: skipped %d duplicated id rows", dup)

  return out
