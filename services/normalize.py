# services/normalize.py
from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Optional, Tuple

from domain.errors import ValidationError
from domain.types import CargoItem, LegalLimits, TrailerCategory, TruckType

_NUM = r"(\d+(?:\.\d+)?)"

_FT_IN_RE = re.compile(rf"^{_NUM}\s*(?:'|ft\.?|feet|foot)\s*(?:-?\s*{_NUM}\s*(?:\"|''|in\.?|inch|inches)?)?$")
_IN_RE = re.compile(rf"^{_NUM}\s*(?:\"|''|in\.?|inch|inches)$")
_M_RE = re.compile(rf"^{_NUM}\s*(?:m|meter|meters|metre|metres)$")
_PLAIN_RE = re.compile(rf"^{_NUM}$")

_LBS_RE = re.compile(rf"^{_NUM}\s*(?:lb|lbs|pound|pounds|#)?\.?$")
_TONS_RE = re.compile(rf"^{_NUM}\s*(?:t|ton|tons)$")
_KG_RE = re.compile(rf"^{_NUM}\s*(?:kg|kgs|kilograms?)$")

FT_PER_M = 3.28084
LBS_PER_KG = 2.20462
LBS_PER_TON = 2000.0


def _number(v: Any) -> Optional[float]:
  if v is None or isinstance(v, bool):
    return None
  if isinstance(v, (int, float)):
    f = float(v)
    return f if math.isfinite(f) else None
  return None


def _clean(s: str) -> str:
  return s.strip().lower().replace(",", "")


def parse_feet(v: Any) -> Optional[float]:
  """
  Length in feet from a number or text such as "12", "12 ft", "12'6\"",
  "150 in" or "3.5 m". Unparseable input gives None.
  """
  n = _number(v)
  if n is not None or not isinstance(v, str):
    return n

  s = _clean(v)
  if not s:
    return None

  m = _PLAIN_RE.match(s)
  if m:
    return float(m.group(1))
  m = _FT_IN_RE.match(s)
  if m:
    inches = float(m.group(2)) if m.group(2) else 0.0
    return float(m.group(1)) + inches / 12.0
  m = _IN_RE.match(s)
  if m:
    return float(m.group(1)) / 12.0
  m = _M_RE.match(s)
  if m:
    return float(m.group(1)) * FT_PER_M
  return None


def parse_pounds(v: Any) -> Optional[float]:
  n = _number(v)
  if n is not None or not isinstance(v, str):
    return n

  s = _clean(v)
  if not s:
    return None

  m = _LBS_RE.match(s)
  if m:
    return float(m.group(1))
  m = _TONS_RE.match(s)
  if m:
    return float(m.group(1)) * LBS_PER_TON
  m = _KG_RE.match(s)
  if m:
    return float(m.group(1)) * LBS_PER_KG
  return None


def parse_quantity(v: Any) -> Optional[Any]:
  """
  Whole numbers come back as int. Anything else numeric is returned as is so
  that validation can name it; text that is not a number gives None.
  """
  if v is None or isinstance(v, bool):
    return None
  if isinstance(v, int):
    return v
  if isinstance(v, float):
    if not math.isfinite(v):
      return None
    return int(v) if v.is_integer() else v
  if isinstance(v, str):
    s = _clean(v)
    if re.fullmatch(r"-?\d+", s):
      return int(s)
    if re.fullmatch(r"-?\d+\.\d+", s):
      return parse_quantity(float(s))
  return None


def _first(row: Dict[str, Any], *keys: str) -> Any:
  for k in keys:
    if k in row and row[k] is not None and row[k] != "":
      return row[k]
  return None


# -----------------------------------------------------------------------------
# Cargo rows (extraction output / request JSON)
# -----------------------------------------------------------------------------

def normalize_cargo_row(row: Dict[str, Any], index: int) -> CargoItem:
  """
  One raw cargo row -> CargoItem. Missing or unparseable numbers stay None;
  the planner reports them instead of guessing.
  """
  raw_id = _first(row, "id", "item_id", "itemId")
  item_id = str(raw_id).strip() if raw_id is not None else f"item-{index + 1}"

  desc = _first(row, "description", "name", "desc")

  return CargoItem(
    id=item_id,
    description=str(desc) if desc is not None else "",
    quantity=parse_quantity(_first(row, "quantity", "qty", "count")),
    length=parse_feet(_first(row, "length", "length_ft", "lengthFt")),
    width=parse_feet(_first(row, "width", "width_ft", "widthFt")),
    height=parse_feet(_first(row, "height", "height_ft", "heightFt")),
    weight=parse_pounds(_first(row, "weight", "weight_lbs", "weightLbs")),
  )


# -----------------------------------------------------------------------------
# Truck records (truck_types table)
# -----------------------------------------------------------------------------

def _list_column(v: Any) -> Tuple[str, ...]:
  if v is None:
    return ()
  if isinstance(v, (list, tuple)):
    return tuple(str(x) for x in v if x is not None and str(x).strip())
  s = str(v).strip()
  if not s:
    return ()
  if s.startswith("["):
    try:
      parsed = json.loads(s)
    except ValueError:
      parsed = None
    if isinstance(parsed, list):
      return _list_column(parsed)
  return tuple(p.strip() for p in s.split(",") if p.strip())


def normalize_category(v: Any) -> TrailerCategory:
  key = re.sub(r"[\s\-/]+", "_", str(v or "").strip().upper())
  try:
    return TrailerCategory(key)
  except ValueError:
    raise ValidationError(f"unknown trailer category {v!r}")


def _required(row: Dict[str, Any], key: str, truck_id: str, allow_zero: bool = False) -> float:
  v = _number(row.get(key))
  if v is None:
    # numeric columns may come back as Decimal or text
    try:
      v = float(row.get(key))
    except (TypeError, ValueError):
      raise ValidationError(f"truck {truck_id}: {key} is missing or not a number ({row.get(key)!r})")
  if not math.isfinite(v):
    raise ValidationError(f"truck {truck_id}: {key} must be a finite number ({row.get(key)!r})")
  if v < 0 or (v == 0 and not allow_zero):
    raise ValidationError(f"truck {truck_id}: {key} must be positive ({v!r})")
  return float(v)


def _optional(row: Dict[str, Any], key: str) -> Optional[float]:
  v = row.get(key)
  if v is None or v == "":
    return None
  try:
    f = float(v)
  except (TypeError, ValueError):
    return None
  return f if math.isfinite(f) and f > 0 else None


def normalize_truck_record(row: Dict[str, Any], limits: Optional[LegalLimits] = None) -> TruckType:
  limits = limits or LegalLimits()

  truck_id = str(row.get("id") or "").strip()
  if not truck_id:
    raise ValidationError("truck record without id")

  deck_height = _required(row, "deck_height_ft", truck_id, allow_zero=True)

  legal_cargo_height = _optional(row, "max_legal_cargo_height_ft")
  if legal_cargo_height is None:
    legal_cargo_height = round(float(limits.maxLegalHeight) - deck_height, 2)
  if legal_cargo_height <= 0:
    raise ValidationError(f"truck {truck_id}: deck too high for a legal cargo height ({deck_height!r} ft)")

  tare = _optional(row, "tare_weight_lbs")

  return TruckType(
    id=truck_id,
    name=str(row.get("name") or truck_id),
    category=normalize_category(row.get("category")),
    deckLength=_required(row, "deck_length_ft", truck_id),
    deckWidth=_required(row, "deck_width_ft", truck_id),
    deckHeight=deck_height,
    maxLegalCargoHeight=legal_cargo_height,
    maxCargoWeight=_required(row, "max_cargo_weight_lbs", truck_id),
    description=str(row.get("description") or ""),
    bestFor=_list_column(row.get("best_for")),
    features=_list_column(row.get("features")),
    tareWeight=tare if tare is not None else 15000.0,
    loadingMethod=str(row.get("loading_method") or "crane"),
    wellLength=_optional(row, "well_length_ft"),
  )
