# catalogs/item.py
from __future__ import annotations

import math
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from domain.types import CargoItem, CargoUnit, Requirements


# ----------------------------
# Dimension helpers
# ----------------------------

def orientations(length: float, width: float) -> List[Tuple[float, float, bool]]:
  """
  (dx, dz, rotated) candidates for the deck plane, natural orientation first.
  dx runs along the deck length, dz across the deck width.
  """
  if abs(length - width) <= 1e-12:
    return [(length, width, False)]
  return [(length, width, False), (width, length, True)]


def long_side_first(length: float, width: float) -> Tuple[float, float]:
  return (max(length, width), min(length, width))


def requirements_for(units: Iterable[CargoUnit]) -> Requirements:
  length = 0.0
  width = 0.0
  height = 0.0
  weight = 0.0
  for u in units:
    l, w = long_side_first(u.length, u.width)
    length = max(length, l)
    width = max(width, w)
    height = max(height, u.height)
    weight += u.weight
  return Requirements(
    lengthRequired=length,
    widthRequired=width,
    heightRequired=height,
    weightRequired=weight,
  )


def footprint_sqft(units: Iterable[CargoUnit]) -> float:
  return sum(u.footprint() for u in units)


def total_weight(units: Iterable[CargoUnit]) -> float:
  return sum(u.weight for u in units)


# ----------------------------
# Validation
# ----------------------------

def _positive_number(v) -> bool:
  if isinstance(v, bool) or not isinstance(v, (int, float)):
    return False
  return math.isfinite(float(v)) and float(v) > 0


def item_problems(item: CargoItem) -> List[str]:
  """
  Reasons an item cannot be planned. Empty list means valid.
  """
  problems: List[str] = []

  if not item.id or not str(item.id).strip():
    problems.append("missing id")

  if item.quantity is None:
    problems.append("missing quantity")
  elif isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity <= 0:
    problems.append(f"quantity must be a positive whole number (got {item.quantity!r})")

  for name in ("length", "width", "height", "weight"):
    v = getattr(item, name)
    if v is None:
      problems.append(f"missing {name}")
    elif not _positive_number(v):
      problems.append(f"{name} must be positive (got {v!r})")

  return problems


# ----------------------------
# Units (pieces)
# ----------------------------

def expand_units(items: Iterable[CargoItem], start_order: int = 0) -> List[CargoUnit]:
  units: List[CargoUnit] = []
  for order, it in enumerate(items, start=start_order):
    for idx in range(int(it.quantity or 0)):
      units.append(CargoUnit(item=it, index=idx, order=order))
  return units


def regroup_units(units: Iterable[CargoUnit]) -> List[CargoItem]:
  """
  Collapse pieces back into CargoItems (quantity = pieces present), in request order.
  """
  counts: Dict[Tuple[int, str], int] = {}
  parents: Dict[Tuple[int, str], CargoItem] = {}
  for u in units:
    key = (u.order, u.item.id)
    counts[key] = counts.get(key, 0) + 1
    parents[key] = u.item

  out: List[CargoItem] = []
  for key in sorted(counts):
    parent = parents[key]
    n = counts[key]
    out.append(parent if parent.quantity == n else replace(parent, quantity=n))
  return out


# ----------------------------
# Formatting
# ----------------------------

def fmt_ft(v: Optional[float]) -> str:
  if v is None:
    return "?"
  return f"{float(v):.1f}'"


def fmt_lbs(v: Optional[float]) -> str:
  if v is None:
    return "? lbs"
  return f"{float(v):,.0f} lbs"


def describe_item(item: CargoItem) -> str:
  label = item.description or item.id
  return (
    f"\"{label}\" ({fmt_ft(item.length)}L x {fmt_ft(item.width)}W x {fmt_ft(item.height)}H, "
    f"{fmt_lbs(item.weight)})"
  )
