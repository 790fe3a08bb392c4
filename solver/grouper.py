# solver/grouper.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from catalogs.item import describe_item, footprint_sqft, total_weight
from debug.events import emit
from domain.types import CargoUnit, DebugLogFn, LegalLimits, Recommendation, TruckType
from solver.recommender import recommend_units, unsatisfiable_reason
from settings import SETTINGS


@dataclass
class UnitGroup:
  """Pieces that will travel together on one truck."""
  units: List[CargoUnit]
  recommendation: Recommendation

  @property
  def permit(self) -> bool:
    return self.recommendation.permitFit

  @property
  def truck(self) -> TruckType:
    return self.recommendation.recommendedTruck

  def weight(self) -> float:
    return total_weight(self.units)


@dataclass
class GroupingResult:
  groups: List[UnitGroup] = field(default_factory=list)
  # (piece, reason) for pieces no trailer can take even on their own
  rejected: List[Tuple[CargoUnit, str]] = field(default_factory=list)


def _ffd_order(units: Iterable[CargoUnit]) -> List[CargoUnit]:
  # heaviest first, then largest footprint; stable for ties
  return sorted(units, key=lambda u: (-u.weight, -u.footprint()))


def _rough_fits(units: List[CargoUnit], max_weight: float, max_area: float) -> bool:
  return total_weight(units) <= max_weight + SETTINGS.EPS and footprint_sqft(units) <= max_area + SETTINGS.EPS


def group_units(
  units: List[CargoUnit],
  catalog: Iterable[TruckType],
  limits: Optional[LegalLimits] = None,
  debug_log: Optional[DebugLogFn] = None,
) -> GroupingResult:
  """
  Partitions pieces into truckloads.

  The whole set stays together when one trailer carries it without permits.
  Otherwise pieces are packed first-fit decreasing: each joins the first
  group of the same kind (legal or permit) that still gets a recommendation
  of that kind with it, or opens a new group.
  """
  trucks = list(catalog)
  out = GroupingResult()
  if not units:
    return out

  whole = recommend_units(units, catalog=trucks, limits=limits)
  if whole.recommendedTruck is not None and not whole.permitFit:
    out.groups.append(UnitGroup(units=list(units), recommendation=whole))
    emit(debug_log, "grouping_single_load", {
      "truckId": whole.recommendedTruck.id,
      "units": len(units),
    })
    return out

  emit(debug_log, "grouping_split", {
    "units": len(units),
    "reason": whole.reason,
  })

  fill = float(SETTINGS.FILL_FACTOR_FLOOR_DEFAULT)
  max_weight = max(float(t.maxCargoWeight) for t in trucks)
  max_area = max(t.deck_area() for t in trucks) * fill

  for unit in _ffd_order(units):
    joined = False
    for g in out.groups:
      candidate = g.units + [unit]
      if not _rough_fits(candidate, max_weight, max_area):
        continue
      rec = recommend_units(candidate, catalog=trucks, limits=limits)
      # a legal group never takes a piece that would put it under permits
      if rec.recommendedTruck is None or rec.permitFit != g.permit:
        continue
      g.units = candidate
      g.recommendation = rec
      joined = True
      break

    if joined:
      continue

    alone = recommend_units([unit], catalog=trucks, limits=limits)
    if alone.recommendedTruck is None:
      reason = unsatisfiable_reason(unit, trucks)
      out.rejected.append((unit, reason))
      emit(debug_log, "unit_rejected", {
        "itemId": unit.item.id,
        "unit": unit.index,
        "item": describe_item(unit.item),
        "reason": reason,
      })
      continue

    out.groups.append(UnitGroup(units=[unit], recommendation=alone))
    emit(debug_log, "group_opened", {
      "group": len(out.groups),
      "itemId": unit.item.id,
      "unit": unit.index,
      "truckId": alone.recommendedTruck.id,
      "permitFit": alone.permitFit,
    })

  return out
