# solver/reopt.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from debug.events import emit
from domain.types import DebugLogFn, LegalLimits, TruckType
from solver.grouper import UnitGroup
from solver.recommender import recommend_units
from settings import SETTINGS


@dataclass(frozen=True)
class ReoptConfig:
  enabled: bool = SETTINGS.REBALANCE_ENABLED
  max_iters: int = SETTINGS.REBALANCE_MAX_ITERS
  # percent of truck capacity
  high_util: float = SETTINGS.REBALANCE_HIGH_UTIL
  low_util: float = SETTINGS.REBALANCE_LOW_UTIL


def weight_util(group: UnitGroup) -> float:
  cap = float(group.truck.maxCargoWeight)
  return (group.weight() / cap) * 100.0 if cap > 0 else 0.0


def _try_move(src: UnitGroup, dst: UnitGroup, trucks: List[TruckType], limits: Optional[LegalLimits]) -> bool:
  if len(src.units) <= 1:
    return False

  # lightest piece first; ties keep pack order
  order = sorted(range(len(src.units)), key=lambda i: src.units[i].weight)
  for i in order:
    unit = src.units[i]
    rest = src.units[:i] + src.units[i + 1:]
    grown = dst.units + [unit]

    rec_dst = recommend_units(grown, catalog=trucks, limits=limits)
    if rec_dst.recommendedTruck is None or rec_dst.permitFit:
      continue
    rec_src = recommend_units(rest, catalog=trucks, limits=limits)
    if rec_src.recommendedTruck is None or rec_src.permitFit:
      continue

    src.units, src.recommendation = rest, rec_src
    dst.units, dst.recommendation = grown, rec_dst
    return True
  return False


def rebalance(
  groups: List[UnitGroup],
  catalog: Iterable[TruckType],
  limits: Optional[LegalLimits] = None,
  debug_log: Optional[DebugLogFn] = None,
  cfg: ReoptConfig = ReoptConfig(),
) -> List[UnitGroup]:
  """
  Evens out weight between rated loads.

  While one load runs above high_util percent of its truck capacity and
  another below low_util, the lightest piece that both loads can absorb is
  moved across. The number of loads never changes; permit loads are left
  alone.
  """
  if not cfg.enabled:
    emit(debug_log, "reopt_skipped", {"enabled": False})
    return groups

  trucks = list(catalog)
  rated = [g for g in groups if not g.permit]
  emit(debug_log, "reopt_started", {"max_iters": cfg.max_iters, "loads": len(groups), "rated": len(rated)})

  moves = 0
  for _ in range(max(0, int(cfg.max_iters))):
    heavy = sorted((g for g in rated if weight_util(g) > cfg.high_util), key=weight_util, reverse=True)
    light = sorted((g for g in rated if weight_util(g) < cfg.low_util), key=weight_util)

    moved = False
    for src in heavy:
      for dst in light:
        if src is dst:
          continue
        if _try_move(src, dst, trucks, limits):
          moves += 1
          moved = True
          emit(debug_log, "reopt_move", {
            "fromTruck": src.truck.id,
            "toTruck": dst.truck.id,
            "fromUtil": round(weight_util(src), 2),
            "toUtil": round(weight_util(dst), 2),
          })
          break
      if moved:
        break

    if not moved:
      break

  emit(debug_log, "reopt_done", {"changed": moves > 0, "moves": moves})
  return groups
