# constraints/axles.py
from __future__ import annotations

from typing import List, Tuple

from catalogs.placed_item import PlacedUnit
from domain.types import AxleLoads, LegalLimits, TruckType
from settings import SETTINGS


def axle_group_position(truck: TruckType, setback: float = SETTINGS.AXLE_GROUP_SETBACK_FT) -> float:
  """
  Distance (ft) from the kingpin (front of deck) to the trailer axle group.
  """
  return max(1.0, float(truck.deckLength) - float(setback))


def compute_axle_loads(placed: List[PlacedUnit], truck: TruckType) -> AxleLoads:
  """
  Splits cargo weight between the kingpin and the trailer axle group by moment
  balance, and computes the cargo center of gravity on the deck.
  """
  span = axle_group_position(truck)

  total = 0.0
  kingpin = 0.0
  axle_group = 0.0
  moment_x = 0.0
  moment_z = 0.0

  for p in placed:
    w = float(p.unit.weight)
    cx, cz = p.center
    total += w
    moment_x += w * cx
    moment_z += w * cz

    rb = w * cx / span
    axle_group += rb
    kingpin += w - rb

  return {
    "payloadLbs": total,
    "kingpinLbs": kingpin,
    "axleGroupLbs": axle_group,
    "cogX": (moment_x / total) if total > 0 else 0.0,
    "cogZ": (moment_z / total) if total > 0 else 0.0,
  }


def check_axle_loads(loads: AxleLoads, limits: LegalLimits) -> Tuple[bool, List[str]]:
  reasons: List[str] = []
  lim = float(limits.perAxleWeightLimit)

  if float(loads["kingpinLbs"]) > lim + 1e-9:
    reasons.append("kingpin_limit")
  if float(loads["axleGroupLbs"]) > lim + 1e-9:
    reasons.append("axle_group_limit")

  return (len(reasons) == 0, reasons)
