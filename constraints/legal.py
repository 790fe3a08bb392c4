# constraints/legal.py
from __future__ import annotations

from typing import List, Optional, Tuple

from catalogs.item import fmt_ft, fmt_lbs
from catalogs.placed_item import PlacedUnit
from constraints.axles import check_axle_loads, compute_axle_loads
from domain.types import LegalEvaluation, LegalLimits, Load, PermitKind, Requirements, TruckType
from geometry.aabb import envelope
from settings import SETTINGS


# -----------------------------------------------------------------------------
# Requirement level (truck independent)
# -----------------------------------------------------------------------------

def requirement_permits(req: Requirements, limits: Optional[LegalLimits] = None, eps: float = SETTINGS.EPS) -> Tuple[bool, bool]:
  """
  (isOversizePermitRequired, isOverweightPermitRequired) for raw cargo
  dimensions, whichever truck ends up carrying it.
  """
  limits = limits or LegalLimits()
  oversize = (
    float(req.lengthRequired) > float(limits.maxLegalLength) + eps or
    float(req.widthRequired) > float(limits.maxLegalWidth) + eps or
    float(req.heightRequired) > float(limits.maxLegalHeight) + eps
  )
  overweight = float(req.weightRequired) > limits.overweight_threshold + eps
  return oversize, overweight


def placed_permits(
  truck: TruckType,
  placed: List[PlacedUnit],
  limits: Optional[LegalLimits] = None,
  eps: float = SETTINGS.EPS,
) -> Tuple[bool, bool]:
  """
  (oversize, overweight) of pieces as laid out on a deck: the floor envelope
  and cargo height on the deck against the legal envelope, the payload against
  the overweight threshold and truck capacity, and the axle split.
  """
  limits = limits or LegalLimits()
  env = envelope(p.rect for p in placed)
  if env is None:
    return False, False

  length = env[1] - env[0]
  width = env[3] - env[2]
  total_height = max(p.unit.height for p in placed) + float(truck.deckHeight)
  weight = sum(float(p.unit.weight) for p in placed)

  oversize = (
    length > float(limits.maxLegalLength) + eps or
    width > float(limits.maxLegalWidth) + eps or
    total_height > float(limits.maxLegalHeight) + eps
  )
  overweight = (
    weight > limits.overweight_threshold + eps or
    weight > float(truck.maxCargoWeight) + eps or
    not check_axle_loads(compute_axle_loads(placed, truck), limits)[0]
  )
  return oversize, overweight


# -----------------------------------------------------------------------------
# Load level (packed envelope on a chosen truck)
# -----------------------------------------------------------------------------

_PERMIT_ORDER = [
  PermitKind.OVERSIZE_WIDTH,
  PermitKind.OVERSIZE_HEIGHT,
  PermitKind.OVERSIZE_LENGTH,
  PermitKind.OVERWEIGHT,
  PermitKind.SUPERLOAD,
]


def evaluate_load(load: Load, limits: Optional[LegalLimits] = None, eps: float = SETTINGS.EPS) -> LegalEvaluation:
  limits = limits or LegalLimits()
  truck = load.recommendedTruck

  permits = set()
  warnings: List[str] = []

  width = float(load.width)
  length = float(load.length)
  total_height = float(load.height) + float(truck.deckHeight)
  weight = float(load.weight)

  # --- oversize
  if width > float(limits.maxLegalWidth) + eps:
    permits.add(PermitKind.OVERSIZE_WIDTH)
    warnings.append(f"Width {fmt_ft(width)} exceeds {fmt_ft(limits.maxLegalWidth)} legal limit")
  if total_height > float(limits.maxLegalHeight) + eps:
    permits.add(PermitKind.OVERSIZE_HEIGHT)
    warnings.append(
      f"Total height {fmt_ft(total_height)} ({fmt_ft(load.height)} cargo on {fmt_ft(truck.deckHeight)} deck) "
      f"exceeds {fmt_ft(limits.maxLegalHeight)} legal limit"
    )
  if length > float(limits.maxLegalLength) + eps:
    permits.add(PermitKind.OVERSIZE_LENGTH)
    warnings.append(f"Length {fmt_ft(length)} exceeds {fmt_ft(limits.maxLegalLength)} legal limit")

  # --- overweight
  if weight > float(limits.maxLegalWeight) + eps:
    permits.add(PermitKind.OVERWEIGHT)
    warnings.append(
      f"Overweight: {fmt_lbs(weight)} exceeds the {fmt_lbs(limits.maxLegalWeight)} gross legal limit, may require permits"
    )
  elif weight > float(limits.perAxleWeightLimit) + eps:
    permits.add(PermitKind.OVERWEIGHT)
    warnings.append(
      f"Overweight: {fmt_lbs(weight)} exceeds the {fmt_lbs(limits.perAxleWeightLimit)} per-axle limit, may require permits"
    )

  if weight > float(truck.maxCargoWeight) + eps:
    permits.add(PermitKind.OVERWEIGHT)
    warnings.append(f"Overweight: {fmt_lbs(weight)} exceeds {truck.name} capacity of {fmt_lbs(truck.maxCargoWeight)}")

  if load.axleLoads:
    ok, reasons = check_axle_loads(load.axleLoads, limits)
    if not ok:
      permits.add(PermitKind.OVERWEIGHT)
      if "kingpin_limit" in reasons:
        warnings.append(
          f"Overweight: kingpin carries {fmt_lbs(load.axleLoads['kingpinLbs'])}, over the "
          f"{fmt_lbs(limits.perAxleWeightLimit)} axle limit"
        )
      if "axle_group_limit" in reasons:
        warnings.append(
          f"Overweight: trailer axle group carries {fmt_lbs(load.axleLoads['axleGroupLbs'])}, over the "
          f"{fmt_lbs(limits.perAxleWeightLimit)} axle limit"
        )

  # --- superload
  if (
    width >= float(limits.superloadWidth) or
    total_height >= float(limits.superloadHeight) or
    length >= float(limits.superloadLength) or
    weight >= float(limits.superloadWeight)
  ):
    permits.add(PermitKind.SUPERLOAD)
    warnings.append("Load qualifies as a superload, special routing required")

  if width > float(limits.escortWidth) + eps:
    warnings.append(f"Width over {fmt_ft(limits.escortWidth)} requires escort vehicles")

  permits_required = [p.value for p in _PERMIT_ORDER if p in permits]
  return LegalEvaluation(
    isLegal=not permits_required,
    permitsRequired=permits_required,
    warnings=warnings,
  )
