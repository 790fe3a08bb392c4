# solver/recommender.py
from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from catalogs.item import expand_units, fmt_ft, fmt_lbs, requirements_for
from catalogs.trucks import CATEGORY_NAMES, TRUCK_CATALOG, by_preference, largest_capacity
from constraints.fit import evaluate
from constraints.legal import placed_permits, requirement_permits
from domain.types import (
  CargoItem,
  CargoUnit,
  LegalLimits,
  MultiTruckSuggestion,
  Recommendation,
  Requirements,
  TruckType,
)
from solver.placement import place_units
from settings import SETTINGS


def _rated_reason(truck: TruckType, req: Requirements) -> str:
  return (
    f"{truck.name} ({CATEGORY_NAMES[truck.category]}) fits {fmt_ft(req.lengthRequired)} x "
    f"{fmt_ft(req.widthRequired)} x {fmt_ft(req.heightRequired)}, {fmt_lbs(req.weightRequired)} "
    f"within its {fmt_ft(truck.deckLength)} deck, {fmt_ft(truck.maxLegalCargoHeight)} legal cargo height "
    f"and {fmt_lbs(truck.maxCargoWeight)} capacity"
  )


def _permit_reason(truck: TruckType, req: Requirements) -> str:
  return (
    f"No trailer carries {fmt_ft(req.lengthRequired)} x {fmt_ft(req.widthRequired)} x "
    f"{fmt_ft(req.heightRequired)}, {fmt_lbs(req.weightRequired)} within legal limits; {truck.name} "
    f"({CATEGORY_NAMES[truck.category]}) carries it with permits"
  )


def _suggest_split(
  units: Sequence[CargoUnit],
  req: Requirements,
  trucks: List[TruckType],
  eps: float,
) -> MultiTruckSuggestion:
  biggest = largest_capacity(trucks)
  by_weight = max(1, math.ceil((float(req.weightRequired) - eps) / float(biggest.maxCargoWeight)))

  if float(req.weightRequired) > float(biggest.maxCargoWeight) + eps:
    return MultiTruckSuggestion(
      count=by_weight,
      reason=(
        f"Total weight {fmt_lbs(req.weightRequired)} exceeds the largest capacity available "
        f"({biggest.name}, {fmt_lbs(biggest.maxCargoWeight)})"
      ),
    )

  max_len = max(float(t.deckLength) for t in trucks)
  max_wid = max(float(t.deckWidth) for t in trucks)
  if req.lengthRequired > max_len + eps:
    reason = f"Longest piece {fmt_ft(req.lengthRequired)} exceeds every deck length (max {fmt_ft(max_len)})"
  elif req.widthRequired > max_wid + eps:
    reason = f"Widest piece {fmt_ft(req.widthRequired)} exceeds every deck width (max {fmt_ft(max_wid)})"
  else:
    reason = f"The {len(units)} pieces cannot be seated together on any single deck"
  return MultiTruckSuggestion(count=max(2, by_weight), reason=reason)


def recommend_units(
  units: Sequence[CargoUnit],
  catalog: Iterable[TruckType] = TRUCK_CATALOG,
  limits: Optional[LegalLimits] = None,
  eps: float = SETTINGS.EPS,
) -> Recommendation:
  """
  Picks the first trailer in preference order that carries the whole set.

  Pass one wants a rated fit (dimensions, legal cargo height, capacity), a
  deck that seats every piece, and a laid out load that needs no permit
  (envelope, total height, weight threshold, axles). Pass two takes the first
  trailer that physically carries the set; the load then moves under permits.
  """
  limits = limits or LegalLimits()
  trucks = by_preference(catalog)
  req = requirements_for(units)
  oversize, overweight = requirement_permits(req, limits, eps=eps)

  permit_pick = None
  for truck in trucks:
    fit = evaluate(truck, req, eps=eps)
    if not fit.fitsWithPermits:
      continue
    placed, unplaced = place_units(truck, units, eps=eps)
    if unplaced:
      continue
    over_dims, over_weight = placed_permits(truck, placed, limits, eps=eps)
    if fit.fits and not over_dims and not over_weight:
      return Recommendation(
        recommendedTruck=truck,
        reason=_rated_reason(truck, req),
        isOversizePermitRequired=oversize,
        isOverweightPermitRequired=overweight,
        multiTruckSuggestion=None,
        requirements=req,
      )
    if permit_pick is None:
      # cargo over the legal cargo height of this trailer is an oversize condition
      permit_pick = (truck, over_dims or not fit.fits, over_weight)

  if permit_pick is not None:
    truck, over_dims, over_weight = permit_pick
    return Recommendation(
      recommendedTruck=truck,
      reason=_permit_reason(truck, req),
      isOversizePermitRequired=oversize or over_dims,
      isOverweightPermitRequired=overweight or over_weight,
      multiTruckSuggestion=None,
      requirements=req,
      permitFit=True,
    )

  split = _suggest_split(units, req, trucks, eps)
  return Recommendation(
    recommendedTruck=None,
    reason=f"No single trailer can carry this cargo. {split.reason}",
    isOversizePermitRequired=oversize,
    isOverweightPermitRequired=overweight,
    multiTruckSuggestion=split,
    requirements=req,
  )


def recommend(
  items: List[CargoItem],
  catalog: Iterable[TruckType] = TRUCK_CATALOG,
  limits: Optional[LegalLimits] = None,
) -> Recommendation:
  """Recommendation for validated cargo items (quantities expanded)."""
  return recommend_units(expand_units(items), catalog=catalog, limits=limits)


def unsatisfiable_reason(unit: CargoUnit, catalog: Iterable[TruckType]) -> str:
  """
  Why a single piece has no trailer even on its own.
  """
  trucks = list(catalog)
  item = unit.item
  long_side, short_side = max(unit.length, unit.width), min(unit.length, unit.width)

  if not any(long_side <= float(t.deckLength) + SETTINGS.EPS for t in trucks):
    return f"length {fmt_ft(long_side)} exceeds every deck length"
  if not any(short_side <= float(t.deckWidth) + SETTINGS.EPS for t in trucks):
    return f"width {fmt_ft(short_side)} exceeds every deck width"
  if not any(unit.weight <= float(t.maxCargoWeight) + SETTINGS.EPS for t in trucks):
    return f"weight {fmt_lbs(item.weight)} exceeds every trailer capacity"
  return "no trailer deck can seat the piece within its weight capacity"
