# solver/planner.py
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

from catalogs.item import describe_item, expand_units, footprint_sqft, item_problems, regroup_units
from catalogs.plan_state import PlanState
from catalogs.trucks import TRUCK_CATALOG, by_preference
from constraints.axles import compute_axle_loads
from constraints.legal import evaluate_load
from debug.events import forward
from domain.errors import ConfigurationError
from domain.types import (
  CargoItem,
  DebugLogFn,
  LegalLimits,
  Load,
  LoadPlan,
  PlanStage,
  TruckType,
  Utilization,
)
from geometry.aabb import envelope
from solver.grouper import group_units
from solver.placement import place_units
from solver.reopt import ReoptConfig, rebalance

LimitsConfig = Union[LegalLimits, Mapping[str, Any], None]


def _coerce_limits(config: LimitsConfig) -> LegalLimits:
  if config is None:
    return LegalLimits()
  if isinstance(config, LegalLimits):
    return config
  if isinstance(config, Mapping):
    return LegalLimits.from_mapping(config)
  raise ConfigurationError(f"legal limits must be a mapping or LegalLimits, got {type(config).__name__}")


def _utilization(truck: TruckType, weight: float, footprint: float) -> Utilization:
  cap = float(truck.maxCargoWeight)
  area = truck.deck_area()
  return Utilization(
    weightPercent=round(weight / cap * 100.0, 2) if cap > 0 else 0.0,
    spacePercent=round(footprint / area * 100.0, 2) if area > 0 else 0.0,
  )


# -----------------------------------------------------------------------------
# Stages
# -----------------------------------------------------------------------------

def _validate(state: PlanState, items: Iterable[CargoItem]) -> List[CargoItem]:
  state.require(PlanStage.UNGROUPED)

  valid: List[CargoItem] = []
  seen = set()
  for it in items:
    problems = item_problems(it)
    if not problems and it.id in seen:
      problems = [f"duplicate item id {it.id!r}"]

    if problems:
      state.invalid.append(it)
      state.warn(f"Item {describe_item(it)} excluded: {'; '.join(problems)}")
      state.emit("item_invalid", {"itemId": it.id, "problems": problems})
      continue

    seen.add(it.id)
    valid.append(it)

  state.units = expand_units(valid)
  state.emit("items_validated", {"valid": len(valid), "invalid": len(state.invalid), "units": len(state.units)})
  return valid


def _group(state: PlanState, reopt_cfg: ReoptConfig) -> None:
  res = group_units(state.units, state.catalog, limits=state.limits, debug_log=state.emit)

  for unit, reason in res.rejected:
    state.unassigned.append(unit)
    state.warn(f"Item {describe_item(unit.item)} cannot be carried by any truck: {reason}")

  state.groups = rebalance(res.groups, state.catalog, limits=state.limits, debug_log=state.emit, cfg=reopt_cfg)
  state.advance(PlanStage.GROUPED)


def _pack(state: PlanState) -> None:
  for g in state.groups:
    truck = g.truck
    placed, unplaced = place_units(truck, g.units, debug_log=state.emit)

    if unplaced:
      state.unassigned.extend(unplaced)
      for it in regroup_units(unplaced):
        state.warn(
          f"{it.quantity} x {describe_item(it)} could not be placed on {truck.name} and was left unassigned"
        )

    if not placed:
      state.emit("load_dropped", {"truckId": truck.id, "reason": "nothing placed"})
      continue

    env = envelope(p.rect for p in placed)
    weight = sum(p.unit.weight for p in placed)
    load = Load(
      id=f"load-{len(state.loads) + 1}",
      items=regroup_units(p.unit for p in placed),
      recommendedTruck=truck,
      placements=[p.to_placement() for p in placed],
      weight=weight,
      utilization=_utilization(truck, weight, footprint_sqft(p.unit for p in placed)),
      length=(env[1] - env[0]) if env else 0.0,
      width=(env[3] - env[2]) if env else 0.0,
      height=max(p.unit.height for p in placed),
      axleLoads=compute_axle_loads(placed, truck),
    )
    state.loads.append(load)
    state.emit("load_packed", {
      "loadId": load.id,
      "truckId": truck.id,
      "units": len(placed),
      "unplaced": len(unplaced),
      "weight": weight,
      "utilization": {"weight": load.utilization.weightPercent, "space": load.utilization.spacePercent},
    })

  state.advance(PlanStage.PACKED)


def _evaluate(state: PlanState) -> None:
  for load in state.loads:
    ev = evaluate_load(load, state.limits)
    load.isLegal = ev.isLegal
    load.permitsRequired = list(ev.permitsRequired)
    load.warnings.extend(ev.warnings)
    state.emit("load_evaluated", {
      "loadId": load.id,
      "isLegal": ev.isLegal,
      "permitsRequired": ev.permitsRequired,
    })
  state.advance(PlanStage.EVALUATED)


def _finalize(state: PlanState) -> List[CargoItem]:
  for load in state.loads:
    for w in load.warnings:
      state.warn(f"{load.id}: {w}")

  if len(state.loads) > 1:
    state.warn(
      f"Load requires {len(state.loads)} trucks: the cargo exceeds what a single trailer can carry"
    )

  unassigned = list(state.invalid) + regroup_units(state.unassigned)
  if unassigned:
    state.warn(f"{len(unassigned)} item(s) could not be assigned to any truck")

  state.advance(PlanStage.FINALIZED)
  return unassigned


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------

def plan_loads(
  items: List[CargoItem],
  config: LimitsConfig = None,
  catalog: Optional[Iterable[TruckType]] = None,
  debug_log: Optional[DebugLogFn] = None,
  reopt_cfg: ReoptConfig = ReoptConfig(),
) -> LoadPlan:
  """
  Plans cargo items onto trucks.

  Invalid items and pieces no truck can take end up in unassignedItems with
  a warning; only bad configuration raises.
  """
  items = list(items)
  limits = _coerce_limits(config)
  trucks = tuple(by_preference(TRUCK_CATALOG if catalog is None else catalog))

  state = PlanState(limits=limits, catalog=trucks)
  state.emit("plan_started", {"items": len(items), "trucks": len(trucks), "limits": limits.to_dict()})

  _validate(state, items)
  _group(state, reopt_cfg)
  _pack(state)
  _evaluate(state)
  unassigned = _finalize(state)

  plan = state.snapshot(unassigned)
  state.emit("plan_ready", {
    "loads": plan.totalTrucks,
    "totalWeight": plan.totalWeight,
    "totalItems": plan.totalItems,
    "unassigned": len(plan.unassignedItems),
  })

  forward(debug_log, state.debug)
  return plan
