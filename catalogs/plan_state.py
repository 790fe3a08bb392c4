# catalogs/plan_state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from domain.errors import PlanningError
from domain.types import CargoItem, CargoUnit, DebugEvent, LegalLimits, Load, LoadPlan, PlanStage, TruckType

_NEXT_STAGE: Dict[PlanStage, PlanStage] = {
  PlanStage.UNGROUPED: PlanStage.GROUPED,
  PlanStage.GROUPED: PlanStage.PACKED,
  PlanStage.PACKED: PlanStage.EVALUATED,
  PlanStage.EVALUATED: PlanStage.FINALIZED,
}


@dataclass
class PlanState:
  """Mutable state of one planning request. Never shared between requests."""
  limits: LegalLimits
  catalog: Tuple[TruckType, ...]
  stage: PlanStage = PlanStage.UNGROUPED
  debug: List[DebugEvent] = field(default_factory=list)

  # valid pieces still to be grouped
  units: List[CargoUnit] = field(default_factory=list)
  # GROUPED: solver.grouper.UnitGroup records
  groups: List[Any] = field(default_factory=list)
  loads: List[Load] = field(default_factory=list)

  # pieces of valid items that could not be carried
  unassigned: List[CargoUnit] = field(default_factory=list)
  # whole items rejected by validation
  invalid: List[CargoItem] = field(default_factory=list)
  warnings: List[str] = field(default_factory=list)

  def emit(self, evt: str, payload: dict) -> None:
    self.debug.append(DebugEvent(evt=evt, payload=payload))

  def warn(self, msg: str) -> None:
    self.warnings.append(msg)

  def require(self, stage: PlanStage) -> None:
    if self.stage is not stage:
      raise PlanningError(f"plan is {self.stage.value}, expected {stage.value}")

  def advance(self, stage: PlanStage) -> None:
    expected = _NEXT_STAGE.get(self.stage)
    if expected is not stage:
      raise PlanningError(f"cannot move plan from {self.stage.value} to {stage.value}")
    self.emit("stage", {"from": self.stage.value, "to": stage.value})
    self.stage = stage

  def total_items(self) -> int:
    return sum(ld.item_count() for ld in self.loads)

  def snapshot(self, unassigned_items: List[CargoItem]) -> LoadPlan:
    self.require(PlanStage.FINALIZED)
    return LoadPlan(
      loads=list(self.loads),
      totalTrucks=len(self.loads),
      totalWeight=sum(ld.weight for ld in self.loads),
      totalItems=self.total_items(),
      unassignedItems=list(unassigned_items),
      warnings=list(self.warnings),
    )
