# solver/placement.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from catalogs.item import expand_units, orientations, regroup_units
from catalogs.placed_item import PlacedUnit, from_unit_at_pose
from constraints.bounds import can_place
from debug.events import emit
from domain.types import CargoItem, CargoUnit, DebugLogFn, ItemPlacement, TruckType
from geometry.aabb import rect_at
from settings import SETTINGS


@dataclass
class Lane:
  """A band across the deck (z .. z+width) filled front to back."""
  z: float
  width: float
  cursor: float = 0.0  # next free x


@dataclass
class PlacementResult:
  placements: List[ItemPlacement] = field(default_factory=list)
  unplaced: List[CargoItem] = field(default_factory=list)


def _sort_units(units: Iterable[CargoUnit]) -> List[CargoUnit]:
  # sorted() is stable: ties keep request order, then piece order
  return sorted(units, key=lambda u: -u.footprint())


def _try_lanes(
  unit: CargoUnit,
  lanes: List[Lane],
  placed: List[PlacedUnit],
  truck: TruckType,
  eps: float,
) -> Optional[Tuple[Lane, PlacedUnit]]:
  deck_l = float(truck.deckLength)

  for lane in lanes:
    for dx, dz, rotated in orientations(unit.length, unit.width):
      if dz > lane.width + eps:
        continue
      if lane.cursor + dx > deck_l + eps:
        continue
      ok, _ = can_place(rect_at(lane.cursor, lane.z, dx, dz), placed, truck)
      if ok:
        return lane, from_unit_at_pose(unit, lane.cursor, lane.z, rotated)
  return None


def _open_lane(
  unit: CargoUnit,
  lanes: List[Lane],
  placed: List[PlacedUnit],
  truck: TruckType,
  eps: float,
) -> Optional[Tuple[Lane, PlacedUnit]]:
  used_width = sum(l.width for l in lanes)
  remaining = float(truck.deckWidth) - used_width

  for dx, dz, rotated in orientations(unit.length, unit.width):
    if dz > remaining + eps:
      continue
    if dx > float(truck.deckLength) + eps:
      continue
    ok, _ = can_place(rect_at(0.0, used_width, dx, dz), placed, truck)
    if ok:
      lane = Lane(z=used_width, width=dz)
      lanes.append(lane)
      return lane, from_unit_at_pose(unit, 0.0, used_width, rotated)
  return None


def place_units(
  truck: TruckType,
  units: Iterable[CargoUnit],
  debug_log: Optional[DebugLogFn] = None,
  eps: float = SETTINGS.EPS,
) -> Tuple[List[PlacedUnit], List[CargoUnit]]:
  """
  Lane-based floor layout of individual pieces on one deck.

  Pieces go largest footprint first. Each piece tries the existing lanes in
  order (natural orientation, then rotated), and opens a new lane beside the
  last one when none has room. Height is not considered here.

  Returns (placed, unplaced). Nothing is dropped: every input piece ends up
  in exactly one of the two lists.
  """
  lanes: List[Lane] = []
  placed: List[PlacedUnit] = []
  unplaced: List[CargoUnit] = []

  for unit in _sort_units(units):
    hit = _try_lanes(unit, lanes, placed, truck, eps)
    opened = False
    if hit is None:
      hit = _open_lane(unit, lanes, placed, truck, eps)
      opened = hit is not None

    if hit is None:
      unplaced.append(unit)
      emit(debug_log, "unit_unplaced", {
        "truckId": truck.id,
        "itemId": unit.item.id,
        "unit": unit.index,
        "lanes": len(lanes),
      })
      continue

    lane, p = hit
    placed.append(p)
    lane.cursor = p.x + p.dx
    emit(debug_log, "unit_placed", {
      "truckId": truck.id,
      "itemId": unit.item.id,
      "unit": unit.index,
      "x": p.x,
      "z": p.z,
      "rotated": p.rotated,
      "newLane": opened,
    })

  return placed, unplaced


def place(truck: TruckType, items: List[CargoItem], debug_log: Optional[DebugLogFn] = None) -> PlacementResult:
  """
  Places validated cargo items (expanded by quantity) on the truck deck.
  Unplaced pieces come back as CargoItems carrying the unplaced quantity.
  """
  placed, unplaced = place_units(truck, expand_units(items), debug_log=debug_log)
  return PlacementResult(
    placements=[p.to_placement() for p in placed],
    unplaced=regroup_units(unplaced),
  )
