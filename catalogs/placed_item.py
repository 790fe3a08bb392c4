# catalogs/placed_item.py
from __future__ import annotations

from dataclasses import dataclass

from domain.types import CargoUnit, ItemPlacement
from geometry.aabb import Rect, rect_at


@dataclass(frozen=True)
class PlacedUnit:
  unit: CargoUnit
  x: float
  z: float
  dx: float  # effective size along the deck length
  dz: float  # effective size across the deck
  rotated: bool

  @property
  def rect(self) -> Rect:
    return rect_at(self.x, self.z, self.dx, self.dz)

  @property
  def center(self) -> tuple:
    return (self.x + self.dx / 2.0, self.z + self.dz / 2.0)

  def to_placement(self) -> ItemPlacement:
    return ItemPlacement(
      itemId=self.unit.item.id,
      unit=self.unit.index,
      x=self.x,
      z=self.z,
      rotated=self.rotated,
    )


def from_unit_at_pose(unit: CargoUnit, x: float, z: float, rotated: bool) -> PlacedUnit:
  if rotated:
    dx, dz = unit.width, unit.length
  else:
    dx, dz = unit.length, unit.width
  return PlacedUnit(unit=unit, x=float(x), z=float(z), dx=float(dx), dz=float(dz), rotated=rotated)
