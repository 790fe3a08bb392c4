# constraints/bounds.py
from __future__ import annotations

from typing import List, Tuple

from catalogs.placed_item import PlacedUnit
from domain.types import TruckType
from geometry.aabb import Rect, collides_with_any, oob_check


def check_oob(rect: Rect, truck: TruckType) -> Tuple[bool, List[str]]:
  if oob_check(rect, truck):
    return (False, ["oob"])
  return (True, [])


def check_collision(rect: Rect, placed: List[PlacedUnit]) -> Tuple[bool, List[str]]:
  if collides_with_any(rect, (p.rect for p in placed)):
    return (False, ["collision"])
  return (True, [])


def can_place(rect: Rect, placed: List[PlacedUnit], truck: TruckType) -> Tuple[bool, List[str]]:
  ok, r = check_oob(rect, truck)
  if not ok:
    return (False, r)
  return check_collision(rect, placed)
