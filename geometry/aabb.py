# geometry/aabb.py
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from domain.types import TruckType

# (minX, maxX, minZ, maxZ) on the deck plane, origin at the front-left corner
Rect = Tuple[float, float, float, float]


def rect_at(x: float, z: float, dx: float, dz: float) -> Rect:
  return (x, x + dx, z, z + dz)


def rect_intersects(a: Rect, b: Rect, eps: float = 1e-9) -> bool:
  # touching edges do not count as overlap
  if a[1] <= b[0] + eps or a[0] >= b[1] - eps:
    return False
  if a[3] <= b[2] + eps or a[2] >= b[3] - eps:
    return False
  return True


def oob_check(r: Rect, truck: TruckType, eps: float = 1e-9) -> bool:
  if r[0] < 0.0 - eps or r[1] > float(truck.deckLength) + eps:
    return True
  if r[2] < 0.0 - eps or r[3] > float(truck.deckWidth) + eps:
    return True
  return False


def collides_with_any(r: Rect, placed: Iterable[Rect], eps: float = 1e-9) -> bool:
  for other in placed:
    if rect_intersects(r, other, eps=eps):
      return True
  return False


def envelope(rects: Iterable[Rect]) -> Optional[Rect]:
  minX = minZ = float("inf")
  maxX = maxZ = float("-inf")
  seen = False
  for r in rects:
    seen = True
    minX = min(minX, r[0])
    maxX = max(maxX, r[1])
    minZ = min(minZ, r[2])
    maxZ = max(maxZ, r[3])
  if not seen:
    return None
  return (minX, maxX, minZ, maxZ)
