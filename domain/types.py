# domain/types.py
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, TypedDict

from domain.errors import ConfigurationError
from settings import SETTINGS


# ----------------------------
# Core enums / aliases
# ----------------------------

class TrailerCategory(str, Enum):
  FLATBED = "FLATBED"
  STEP_DECK = "STEP_DECK"
  RGN = "RGN"
  LOWBOY = "LOWBOY"
  DOUBLE_DROP = "DOUBLE_DROP"
  LANDOLL = "LANDOLL"
  CONESTOGA = "CONESTOGA"
  DRY_VAN = "DRY_VAN"
  REEFER = "REEFER"
  CURTAIN_SIDE = "CURTAIN_SIDE"
  MULTI_AXLE = "MULTI_AXLE"
  SCHNABEL = "SCHNABEL"
  PERIMETER = "PERIMETER"
  STEERABLE = "STEERABLE"
  BLADE = "BLADE"
  TANKER = "TANKER"
  HOPPER = "HOPPER"
  SPECIALIZED = "SPECIALIZED"


class PermitKind(str, Enum):
  OVERSIZE_WIDTH = "OVERSIZE_WIDTH"
  OVERSIZE_HEIGHT = "OVERSIZE_HEIGHT"
  OVERSIZE_LENGTH = "OVERSIZE_LENGTH"
  OVERWEIGHT = "OVERWEIGHT"
  SUPERLOAD = "SUPERLOAD"


class PlanStage(str, Enum):
  UNGROUPED = "UNGROUPED"
  GROUPED = "GROUPED"
  PACKED = "PACKED"
  EVALUATED = "EVALUATED"
  FINALIZED = "FINALIZED"


DebugLogFn = Callable[[str, Dict[str, Any]], None]


# ----------------------------
# Cargo
# ----------------------------

@dataclass(frozen=True)
class CargoItem:
  id: str
  description: str
  # None when the source omitted the value; validation reports it
  quantity: Optional[int]

  # feet / pounds (weight is per piece)
  length: Optional[float]
  width: Optional[float]
  height: Optional[float]
  weight: Optional[float]

  def total_weight(self) -> float:
    return float(self.weight or 0.0) * int(self.quantity or 0)

  def to_dict(self) -> Dict[str, Any]:
    return {
      "id": self.id,
      "description": self.description,
      "quantity": self.quantity,
      "length": self.length,
      "width": self.width,
      "height": self.height,
      "weight": self.weight,
    }


@dataclass(frozen=True)
class CargoUnit:
  """One physical piece of a validated CargoItem."""
  item: CargoItem
  index: int  # piece number within the item
  order: int  # position of the parent item in the request

  @property
  def length(self) -> float:
    return float(self.item.length)

  @property
  def width(self) -> float:
    return float(self.item.width)

  @property
  def height(self) -> float:
    return float(self.item.height)

  @property
  def weight(self) -> float:
    return float(self.item.weight)

  def footprint(self) -> float:
    return self.length * self.width


# ----------------------------
# Trailers
# ----------------------------

@dataclass(frozen=True)
class TruckType:
  id: str
  name: str
  category: TrailerCategory

  # deck (feet)
  deckLength: float
  deckWidth: float
  deckHeight: float

  # legal total height minus deck height (or interior height for enclosed trailers)
  maxLegalCargoHeight: float
  maxCargoWeight: float  # pounds

  # informational only
  description: str = ""
  bestFor: Tuple[str, ...] = ()
  features: Tuple[str, ...] = ()
  tareWeight: float = 15000.0
  loadingMethod: str = "crane"
  wellLength: Optional[float] = None

  def __post_init__(self) -> None:
    if not isinstance(self.category, TrailerCategory):
      raise ConfigurationError(f"truck {self.id}: unknown category {self.category!r}")
    for name in ("deckLength", "deckWidth", "maxLegalCargoHeight", "maxCargoWeight"):
      v = getattr(self, name)
      if v is None or not math.isfinite(float(v)) or float(v) <= 0:
        raise ConfigurationError(f"truck {self.id}: {name} must be positive, got {v!r}")
    if self.deckHeight is None or not math.isfinite(float(self.deckHeight)) or float(self.deckHeight) < 0:
      raise ConfigurationError(f"truck {self.id}: deckHeight must not be negative, got {self.deckHeight!r}")

  def deck_area(self) -> float:
    return float(self.deckLength) * float(self.deckWidth)

  def to_dict(self) -> Dict[str, Any]:
    d = asdict(self)
    d["category"] = self.category.value
    d["bestFor"] = list(self.bestFor)
    d["features"] = list(self.features)
    return d


# ----------------------------
# Legal limits (per request configuration)
# ----------------------------

@dataclass(frozen=True)
class LegalLimits:
  maxLegalLength: float = SETTINGS.MAX_LEGAL_LENGTH_FT
  maxLegalWidth: float = SETTINGS.MAX_LEGAL_WIDTH_FT
  maxLegalHeight: float = SETTINGS.MAX_LEGAL_HEIGHT_FT
  maxLegalWeight: float = SETTINGS.MAX_LEGAL_WEIGHT_LBS
  perAxleWeightLimit: float = SETTINGS.PER_AXLE_WEIGHT_LIMIT_LBS

  superloadWidth: float = SETTINGS.SUPERLOAD_WIDTH_FT
  superloadHeight: float = SETTINGS.SUPERLOAD_HEIGHT_FT
  superloadLength: float = SETTINGS.SUPERLOAD_LENGTH_FT
  superloadWeight: float = SETTINGS.SUPERLOAD_WEIGHT_LBS
  escortWidth: float = SETTINGS.ESCORT_WIDTH_FT

  def __post_init__(self) -> None:
    for f in fields(self):
      v = getattr(self, f.name)
      if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ConfigurationError(f"legal limit {f.name} must be a number, got {v!r}")
      if not math.isfinite(v) or not v > 0:
        raise ConfigurationError(f"legal limit {f.name} must be positive, got {v!r}")

  @property
  def overweight_threshold(self) -> float:
    return min(float(self.maxLegalWeight), float(self.perAxleWeightLimit))

  @classmethod
  def from_mapping(cls, options: Optional[Mapping[str, Any]]) -> "LegalLimits":
    if not options:
      return cls()
    known = {f.name for f in fields(cls)}
    unknown = sorted(k for k in options if k not in known)
    if unknown:
      raise ConfigurationError(f"unknown legal limit option(s): {', '.join(unknown)}")
    return cls(**dict(options))

  def to_dict(self) -> Dict[str, float]:
    return asdict(self)


# ----------------------------
# Fit / recommendation
# ----------------------------

@dataclass(frozen=True)
class Requirements:
  lengthRequired: float
  widthRequired: float
  heightRequired: float
  weightRequired: float

  def to_dict(self) -> Dict[str, float]:
    return asdict(self)


@dataclass(frozen=True)
class FitResult:
  fits: bool
  fitsWeight: bool
  fitsLength: bool
  fitsWidth: bool
  fitsHeight: bool
  rotated: bool = False

  @property
  def fitsWithPermits(self) -> bool:
    # height over the legal cargo height is a permit condition, not a physical one
    return self.fitsLength and self.fitsWidth and self.fitsWeight

  def failures(self) -> List[str]:
    out: List[str] = []
    if not self.fitsLength:
      out.append("length")
    if not self.fitsWidth:
      out.append("width")
    if not self.fitsHeight:
      out.append("height")
    if not self.fitsWeight:
      out.append("weight")
    return out


@dataclass(frozen=True)
class MultiTruckSuggestion:
  count: int
  reason: str


@dataclass(frozen=True)
class Recommendation:
  recommendedTruck: Optional[TruckType]
  reason: str
  isOversizePermitRequired: bool
  isOverweightPermitRequired: bool
  multiTruckSuggestion: Optional[MultiTruckSuggestion]
  requirements: Requirements
  permitFit: bool = False

  def to_dict(self) -> Dict[str, Any]:
    return {
      "recommendedTruck": self.recommendedTruck.to_dict() if self.recommendedTruck else None,
      "reason": self.reason,
      "isOversizePermitRequired": self.isOversizePermitRequired,
      "isOverweightPermitRequired": self.isOverweightPermitRequired,
      "multiTruckSuggestion": asdict(self.multiTruckSuggestion) if self.multiTruckSuggestion else None,
      "requirements": self.requirements.to_dict(),
      "permitFit": self.permitFit,
    }


@dataclass(frozen=True)
class LegalEvaluation:
  isLegal: bool
  permitsRequired: List[str]
  warnings: List[str]


# ----------------------------
# Plan output
# ----------------------------

@dataclass(frozen=True)
class ItemPlacement:
  itemId: str
  unit: int  # piece number within the item
  x: float  # feet from the front of the deck
  z: float  # feet from the left edge
  rotated: bool


@dataclass(frozen=True)
class Utilization:
  weightPercent: float
  spacePercent: float


class AxleLoads(TypedDict):
  payloadLbs: float
  kingpinLbs: float
  axleGroupLbs: float
  cogX: float
  cogZ: float


@dataclass
class Load:
  id: str
  items: List[CargoItem]
  recommendedTruck: TruckType
  placements: List[ItemPlacement]
  weight: float
  utilization: Utilization
  warnings: List[str] = field(default_factory=list)
  isLegal: bool = True
  permitsRequired: List[str] = field(default_factory=list)

  # packed cargo envelope (feet)
  length: float = 0.0
  width: float = 0.0
  height: float = 0.0
  axleLoads: Optional[AxleLoads] = None

  def item_count(self) -> int:
    return sum(int(it.quantity or 0) for it in self.items)

  def to_dict(self) -> Dict[str, Any]:
    return {
      "id": self.id,
      "items": [it.to_dict() for it in self.items],
      "recommendedTruck": self.recommendedTruck.to_dict(),
      "placements": [asdict(p) for p in self.placements],
      "weight": self.weight,
      "utilization": asdict(self.utilization),
      "warnings": list(self.warnings),
      "isLegal": self.isLegal,
      "permitsRequired": list(self.permitsRequired),
      "length": self.length,
      "width": self.width,
      "height": self.height,
      "axleLoads": (dict(self.axleLoads) if self.axleLoads else None),
    }


@dataclass
class LoadPlan:
  loads: List[Load]
  totalTrucks: int
  totalWeight: float
  totalItems: int
  unassignedItems: List[CargoItem]
  warnings: List[str]

  def to_dict(self) -> Dict[str, Any]:
    return {
      "loads": [ld.to_dict() for ld in self.loads],
      "totalTrucks": self.totalTrucks,
      "totalWeight": self.totalWeight,
      "totalItems": self.totalItems,
      "unassignedItems": [it.to_dict() for it in self.unassignedItems],
      "warnings": list(self.warnings),
    }


@dataclass
class DebugEvent:
  evt: str
  payload: Dict[str, Any]
