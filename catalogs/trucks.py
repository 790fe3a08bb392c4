# catalogs/trucks.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from domain.errors import ConfigurationError
from domain.types import TrailerCategory, TruckType

CATALOG_VERSION = "2024.2"

LEGAL_TOTAL_HEIGHT_FT = 13.5


def _open_deck_height(deck_height: float) -> float:
  return round(LEGAL_TOTAL_HEIGHT_FT - deck_height, 2)


# ----------------------------
# Category ordering / display
# ----------------------------

# common and cheap first, specialized last
CATEGORY_ORDER: Tuple[TrailerCategory, ...] = (
  TrailerCategory.FLATBED,
  TrailerCategory.STEP_DECK,
  TrailerCategory.RGN,
  TrailerCategory.LOWBOY,
  TrailerCategory.DOUBLE_DROP,
  TrailerCategory.MULTI_AXLE,
  TrailerCategory.LANDOLL,
  TrailerCategory.CONESTOGA,
  TrailerCategory.DRY_VAN,
  TrailerCategory.REEFER,
  TrailerCategory.CURTAIN_SIDE,
  TrailerCategory.SCHNABEL,
  TrailerCategory.PERIMETER,
  TrailerCategory.STEERABLE,
  TrailerCategory.BLADE,
  TrailerCategory.TANKER,
  TrailerCategory.HOPPER,
  TrailerCategory.SPECIALIZED,
)

CATEGORY_NAMES: Dict[TrailerCategory, str] = {
  TrailerCategory.FLATBED: "Flatbed Trailers",
  TrailerCategory.STEP_DECK: "Step Deck Trailers",
  TrailerCategory.RGN: "RGN (Removable Gooseneck)",
  TrailerCategory.LOWBOY: "Lowboy Trailers",
  TrailerCategory.DOUBLE_DROP: "Double Drop Trailers",
  TrailerCategory.LANDOLL: "Landoll / Tilt Trailers",
  TrailerCategory.CONESTOGA: "Conestoga (Covered Flatbed)",
  TrailerCategory.DRY_VAN: "Dry Van",
  TrailerCategory.REEFER: "Refrigerated",
  TrailerCategory.CURTAIN_SIDE: "Curtain Side",
  TrailerCategory.MULTI_AXLE: "Multi-Axle Heavy Haul",
  TrailerCategory.SCHNABEL: "Schnabel",
  TrailerCategory.PERIMETER: "Perimeter Trailers",
  TrailerCategory.STEERABLE: "Steerable Trailers",
  TrailerCategory.BLADE: "Blade Trailers",
  TrailerCategory.TANKER: "Tank Trailers",
  TrailerCategory.HOPPER: "Hopper Trailers",
  TrailerCategory.SPECIALIZED: "Specialized Trailers",
}

_missing = [c.value for c in TrailerCategory if c not in CATEGORY_ORDER or c not in CATEGORY_NAMES]
if _missing or len(set(CATEGORY_ORDER)) != len(CATEGORY_ORDER):
  raise RuntimeError(f"trailer category tables out of sync with TrailerCategory: {_missing}")

_CATEGORY_RANK: Dict[TrailerCategory, int] = {c: i for i, c in enumerate(CATEGORY_ORDER)}


# ----------------------------
# Static catalog
# ----------------------------

TRUCK_CATALOG: Tuple[TruckType, ...] = (
  TruckType(
    id="flatbed-48", name="48' Flatbed", category=TrailerCategory.FLATBED,
    deckLength=48.0, deckWidth=8.5, deckHeight=5.0,
    maxLegalCargoHeight=_open_deck_height(5.0), maxCargoWeight=48000.0, tareWeight=15000.0,
    loadingMethod="crane",
    bestFor=("Steel", "Lumber", "Palletized equipment attachments"),
    features=("Side loading", "Crane or forklift access"),
    description="Standard open deck for legal-height freight.",
  ),
  TruckType(
    id="flatbed-53", name="53' Flatbed", category=TrailerCategory.FLATBED,
    deckLength=53.0, deckWidth=8.5, deckHeight=5.0,
    maxLegalCargoHeight=_open_deck_height(5.0), maxCargoWeight=48000.0, tareWeight=16000.0,
    loadingMethod="crane",
    bestFor=("Long beams", "Pipe", "Multiple small machines"),
    features=("Maximum legal deck length",),
    description="Longest legal single flatbed.",
  ),
  TruckType(
    id="flatbed-48-lowpro", name="48' Low-Profile Flatbed", category=TrailerCategory.FLATBED,
    deckLength=48.0, deckWidth=8.5, deckHeight=3.5,
    maxLegalCargoHeight=_open_deck_height(3.5), maxCargoWeight=45000.0, tareWeight=15500.0,
    loadingMethod="forklift",
    bestFor=("Compact excavators", "Skid steers", "Taller crated machinery"),
    features=("Low-profile tires", "Full-length flat deck"),
    description="Flat deck on low-profile running gear for freight up to 10' tall.",
  ),
  TruckType(
    id="step-deck-48", name="48' Step Deck", category=TrailerCategory.STEP_DECK,
    deckLength=48.0, deckWidth=8.5, deckHeight=3.5,
    maxLegalCargoHeight=_open_deck_height(3.5), maxCargoWeight=48000.0, tareWeight=16000.0,
    loadingMethod="ramp",
    bestFor=("Tractors", "Backhoes", "Tall machinery"),
    features=("Upper deck 11'", "Loading ramps"),
    description="Drop deck for cargo too tall for a flatbed.",
  ),
  TruckType(
    id="step-deck-53", name="53' Step Deck", category=TrailerCategory.STEP_DECK,
    deckLength=53.0, deckWidth=8.5, deckHeight=3.5,
    maxLegalCargoHeight=_open_deck_height(3.5), maxCargoWeight=48000.0, tareWeight=17000.0,
    loadingMethod="ramp",
    bestFor=("Long tall machinery", "Scissor lifts", "Boom lifts"),
    features=("Upper deck 10'", "Loading ramps"),
    description="Longest legal drop deck.",
  ),
  TruckType(
    id="rgn-2axle", name="RGN (2-Axle)", category=TrailerCategory.RGN,
    deckLength=29.0, deckWidth=8.5, deckHeight=2.0, wellLength=29.0,
    maxLegalCargoHeight=_open_deck_height(2.0), maxCargoWeight=42000.0, tareWeight=20000.0,
    loadingMethod="drive-on",
    bestFor=("Excavators", "Dozers", "Wheel loaders"),
    features=("Detachable gooseneck", "Drive-on loading"),
    description="Removable gooseneck lowboy for drive-on equipment.",
  ),
  TruckType(
    id="rgn-3axle", name="RGN (3-Axle)", category=TrailerCategory.RGN,
    deckLength=29.0, deckWidth=8.5, deckHeight=2.0, wellLength=29.0,
    maxLegalCargoHeight=_open_deck_height(2.0), maxCargoWeight=52000.0, tareWeight=23000.0,
    loadingMethod="drive-on",
    bestFor=("Large excavators", "Motor graders"),
    features=("Detachable gooseneck", "Third axle"),
    description="Three-axle RGN for heavier drive-on equipment.",
  ),
  TruckType(
    id="rgn-stretch", name="Stretch RGN", category=TrailerCategory.RGN,
    deckLength=40.0, deckWidth=8.5, deckHeight=2.0, wellLength=40.0,
    maxLegalCargoHeight=_open_deck_height(2.0), maxCargoWeight=40000.0, tareWeight=24000.0,
    loadingMethod="drive-on",
    bestFor=("Long-boom excavators", "Long drive-on machines"),
    features=("Extendable well",),
    description="Extendable RGN for long drive-on equipment.",
  ),
  TruckType(
    id="lowboy-fixed", name="Fixed-Neck Lowboy", category=TrailerCategory.LOWBOY,
    deckLength=24.0, deckWidth=8.5, deckHeight=1.5, wellLength=24.0,
    maxLegalCargoHeight=_open_deck_height(1.5), maxCargoWeight=40000.0, tareWeight=18000.0,
    loadingMethod="ramp",
    bestFor=("Tall compact machinery", "Transformers"),
    features=("Lowest deck height",),
    description="Fixed gooseneck lowboy with rear ramps.",
  ),
  TruckType(
    id="lowboy-extendable", name="Extendable Lowboy", category=TrailerCategory.LOWBOY,
    deckLength=40.0, deckWidth=8.5, deckHeight=1.5, wellLength=40.0,
    maxLegalCargoHeight=_open_deck_height(1.5), maxCargoWeight=40000.0, tareWeight=22000.0,
    loadingMethod="ramp",
    bestFor=("Long tall machinery",),
    features=("Extendable well",),
    description="Lowboy with a telescoping well.",
  ),
  TruckType(
    id="double-drop", name="Double Drop", category=TrailerCategory.DOUBLE_DROP,
    deckLength=29.0, deckWidth=8.5, deckHeight=1.75, wellLength=29.0,
    maxLegalCargoHeight=_open_deck_height(1.75), maxCargoWeight=45000.0, tareWeight=19000.0,
    loadingMethod="crane",
    bestFor=("Tall industrial equipment", "Crated machinery"),
    features=("Front and rear decks",),
    description="Low well between upper front and rear decks.",
  ),
  TruckType(
    id="double-drop-stretch", name="Stretch Double Drop", category=TrailerCategory.DOUBLE_DROP,
    deckLength=48.0, deckWidth=8.5, deckHeight=1.5, wellLength=48.0,
    maxLegalCargoHeight=_open_deck_height(1.5), maxCargoWeight=48000.0, tareWeight=23000.0,
    loadingMethod="crane",
    bestFor=("Long tall machinery", "Tanks", "Vessels"),
    features=("Extended well",),
    description="Double drop with an extended low well.",
  ),
  TruckType(
    id="multi-axle-9", name="9-Axle Lowboy", category=TrailerCategory.MULTI_AXLE,
    deckLength=30.0, deckWidth=10.0, deckHeight=2.0, wellLength=30.0,
    maxLegalCargoHeight=_open_deck_height(2.0), maxCargoWeight=120000.0, tareWeight=45000.0,
    loadingMethod="drive-on",
    bestFor=("Mining equipment", "Large dozers", "Crawler cranes"),
    features=("Jeep and stinger", "Wide deck"),
    description="Heavy-haul lowboy with jeep and stinger dollies.",
  ),
  TruckType(
    id="multi-axle-13", name="13-Axle Heavy Haul", category=TrailerCategory.MULTI_AXLE,
    deckLength=32.0, deckWidth=10.0, deckHeight=2.5, wellLength=32.0,
    maxLegalCargoHeight=_open_deck_height(2.5), maxCargoWeight=180000.0, tareWeight=60000.0,
    loadingMethod="drive-on",
    bestFor=("Transformers", "Large mining trucks"),
    features=("13 axles", "Wide deck"),
    description="Multi-axle combination for very heavy loads.",
  ),
  TruckType(
    id="landoll-48", name="48' Landoll Tilt", category=TrailerCategory.LANDOLL,
    deckLength=48.0, deckWidth=8.5, deckHeight=2.5,
    maxLegalCargoHeight=_open_deck_height(2.5), maxCargoWeight=50000.0, tareWeight=20000.0,
    loadingMethod="tilt",
    bestFor=("Forklifts", "Non-running machinery", "Containers"),
    features=("Hydraulic tilt bed", "Winch"),
    description="Traveling-axle tilt deck, loads without ramps.",
  ),
  TruckType(
    id="conestoga-48", name="48' Conestoga", category=TrailerCategory.CONESTOGA,
    deckLength=48.0, deckWidth=8.5, deckHeight=5.0,
    maxLegalCargoHeight=8.0, maxCargoWeight=45000.0, tareWeight=17000.0,
    loadingMethod="forklift",
    bestFor=("Weather-sensitive machinery", "Electrical equipment"),
    features=("Rolling tarp system",),
    description="Flatbed with a sliding tarp enclosure.",
  ),
  TruckType(
    id="dry-van-53", name="53' Dry Van", category=TrailerCategory.DRY_VAN,
    deckLength=53.0, deckWidth=8.2, deckHeight=4.0,
    maxLegalCargoHeight=9.0, maxCargoWeight=45000.0, tareWeight=15000.0,
    loadingMethod="forklift",
    bestFor=("Palletized parts", "Crated components"),
    features=("Enclosed", "Dock height"),
    description="Enclosed van for dock-loaded freight.",
  ),
  TruckType(
    id="reefer-53", name="53' Reefer", category=TrailerCategory.REEFER,
    deckLength=53.0, deckWidth=8.0, deckHeight=4.0,
    maxLegalCargoHeight=8.5, maxCargoWeight=43000.0, tareWeight=16500.0,
    loadingMethod="forklift",
    bestFor=("Temperature-controlled freight",),
    features=("Refrigeration unit", "Enclosed"),
    description="Refrigerated enclosed van.",
  ),
  TruckType(
    id="curtain-side-53", name="53' Curtain Side", category=TrailerCategory.CURTAIN_SIDE,
    deckLength=53.0, deckWidth=8.2, deckHeight=4.0,
    maxLegalCargoHeight=9.0, maxCargoWeight=45000.0, tareWeight=16000.0,
    loadingMethod="forklift",
    bestFor=("Side-loaded palletized freight",),
    features=("Sliding curtains",),
    description="Enclosed trailer with curtain sides for side loading.",
  ),
  TruckType(
    id="schnabel", name="Schnabel", category=TrailerCategory.SCHNABEL,
    deckLength=80.0, deckWidth=10.0, deckHeight=2.0,
    maxLegalCargoHeight=_open_deck_height(2.0), maxCargoWeight=160000.0, tareWeight=70000.0,
    loadingMethod="crane",
    bestFor=("Pressure vessels", "Transformers", "Reactor components"),
    features=("Load-bearing cargo", "Hydraulic height adjustment"),
    description="Cargo carried between two arms, becoming part of the trailer.",
  ),
  TruckType(
    id="perimeter", name="Perimeter Frame", category=TrailerCategory.PERIMETER,
    deckLength=65.0, deckWidth=12.0, deckHeight=2.0,
    maxLegalCargoHeight=_open_deck_height(2.0), maxCargoWeight=120000.0, tareWeight=55000.0,
    loadingMethod="crane",
    bestFor=("Wide vessels", "Boats", "Bridge girders"),
    features=("Open center frame", "Wide stance"),
    description="Perimeter frame trailer for very long and wide cargo.",
  ),
  TruckType(
    id="steerable-50", name="Steerable Extendable", category=TrailerCategory.STEERABLE,
    deckLength=50.0, deckWidth=8.5, deckHeight=3.5,
    maxLegalCargoHeight=_open_deck_height(3.5), maxCargoWeight=80000.0, tareWeight=40000.0,
    loadingMethod="crane",
    bestFor=("Long beams", "Precast concrete"),
    features=("Rear steer axles",),
    description="Trailer with steerable rear axles for tight routes.",
  ),
  TruckType(
    id="blade", name="Wind Blade Trailer", category=TrailerCategory.BLADE,
    deckLength=150.0, deckWidth=8.5, deckHeight=4.0,
    maxLegalCargoHeight=_open_deck_height(4.0), maxCargoWeight=60000.0, tareWeight=35000.0,
    loadingMethod="crane",
    bestFor=("Wind turbine blades", "Tower sections"),
    features=("Extendable to 150'",),
    description="Telescoping trailer for wind energy components.",
  ),
  TruckType(
    id="tanker", name="Tank Trailer", category=TrailerCategory.TANKER,
    deckLength=42.0, deckWidth=8.0, deckHeight=4.5,
    maxLegalCargoHeight=6.5, maxCargoWeight=50000.0, tareWeight=14000.0,
    loadingMethod="pump",
    bestFor=("Liquids",),
    features=("Baffled tank",),
    description="Liquid bulk tank.",
  ),
  TruckType(
    id="hopper", name="Hopper Trailer", category=TrailerCategory.HOPPER,
    deckLength=42.0, deckWidth=8.0, deckHeight=4.0,
    maxLegalCargoHeight=7.0, maxCargoWeight=52000.0, tareWeight=13000.0,
    loadingMethod="gravity",
    bestFor=("Dry bulk",),
    features=("Bottom discharge",),
    description="Dry bulk hopper.",
  ),
  TruckType(
    id="hydraulic-platform", name="Hydraulic Modular Platform", category=TrailerCategory.SPECIALIZED,
    deckLength=60.0, deckWidth=10.0, deckHeight=3.0,
    maxLegalCargoHeight=_open_deck_height(3.0), maxCargoWeight=250000.0, tareWeight=80000.0,
    loadingMethod="crane",
    bestFor=("Superloads", "Refinery modules"),
    features=("Self-leveling axles", "Modular lines"),
    description="Modular platform for superloads.",
  ),
)


# ----------------------------
# Lookups
# ----------------------------

def category_rank(category: TrailerCategory) -> int:
  return _CATEGORY_RANK[category]


def by_preference(catalog: Iterable[TruckType]) -> List[TruckType]:
  """
  Preference order used by the recommender: category rank, then catalog order.
  """
  trucks = list(catalog)
  if not trucks:
    raise ConfigurationError("truck catalog is empty")
  return sorted(trucks, key=lambda t: category_rank(t.category))


def get_truck(truck_id: str, catalog: Iterable[TruckType] = TRUCK_CATALOG) -> Optional[TruckType]:
  for t in catalog:
    if t.id == truck_id:
      return t
  return None


def largest_capacity(catalog: Iterable[TruckType]) -> TruckType:
  ordered = by_preference(catalog)
  best = ordered[0]
  for t in ordered[1:]:
    if t.maxCargoWeight > best.maxCargoWeight:
      best = t
  return best


def catalog_to_json(catalog: Iterable[TruckType]) -> List[Dict]:
  out: List[Dict] = []
  for t in by_preference(catalog):
    d = t.to_dict()
    d["categoryName"] = CATEGORY_NAMES[t.category]
    out.append(d)
  return out
