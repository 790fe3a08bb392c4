# constraints/fit.py
from __future__ import annotations

from domain.errors import ValidationError
from domain.types import FitResult, Requirements, TruckType
from settings import SETTINGS


def _validate(req: Requirements) -> None:
  for name in ("lengthRequired", "widthRequired", "heightRequired", "weightRequired"):
    v = getattr(req, name)
    if v is None or not float(v) > 0:
      raise ValidationError(f"{name} must be positive, got {v!r}")


def evaluate(truck: TruckType, req: Requirements, eps: float = SETTINGS.EPS) -> FitResult:
  """
  Does an aggregate cargo footprint/weight fit this trailer?

  Length/width are accepted in the natural orientation or, if that fails,
  with length and width swapped (rotated = True).
  Height is checked against the legal cargo height of the trailer, not its
  physical clearance.
  """
  _validate(req)

  L = float(req.lengthRequired)
  W = float(req.widthRequired)
  Dl = float(truck.deckLength)
  Dw = float(truck.deckWidth)

  natural_l = L <= Dl + eps
  natural_w = W <= Dw + eps
  rotated = False

  if natural_l and natural_w:
    fits_length = fits_width = True
  elif W <= Dl + eps and L <= Dw + eps:
    fits_length = fits_width = True
    rotated = True
  else:
    fits_length, fits_width = natural_l, natural_w

  fits_weight = float(req.weightRequired) <= float(truck.maxCargoWeight) + eps
  fits_height = float(req.heightRequired) <= float(truck.maxLegalCargoHeight) + eps

  return FitResult(
    fits=fits_weight and fits_length and fits_width and fits_height,
    fitsWeight=fits_weight,
    fitsLength=fits_length,
    fitsWidth=fits_width,
    fitsHeight=fits_height,
    rotated=rotated,
  )
