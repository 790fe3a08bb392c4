# domain/errors.py
from __future__ import annotations


class PlanningError(ValueError):
  """Base class for load planning failures."""


class ValidationError(PlanningError):
  """Bad input handed to a pure evaluator, or an unparseable record."""


class ConfigurationError(PlanningError):
  """Caller misuse: bad legal limits or truck catalog. Always fatal."""
