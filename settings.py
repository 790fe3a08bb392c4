# settings.py
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_float(name: str, default: float) -> float:
  raw = os.getenv(name)
  if raw is None or not raw.strip():
    return default
  return float(raw)


def _env_int(name: str, default: int) -> int:
  raw = os.getenv(name)
  if raw is None or not raw.strip():
    return default
  return int(raw)


def _env_flag(name: str, default: bool) -> bool:
  raw = os.getenv(name)
  if raw is None or not raw.strip():
    return default
  return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
  EPS: float = 1e-9

  # US federal defaults (feet / pounds), jurisdictions override per request
  MAX_LEGAL_LENGTH_FT: float = 53.0
  MAX_LEGAL_WIDTH_FT: float = 8.5
  MAX_LEGAL_HEIGHT_FT: float = 13.5
  MAX_LEGAL_WEIGHT_LBS: float = 80000.0
  PER_AXLE_WEIGHT_LIMIT_LBS: float = 48000.0

  SUPERLOAD_WIDTH_FT: float = 16.0
  SUPERLOAD_HEIGHT_FT: float = 16.0
  SUPERLOAD_LENGTH_FT: float = 120.0
  SUPERLOAD_WEIGHT_LBS: float = 200000.0
  ESCORT_WIDTH_FT: float = 12.0

  # trailer axle group sits this far ahead of the rear of the deck
  AXLE_GROUP_SETBACK_FT: float = 4.0

  # share of the deck area usable by the rough grouping pre-check
  FILL_FACTOR_FLOOR_DEFAULT: float = 1.0

  REBALANCE_ENABLED: bool = True
  REBALANCE_HIGH_UTIL: float = 90.0
  REBALANCE_LOW_UTIL: float = 80.0
  REBALANCE_MAX_ITERS: int = 20

  DEBUG_ENABLED: bool = True
  DEBUG_DIR: str = "debug_runs"
  DEBUG_RETURN_PATH: bool = False


def load_settings() -> Settings:
  d = Settings()
  return Settings(
    EPS=_env_float("PLANNER_EPS", d.EPS),
    MAX_LEGAL_LENGTH_FT=_env_float("MAX_LEGAL_LENGTH_FT", d.MAX_LEGAL_LENGTH_FT),
    MAX_LEGAL_WIDTH_FT=_env_float("MAX_LEGAL_WIDTH_FT", d.MAX_LEGAL_WIDTH_FT),
    MAX_LEGAL_HEIGHT_FT=_env_float("MAX_LEGAL_HEIGHT_FT", d.MAX_LEGAL_HEIGHT_FT),
    MAX_LEGAL_WEIGHT_LBS=_env_float("MAX_LEGAL_WEIGHT_LBS", d.MAX_LEGAL_WEIGHT_LBS),
    PER_AXLE_WEIGHT_LIMIT_LBS=_env_float("PER_AXLE_WEIGHT_LIMIT_LBS", d.PER_AXLE_WEIGHT_LIMIT_LBS),
    SUPERLOAD_WIDTH_FT=_env_float("SUPERLOAD_WIDTH_FT", d.SUPERLOAD_WIDTH_FT),
    SUPERLOAD_HEIGHT_FT=_env_float("SUPERLOAD_HEIGHT_FT", d.SUPERLOAD_HEIGHT_FT),
    SUPERLOAD_LENGTH_FT=_env_float("SUPERLOAD_LENGTH_FT", d.SUPERLOAD_LENGTH_FT),
    SUPERLOAD_WEIGHT_LBS=_env_float("SUPERLOAD_WEIGHT_LBS", d.SUPERLOAD_WEIGHT_LBS),
    ESCORT_WIDTH_FT=_env_float("ESCORT_WIDTH_FT", d.ESCORT_WIDTH_FT),
    AXLE_GROUP_SETBACK_FT=_env_float("AXLE_GROUP_SETBACK_FT", d.AXLE_GROUP_SETBACK_FT),
    FILL_FACTOR_FLOOR_DEFAULT=_env_float("FILL_FACTOR_FLOOR_DEFAULT", d.FILL_FACTOR_FLOOR_DEFAULT),
    REBALANCE_ENABLED=_env_flag("REBALANCE_ENABLED", d.REBALANCE_ENABLED),
    REBALANCE_HIGH_UTIL=_env_float("REBALANCE_HIGH_UTIL", d.REBALANCE_HIGH_UTIL),
    REBALANCE_LOW_UTIL=_env_float("REBALANCE_LOW_UTIL", d.REBALANCE_LOW_UTIL),
    REBALANCE_MAX_ITERS=_env_int("REBALANCE_MAX_ITERS", d.REBALANCE_MAX_ITERS),
    DEBUG_ENABLED=_env_flag("DEBUG_ENABLED", d.DEBUG_ENABLED),
    DEBUG_DIR=os.getenv("DEBUG_DIR", d.DEBUG_DIR),
    DEBUG_RETURN_PATH=_env_flag("DEBUG_RETURN_PATH", d.DEBUG_RETURN_PATH),
  )


SETTINGS = load_settings()

# empty => no database, the static truck catalog is used
DATABASE_URL = os.getenv("DATABASE_URL", "")
