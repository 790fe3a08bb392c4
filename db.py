from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from settings import DATABASE_URL


def get_engine(url: str = DATABASE_URL) -> Optional[Engine]:
  if not url:
    return None
  return create_engine(url, pool_pre_ping=True)
