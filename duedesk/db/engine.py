# duedesk/db/engine.py

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from duedesk.config import get_settings


@lru_cache
def _engine_for(url: str) -> Engine:
    # echo=True if you want to see SQL printed in the terminal
    return create_engine(url, future=True)


def get_engine() -> Engine:
    return _engine_for(get_settings().database_url)
