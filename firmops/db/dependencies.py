"""Database dependencies for FastAPI endpoints."""

from functools import lru_cache

from firmops.db.session import build_session_factory, get_engine
from firmops.repositories import Persistence


@lru_cache
def _default_persistence() -> Persistence:
    return Persistence(build_session_factory(get_engine()))


def get_persistence() -> Persistence:
    """Return the persistence collaborator shared by request handlers."""

    return _default_persistence()
