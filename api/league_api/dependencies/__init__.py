"""FastAPI dependencies for the league API."""

from .auth import get_actor, verify_api_key
from .stores import get_draft_store, get_store_factory

__all__ = ["get_actor", "get_draft_store", "get_store_factory", "verify_api_key"]
