"""FastAPI dependencies for the box-office-league API."""

from .auth import get_actor, verify_api_key
from .store import get_store

__all__ = ["get_actor", "get_store", "verify_api_key"]
