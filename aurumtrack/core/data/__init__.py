"""Data layer: quote store, snapshot persistence and providers."""

from .snapshot import SnapshotRepository, restore_store
from .store import QuoteStore

__all__ = ["QuoteStore", "SnapshotRepository", "restore_store"]
