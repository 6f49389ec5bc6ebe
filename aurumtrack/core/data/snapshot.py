"""Last-snapshot persistence as a single JSON document."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from aurumtrack.core.exceptions import SnapshotError
from aurumtrack.core.logging import logger
from aurumtrack.core.models import QuoteSnapshot

from .store import QuoteStore


class SnapshotRepository:
    """Reads and overwrites the snapshot file."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def save(self, snapshot: QuoteSnapshot) -> None:
        """Atomically replace the snapshot file."""

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".snapshot-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(snapshot.model_dump_json())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise SnapshotError(f"unable to write snapshot: {exc}", path=str(self.path)) from exc

    def load(self) -> QuoteSnapshot | None:
        """Return the stored snapshot, ``None`` when none exists."""

        if not self.path.exists():
            return None
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotError(f"unable to read snapshot: {exc}", path=str(self.path)) from exc
        try:
            return QuoteSnapshot.model_validate_json(text)
        except ValidationError as exc:
            raise SnapshotError("snapshot is corrupt", path=str(self.path), details={"errors": exc.error_count()}) from exc

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def restore_store(store: QuoteStore, repository: SnapshotRepository) -> int:
    """Pre-seed ``store`` from ``repository``; a corrupt snapshot is discarded."""

    try:
        snapshot = repository.load()
    except SnapshotError as exc:
        logger.warning("Discarding unreadable snapshot", error_code=exc.error_code, path=str(repository.path))
        return 0
    if snapshot is None:
        return 0
    loaded = store.seed(snapshot)
    logger.info("Restored quotes from snapshot", count=loaded, saved_at=snapshot.saved_at)
    return loaded


__all__ = ["SnapshotRepository", "restore_store"]
