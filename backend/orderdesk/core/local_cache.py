"""
Local Cache - durable on-device snapshot per entity kind

One JSON file ("slot") per entity kind inside a cache directory. The cache is
an injected dependency with an explicit lifecycle: `open()` at startup
creates the directory, every `save()` is flushed to disk before returning.

Single logical writer per device is assumed: two writers on the same slot
end up with whichever `save()` ran last.

Author: Dicompel
Date: 2026-09-03
"""
import json
import logging
import os
from pathlib import Path
from typing import List, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from orderdesk.core.errors import DeserializationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

# Entity kinds with a slot of their own
PRODUCTS = "products"
SESSION = "session"


class LocalCache:
    """Per-entity-kind key/value store backed by JSON files"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self._opened = False

    def open(self) -> "LocalCache":
        """Create the cache directory. Safe to call more than once."""
        self.directory.mkdir(parents=True, exist_ok=True)
        self._opened = True
        logger.debug(f"Local cache opened at {self.directory}")
        return self

    @property
    def is_open(self) -> bool:
        return self._opened

    def _slot_path(self, kind: str) -> Path:
        return self.directory / f"{kind}.json"

    def load(self, kind: str, model: Type[T]) -> List[T]:
        """
        Load the snapshot stored for `kind`

        Never fails: a missing slot yields an empty list, and an unreadable
        one is discarded (slot cleared) before returning an empty list.

        Args:
            kind: Entity kind (slot name)
            model: Pydantic model used to rebuild each record

        Returns:
            The records most recently saved for this kind
        """
        path = self._slot_path(kind)
        if not path.exists():
            return []

        try:
            return self._deserialize(path, model)
        except DeserializationError as e:
            logger.warning(
                f"Discarding unreadable cache slot '{kind}': {e}",
                extra={"event": "local_cache_discarded", "kind": kind}
            )
            self.clear(kind)
            return []

    def _deserialize(self, path: Path, model: Type[T]) -> List[T]:
        try:
            raw = path.read_text(encoding="utf-8")
            return TypeAdapter(List[model]).validate_json(raw)
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            raise DeserializationError(str(e)) from e

    def save(self, kind: str, records: Sequence[BaseModel]) -> None:
        """
        Replace the snapshot for `kind` and flush it to disk

        Written to a temporary file first and moved into place, so a crash
        mid-write leaves the previous snapshot intact.
        """
        if not self._opened:
            self.open()

        path = self._slot_path(kind)
        temp_path = path.with_suffix(".json.tmp")
        payload = [record.model_dump(mode="json") for record in records]

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

        logger.debug(f"Saved {len(payload)} records to cache slot '{kind}'")

    def clear(self, kind: str) -> None:
        """Remove the slot for `kind` (no-op when absent)"""
        path = self._slot_path(kind)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
