"""Per-pipeline memoization of derived values."""

import hashlib
import json
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


def content_key(obj: Any) -> str:
    """Return a SHA256 key over an object's JSON form.

    Keys derive from content rather than ids, so two reports whose
    features share an id never collide.
    """
    if isinstance(obj, BaseModel):
        payload = obj.model_dump_json()
    else:
        payload = json.dumps(obj, sort_keys=True, default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class PipelineCache:
    """Named memo tables owned by exactly one pipeline instance."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, Any]] = {}
        self.hits: int = 0
        self.misses: int = 0

    def get_or_compute(self, table: str, key: str, compute: Callable[[], T]) -> T:
        entries = self._tables.setdefault(table, {})
        if key in entries:
            self.hits += 1
            return entries[key]
        self.misses += 1
        value = compute()
        entries[key] = value
        return value

    def size(self, table: str | None = None) -> int:
        if table is not None:
            return len(self._tables.get(table, {}))
        return sum(len(entries) for entries in self._tables.values())

    def reset(self) -> None:
        self._tables.clear()
        self.hits = 0
        self.misses = 0
