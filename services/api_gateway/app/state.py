from __future__ import annotations

import copy
import threading
from typing import Any, Protocol
from uuid import uuid4


class ResultStore(Protocol):
    def get(self, key: str) -> dict[str, Any] | None:
        ...

    def set(self, key: str, value: dict[str, Any]) -> None:
        ...


class InMemoryResultStore:
    """Process-local store; contents vanish on restart."""

    def __init__(self) -> None:
        self._items: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            value = self._items.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: dict[str, Any]) -> None:
        with self._lock:
            self._items[key] = copy.deepcopy(value)


def make_data_id() -> str:
    return str(uuid4())
