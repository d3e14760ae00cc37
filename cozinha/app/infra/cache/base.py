# cozinha/app/infra/cache/base.py
"""
Abstract key/value capability used by the suggestion cache and the quota counter.
Swapping the in-process store for a shared one (Redis, Postgres) only needs a new
implementation of this interface.
"""
from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional


class KeyValueStore(ABC):
    """
    Implementations:
    - InMemoryStore: process-local dict, lost on restart
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if absent or expired."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """
        Store a value, overwriting any previous one.

        Args:
            key: Entry key
            value: Any picklable value
            ttl_seconds: Optional expiry; None keeps the entry until overwritten
        """
        pass

    @abstractmethod
    def increment(self, key: str, amount: int = 1, ttl_seconds: Optional[int] = None) -> int:
        """
        Add `amount` to an integer counter, creating it at zero.

        Returns:
            The counter value after the increment
        """
        pass


class InMemoryStore(KeyValueStore):
    # O lock protege cada operação isolada; ler-e-depois-escrever entre chamadas continua sujeito a corrida
    # Toda escrita descarta as entradas vencidas, então chaves diárias antigas não se acumulam
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()

    def _alive(self, key: str) -> Optional[tuple[Any, Optional[float]]]:
        item = self._data.get(key)
        if item is None:
            return None
        expires_at = item[1]
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return item

    def _sweep(self) -> None:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._data.items() if expires_at is not None and now >= expires_at]
        for key in expired:
            del self._data[key]

    def _expiry(self, ttl_seconds: Optional[int]) -> Optional[float]:
        return self._clock() + ttl_seconds if ttl_seconds else None

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._alive(key)
            return item[0] if item else None

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        with self._lock:
            self._sweep()
            self._data[key] = (value, self._expiry(ttl_seconds))

    def increment(self, key: str, amount: int = 1, ttl_seconds: Optional[int] = None) -> int:
        with self._lock:
            self._sweep()
            item = self._alive(key)
            if item is None:
                value = amount
                expires_at = self._expiry(ttl_seconds)
            else:
                value = int(item[0]) + amount
                expires_at = item[1]
            self._data[key] = (value, expires_at)
            return value

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for key in list(self._data) if self._alive(key))
