from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Optional

from cozinha.app.domain.models import CacheEntry
from cozinha.app.infra.cache.base import KeyValueStore

logger = logging.getLogger(__name__)

SUGGESTION_CACHE_TTL_SECONDS = int(os.getenv("SUGGESTION_CACHE_TTL_SECONDS", str(24 * 60 * 60)))
KEY_PREFIX = "suggestion:"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def tip_key(category: str, context: Optional[str] = None) -> str:
    return f"{category}_{context or 'geral'}"


def ingredients_key(ingredients: Iterable[str]) -> str:
    # A ordem do pedido faz parte da chave
    return "ingredientes_" + ",".join(item.strip().lower() for item in ingredients if item.strip())


def query_key(query: str) -> str:
    return "consulta_" + " ".join(query.strip().lower().split())


def menu_key(forbidden: Iterable[str]) -> str:
    # Restrições são um conjunto: a ordem não muda o cardápio
    items = sorted({item.strip().lower() for item in forbidden if item.strip()})
    return "cardapio_" + (",".join(items) or "livre")


class SuggestionCache:
    """
    Saídas caras do modelo guardadas por uma janela de tempo.
    Entradas vencidas não são apagadas: a próxima escrita na mesma chave as substitui.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: int = SUGGESTION_CACHE_TTL_SECONDS,
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        self._store = store
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self, key: str) -> Optional[CacheEntry[Any]]:
        entry = self._store.get(KEY_PREFIX + key)
        if not isinstance(entry, CacheEntry):
            return None
        if not entry.is_fresh(self._clock(), self.ttl_seconds):
            return None
        return entry

    def put(self, key: str, value: Any) -> CacheEntry[Any]:
        entry = CacheEntry(key=key, value=value, created_at=self._clock())
        self._store.set(KEY_PREFIX + key, entry)
        logger.debug("Suggestion cached: %s", key)
        return entry

    def expires_at(self, entry: CacheEntry[Any]) -> datetime:
        return entry.created_at + timedelta(seconds=self.ttl_seconds)
