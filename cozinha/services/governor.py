from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Generic, TypeVar

from cozinha.app.services.quota_service import QuotaService
from cozinha.services.suggestion_cache import SuggestionCache

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class GovernedResult(Generic[T]):
    value: T
    from_cache: bool
    expires_at: datetime
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.used)


class GenerationGovernor:
    """
    Guarda de toda chamada generativa:
    1. cota do dia (sem cota, nada é chamado e o contador fica igual)
    2. cache fresco para a chave (não cobra cota)
    3. chamada ao vivo; só o sucesso é guardado e contado
    """

    def __init__(self, cache: SuggestionCache, quota: QuotaService) -> None:
        self.cache = cache
        self.quota = quota

    async def run(self, caller_id: str, cache_key: str, producer: Callable[[], Awaitable[T]]) -> GovernedResult[T]:
        """
        Raises:
            QuotaExceededError: caller already used today's budget
            ServiceError: the live call failed (nothing cached, nothing charged)
        """
        check = self.quota.reserve(caller_id)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("Suggestion cache hit: key=%s, caller=%s", cache_key, caller_id)
            return GovernedResult(
                value=cached.value,
                from_cache=True,
                expires_at=self.cache.expires_at(cached),
                used=check.used,
                limit=check.daily_limit,
            )

        value = await producer()
        entry = self.cache.put(cache_key, value)
        used = self.quota.record_usage(caller_id)
        return GovernedResult(
            value=value,
            from_cache=False,
            expires_at=self.cache.expires_at(entry),
            used=used,
            limit=self.quota.daily_limit,
        )
