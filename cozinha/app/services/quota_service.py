# cozinha/app/services/quota_service.py
"""
Quota management service.
Handles the daily budget of generative (Gemini) calls per caller.
"""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Callable, Optional

from cozinha.app.domain.errors import QuotaExceededError
from cozinha.app.domain.models import QuotaCheck, QuotaCounter
from cozinha.app.infra.cache.base import InMemoryStore, KeyValueStore

logger = logging.getLogger(__name__)

# Default daily limit of AI calls per caller
DEFAULT_DAILY_LIMIT = int(os.getenv("AI_DAILY_LIMIT", "3"))

DATE_FORMAT = "%Y-%m-%d"
RESET_HINT = "amanhã às 00:00"
# Counters outlive their day by a margin; the day in the key is what resets them
COUNTER_TTL_SECONDS = 2 * 24 * 60 * 60


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class QuotaService:
    """
    Service for managing generative call quotas.

    Responsibilities:
    - Check if a caller can still trigger a generative call today
    - Reject over-budget callers before any call is made
    - Count successful calls
    - Provide usage statistics
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        clock: Callable[[], datetime] = _now_utc,
        namespace: str = "ia",
    ):
        self._store = store if store is not None else InMemoryStore()
        self.daily_limit = daily_limit
        self._clock = clock
        self.namespace = namespace

    def _today(self) -> str:
        return self._clock().strftime(DATE_FORMAT)

    def _key(self, owner_id: str, day: str) -> str:
        return f"quota:{self.namespace}:{owner_id}:{day}"

    def get_usage(self, owner_id: str) -> QuotaCounter:
        """
        Get today's counter for a caller.
        A counter from a previous day is never read, so it starts again at zero.
        """
        day = self._today()
        count = self._store.get(self._key(owner_id, day)) or 0
        return QuotaCounter(owner_id=owner_id, day=day, count=int(count))

    def check_quota(self, owner_id: str) -> QuotaCheck:
        usage = self.get_usage(owner_id)
        allowed = usage.count < self.daily_limit
        return QuotaCheck(
            allowed=allowed,
            used=usage.count,
            daily_limit=self.daily_limit,
            reason=None if allowed else f"Limite diário de {self.daily_limit} chamadas com IA atingido",
        )

    def reserve(self, owner_id: str) -> QuotaCheck:
        """
        Check the quota without consuming it.

        Raises:
            QuotaExceededError: If the caller already used the whole budget
        """
        result = self.check_quota(owner_id)

        if not result.allowed:
            logger.info(
                "Quota exceeded: owner=%s, used=%d, limit=%d",
                owner_id,
                result.used,
                result.daily_limit,
            )
            raise QuotaExceededError(
                message=result.reason or "Daily quota exceeded",
                limit=result.daily_limit,
                used=result.used,
                reset_hint=RESET_HINT,
            )

        return result

    def record_usage(self, owner_id: str, amount: int = 1) -> int:
        """
        Count a successful generative call.

        Returns:
            Calls used today after this one
        """
        used = self._store.increment(
            self._key(owner_id, self._today()),
            amount,
            ttl_seconds=COUNTER_TTL_SECONDS,
        )
        logger.info("Quota usage recorded: owner=%s, used=%d/%d", owner_id, used, self.daily_limit)
        return used
