from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from starlette.concurrency import run_in_threadpool

from cozinha.app.domain.models import Recipe, SourceTag
from cozinha.app.infra.db.base import RecipeRepository
from cozinha.services.sources.base import SourceAdapter

logger = logging.getLogger(__name__)


class LocalSourceAdapter(SourceAdapter):
    """Receitas já salvas no banco. O repositório é síncrono, então roda no threadpool."""

    source = SourceTag.LOCAL

    def __init__(self, repository: RecipeRepository) -> None:
        self._repo = repository

    async def _safe(self, operation: str, call: Callable[..., Any], *args: Any) -> Any:
        try:
            return await run_in_threadpool(call, *args)
        except Exception:
            logger.exception("Local store %s failed", operation)
            return None

    async def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        return await self._safe("search_by_text", self._repo.search_by_text, query, limit) or []

    async def search_by_ingredients(self, ingredients: list[str], limit: int = 10) -> list[Recipe]:
        return await self._safe("search_by_ingredients", self._repo.search_by_ingredients, ingredients, limit) or []

    async def search_by_category(self, category: str, limit: int = 10) -> list[Recipe]:
        return await self._safe("search_by_category", self._repo.search_by_category, category, limit) or []

    async def search_by_origin(self, origin: str, limit: int = 10) -> list[Recipe]:
        return await self._safe("search_by_origin", self._repo.search_by_origin, origin, limit) or []

    async def lookup_by_id(self, recipe_id: str) -> Optional[Recipe]:
        return await self._safe("lookup_by_id", self._repo.get_by_id, recipe_id)
