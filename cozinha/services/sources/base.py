# cozinha/services/sources/base.py
"""
Uniform search surface over one origin of recipes.
Every adapter returns canonical Recipe objects and degrades to an empty result.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from cozinha.app.domain.models import Recipe, SourceTag


class SourceAdapter(ABC):
    """
    Implementations:
    - LocalSourceAdapter: persisted recipes (Supabase)
    - CatalogSourceAdapter: TheMealDB, translated to Portuguese
    - GenerativeSourceAdapter: Gemini drafts
    """

    source: SourceTag

    @abstractmethod
    async def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        pass

    @abstractmethod
    async def search_by_ingredients(self, ingredients: list[str], limit: int = 10) -> list[Recipe]:
        pass

    @abstractmethod
    async def search_by_category(self, category: str, limit: int = 10) -> list[Recipe]:
        pass

    @abstractmethod
    async def lookup_by_id(self, recipe_id: str) -> Optional[Recipe]:
        pass

    async def search_by_origin(self, origin: str, limit: int = 10) -> list[Recipe]:
        """Optional: adapters without an origin index return nothing."""
        return []
