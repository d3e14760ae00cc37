# cozinha/app/infra/db/base.py
"""
Abstract base classes for the recipe store.
This interface allows easy swapping between Supabase and the in-memory backend.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from cozinha.app.domain.models import Favorite, Recipe


class RecipeRepository(ABC):
    """
    Abstract interface for persisted recipes.

    Implementations:
    - SupabaseRecipeRepository: `recipes` table, unique (source_type, external_id)
    - InMemoryRecipeRepository: local runs and tests
    """

    @abstractmethod
    def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        """
        Active recipes whose name or description contains the query.

        Args:
            query: Free text, matched case-insensitively
            limit: Max recipes to return
        """
        pass

    @abstractmethod
    def search_by_ingredients(self, ingredients: list[str], limit: int = 10) -> list[Recipe]:
        """Active recipes containing at least one of the ingredients."""
        pass

    @abstractmethod
    def search_by_category(self, category: str, limit: int = 10) -> list[Recipe]:
        pass

    @abstractmethod
    def search_by_origin(self, origin: str, limit: int = 10) -> list[Recipe]:
        pass

    @abstractmethod
    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        pass

    @abstractmethod
    def find_by_external_id(self, source: str, external_id: str) -> Optional[Recipe]:
        """
        Existence check used before persisting an external recipe.

        Args:
            source: Source tag value ("mealdb" or "ia")
            external_id: Identifier assigned by that source
        """
        pass

    @abstractmethod
    def insert(self, recipe: Recipe) -> str:
        """
        Persist a recipe and return its identifier.

        If a row with the same (source, external_id) already exists, the
        existing identifier is returned instead of creating a second row.

        Raises:
            RecipeRepositoryError: On storage failure
        """
        pass


class FavoriteRepository(ABC):
    """
    Abstract interface for a caller's favorites (`recipe_favorites`).
    """

    @abstractmethod
    def list_for_owner(self, owner_id: str, collection: Optional[str] = None) -> list[Favorite]:
        """Favorites of one caller, newest first, with the recipe attached."""
        pass

    @abstractmethod
    def get(self, owner_id: str, recipe_id: str) -> Optional[Favorite]:
        pass

    @abstractmethod
    def add(self, favorite: Favorite) -> Favorite:
        """
        Raises:
            FavoriteConflictError: If the caller already favorited the recipe
        """
        pass

    @abstractmethod
    def update(self, owner_id: str, recipe_id: str, changes: dict[str, Any]) -> Optional[Favorite]:
        pass

    @abstractmethod
    def remove(self, owner_id: str, recipe_id: str) -> bool:
        pass


class TipLogRepository(ABC):
    """Analytics log of generated tips."""

    @abstractmethod
    def log_tip(self, owner_id: str, category: str, context: Optional[str], tip: str) -> None:
        pass
