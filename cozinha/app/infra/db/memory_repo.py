from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from cozinha.app.domain.errors import FavoriteConflictError
from cozinha.app.domain.models import Favorite, Recipe
from cozinha.app.infra.db.base import FavoriteRepository, RecipeRepository, TipLogRepository


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _contains(haystack: str, needle: str) -> bool:
    return needle.strip().lower() in (haystack or "").lower()


class InMemoryRecipeRepository(RecipeRepository):
    """Same contract as the Supabase table, including the (source, external_id) uniqueness."""

    def __init__(self, recipes: Optional[list[Recipe]] = None) -> None:
        self._rows: dict[str, Recipe] = {}
        self._lock = threading.Lock()
        self.insert_calls = 0
        for recipe in recipes or []:
            self.insert(recipe)

    def _active(self) -> list[Recipe]:
        return [recipe.copy() for recipe in self._rows.values() if recipe.active]

    def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        if not query.strip():
            return []
        found = [
            recipe for recipe in self._active()
            if _contains(recipe.name, query) or _contains(recipe.description, query)
        ]
        return found[:limit]

    def search_by_ingredients(self, ingredients: list[str], limit: int = 10) -> list[Recipe]:
        terms = [term.strip().lower() for term in ingredients if term.strip()]
        if not terms:
            return []
        found = [
            recipe for recipe in self._active()
            if any(_contains(line, term) for line in recipe.ingredients for term in terms)
            or any(_contains(recipe.name, term) for term in terms)
        ]
        return found[:limit]

    def search_by_category(self, category: str, limit: int = 10) -> list[Recipe]:
        if not category.strip():
            return []
        return [recipe for recipe in self._active() if _contains(recipe.category, category)][:limit]

    def search_by_origin(self, origin: str, limit: int = 10) -> list[Recipe]:
        if not origin.strip():
            return []
        return [recipe for recipe in self._active() if _contains(recipe.origin, origin)][:limit]

    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        recipe = self._rows.get(recipe_id)
        return recipe.copy() if recipe else None

    def find_by_external_id(self, source: str, external_id: str) -> Optional[Recipe]:
        for recipe in self._rows.values():
            if recipe.source.value == source and recipe.external_id == external_id:
                return recipe.copy()
        return None

    def insert(self, recipe: Recipe) -> str:
        with self._lock:
            if recipe.external_id:
                existing = self.find_by_external_id(recipe.source.value, recipe.external_id)
                if existing and existing.id:
                    return existing.id
            recipe_id = recipe.id or str(uuid4())
            self._rows[recipe_id] = recipe.copy(
                id=recipe_id,
                created_at=recipe.created_at or _now_utc(),
                match_score=None,
            )
            self.insert_calls += 1
            return recipe_id

    def __len__(self) -> int:
        return len(self._rows)


class InMemoryFavoriteRepository(FavoriteRepository):
    def __init__(self, recipes: Optional[RecipeRepository] = None) -> None:
        self._recipes = recipes
        self._rows: dict[tuple[str, str], Favorite] = {}

    def _attach(self, favorite: Favorite) -> Favorite:
        recipe = self._recipes.get_by_id(favorite.recipe_id) if self._recipes else None
        return replace(favorite, personal_tags=list(favorite.personal_tags), recipe=recipe)

    def list_for_owner(self, owner_id: str, collection: Optional[str] = None) -> list[Favorite]:
        favorites = [
            favorite for (owner, _), favorite in self._rows.items()
            if owner == owner_id and (collection is None or favorite.collection == collection)
        ]
        favorites.sort(key=lambda favorite: favorite.created_at or _now_utc(), reverse=True)
        return [self._attach(favorite) for favorite in favorites]

    def get(self, owner_id: str, recipe_id: str) -> Optional[Favorite]:
        favorite = self._rows.get((owner_id, recipe_id))
        return self._attach(favorite) if favorite else None

    def add(self, favorite: Favorite) -> Favorite:
        key = (favorite.owner_id, favorite.recipe_id)
        if key in self._rows:
            raise FavoriteConflictError(favorite.recipe_id)
        self._rows[key] = replace(
            favorite,
            id=favorite.id or str(uuid4()),
            created_at=favorite.created_at or _now_utc(),
            recipe=None,
        )
        return self._attach(self._rows[key])

    def update(self, owner_id: str, recipe_id: str, changes: dict[str, Any]) -> Optional[Favorite]:
        key = (owner_id, recipe_id)
        favorite = self._rows.get(key)
        if favorite is None:
            return None
        self._rows[key] = replace(favorite, **changes)
        return self._attach(self._rows[key])

    def remove(self, owner_id: str, recipe_id: str) -> bool:
        return self._rows.pop((owner_id, recipe_id), None) is not None


class InMemoryTipLogRepository(TipLogRepository):
    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []

    def log_tip(self, owner_id: str, category: str, context: Optional[str], tip: str) -> None:
        self.entries.append({"user_id": owner_id, "category": category, "context": context, "tip": tip})
