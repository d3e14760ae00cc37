from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from cozinha.app.domain.errors import FavoriteConflictError, RecipeRepositoryError
from cozinha.app.domain.models import Favorite, Recipe
from cozinha.app.infra.db.base import FavoriteRepository, RecipeRepository, TipLogRepository
from cozinha.services.normalizer import LocalRecord, normalize, time_label_to_minutes
from cozinha.services.errors import MalformedRecordError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
# Caracteres com significado na sintaxe de filtros do PostgREST
FILTER_UNSAFE = re.compile(r"[,()\"\\*%]")


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _create_supabase_client() -> Client:
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY required")
    return create_client(url, key)


def _filter_value(value: str) -> str:
    return FILTER_UNSAFE.sub(" ", value).strip()


def _rows_to_recipes(rows: list[dict[str, Any]] | None) -> list[Recipe]:
    recipes: list[Recipe] = []
    for row in rows or []:
        try:
            recipes.append(normalize(LocalRecord(row)))
        except MalformedRecordError as error:
            logger.warning("Skipping malformed recipe row %s: %s", row.get("id"), error)
    return recipes


def recipe_to_row(recipe: Recipe) -> dict[str, Any]:
    row: dict[str, Any] = {
        "name": recipe.name,
        "description": recipe.description or f"Receita {recipe.name}",
        "category": recipe.category,
        "origin": recipe.origin,
        "ingredients": list(recipe.ingredients),
        "instructions": recipe.instructions,
        "time_label": recipe.time_label,
        "time_minutes": time_label_to_minutes(recipe.time_label),
        "difficulty": recipe.difficulty.value,
        "image_url": recipe.image_url,
        "video_url": recipe.video_url,
        "tags": list(recipe.tags),
        "source_type": recipe.source.value,
        "active": recipe.active,
        "verified": recipe.verified,
        "created_at": (recipe.created_at or _now_utc()).isoformat(),
    }
    if recipe.external_id:
        row["external_id"] = recipe.external_id
    return row


def _row_to_favorite(row: dict[str, Any]) -> Favorite:
    recipe_rows = row.get("recipes")
    recipe = None
    if isinstance(recipe_rows, dict):
        recipe = next(iter(_rows_to_recipes([recipe_rows])), None)

    created_at = row.get("created_at")
    if isinstance(created_at, str):
        created_at = datetime.fromisoformat(created_at.replace("Z", "+00:00"))

    return Favorite(
        id=str(row["id"]) if row.get("id") is not None else None,
        owner_id=str(row["user_id"]),
        recipe_id=str(row["recipe_id"]),
        notes=row.get("notes"),
        rating=row.get("rating"),
        personal_tags=list(row.get("personal_tags") or []),
        collection=row.get("collection") or "Favoritos",
        created_at=created_at,
        recipe=recipe,
    )


class SupabaseRecipeRepository(RecipeRepository):
    TABLE_NAME = "recipes"

    def __init__(self, client: Client | None = None):
        self._client = client or _create_supabase_client()
        logger.info("SupabaseRecipeRepository initialized")

    def _active(self):
        return self._client.table(self.TABLE_NAME).select("*").eq("active", True)

    def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        term = _filter_value(query)
        if not term:
            return []
        result = (
            self._active()
            .or_(f"name.ilike.%{term}%,description.ilike.%{term}%")
            .limit(limit)
            .execute()
        )
        return _rows_to_recipes(result.data)

    def search_by_ingredients(self, ingredients: list[str], limit: int = 10) -> list[Recipe]:
        terms = [_filter_value(item).lower() for item in ingredients]
        terms = [term for term in terms if term]
        if not terms:
            return []
        predicates: list[str] = []
        for term in terms:
            predicates.append(f'ingredients.cs.{{"{term}"}}')
            predicates.append(f"name.ilike.%{term}%")
        result = self._active().or_(",".join(predicates)).limit(limit).execute()
        return _rows_to_recipes(result.data)

    def search_by_category(self, category: str, limit: int = 10) -> list[Recipe]:
        term = _filter_value(category)
        if not term:
            return []
        result = self._active().ilike("category", f"%{term}%").limit(limit).execute()
        return _rows_to_recipes(result.data)

    def search_by_origin(self, origin: str, limit: int = 10) -> list[Recipe]:
        term = _filter_value(origin)
        if not term:
            return []
        result = self._active().ilike("origin", f"%{term}%").limit(limit).execute()
        return _rows_to_recipes(result.data)

    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        result = (
            self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        return next(iter(_rows_to_recipes(result.data)), None)

    def find_by_external_id(self, source: str, external_id: str) -> Optional[Recipe]:
        result = (
            self._client.table(self.TABLE_NAME)
            .select("*")
            .eq("source_type", source)
            .eq("external_id", external_id)
            .limit(1)
            .execute()
        )
        return next(iter(_rows_to_recipes(result.data)), None)

    def insert(self, recipe: Recipe) -> str:
        try:
            result = self._client.table(self.TABLE_NAME).insert(recipe_to_row(recipe)).execute()
        except APIError as error:
            if error.code == UNIQUE_VIOLATION and recipe.external_id:
                # Outra requisição gravou primeiro: devolve a linha existente
                existing = self.find_by_external_id(recipe.source.value, recipe.external_id)
                if existing and existing.id:
                    logger.info("Recipe already stored: %s -> %s", recipe.external_id, existing.id)
                    return existing.id
            logger.error("Error inserting recipe %s: %s", recipe.name, error)
            raise RecipeRepositoryError("insert", str(error)) from error
        except (ConnectionError, TimeoutError) as error:
            logger.error("Network error inserting recipe: %s", error)
            raise RecipeRepositoryError("insert", str(error)) from error

        if not result.data:
            raise RecipeRepositoryError("insert", "no row returned")

        recipe_id = str(result.data[0]["id"])
        logger.info("Recipe stored: id=%s, source=%s, name=%s", recipe_id, recipe.source.value, recipe.name)
        return recipe_id


class SupabaseFavoriteRepository(FavoriteRepository):
    TABLE_NAME = "recipe_favorites"
    SELECT = "*, recipes(*)"

    def __init__(self, client: Client | None = None):
        self._client = client or _create_supabase_client()

    def list_for_owner(self, owner_id: str, collection: Optional[str] = None) -> list[Favorite]:
        query = self._client.table(self.TABLE_NAME).select(self.SELECT).eq("user_id", owner_id)
        if collection:
            query = query.eq("collection", collection)
        result = query.order("created_at", desc=True).execute()
        return [_row_to_favorite(row) for row in result.data or []]

    def get(self, owner_id: str, recipe_id: str) -> Optional[Favorite]:
        result = (
            self._client.table(self.TABLE_NAME)
            .select(self.SELECT)
            .eq("user_id", owner_id)
            .eq("recipe_id", recipe_id)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return _row_to_favorite(rows[0]) if rows else None

    def add(self, favorite: Favorite) -> Favorite:
        row = {
            "user_id": favorite.owner_id,
            "recipe_id": favorite.recipe_id,
            "notes": favorite.notes,
            "rating": favorite.rating,
            "personal_tags": list(favorite.personal_tags),
            "collection": favorite.collection,
            "created_at": _now_utc().isoformat(),
        }
        try:
            self._client.table(self.TABLE_NAME).insert(row).execute()
        except APIError as error:
            if error.code == UNIQUE_VIOLATION:
                raise FavoriteConflictError(favorite.recipe_id) from error
            raise RecipeRepositoryError("add_favorite", str(error)) from error

        stored = self.get(favorite.owner_id, favorite.recipe_id)
        if stored is None:
            raise RecipeRepositoryError("add_favorite", "favorite not readable after insert")
        return stored

    def update(self, owner_id: str, recipe_id: str, changes: dict[str, Any]) -> Optional[Favorite]:
        if changes:
            result = (
                self._client.table(self.TABLE_NAME)
                .update(changes)
                .eq("user_id", owner_id)
                .eq("recipe_id", recipe_id)
                .execute()
            )
            if not result.data:
                return None
        return self.get(owner_id, recipe_id)

    def remove(self, owner_id: str, recipe_id: str) -> bool:
        result = (
            self._client.table(self.TABLE_NAME)
            .delete()
            .eq("user_id", owner_id)
            .eq("recipe_id", recipe_id)
            .execute()
        )
        return bool(result.data)


class SupabaseTipLogRepository(TipLogRepository):
    TABLE_NAME = "generated_tips"

    def __init__(self, client: Client | None = None):
        self._client = client or _create_supabase_client()

    def log_tip(self, owner_id: str, category: str, context: Optional[str], tip: str) -> None:
        self._client.table(self.TABLE_NAME).insert({
            "user_id": owner_id,
            "category": category,
            "context": context,
            "tip": tip,
            "created_at": _now_utc().isoformat(),
        }).execute()
