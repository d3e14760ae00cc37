from __future__ import annotations

import logging
from typing import Optional

from cozinha.app.domain.models import Recipe, SourceTag
from cozinha.services.catalog_client import MealPayload, TheMealDBClient
from cozinha.services.normalizer import CATALOG_ID_PREFIX, CatalogMeal, normalize_many
from cozinha.services.sources.base import SourceAdapter
from cozinha.services.translator import (
    translate_category_to_source_language,
    translate_origin_to_source_language,
    translate_query_to_source_language,
    translate_recipe,
)

logger = logging.getLogger(__name__)

MAX_QUERY_CANDIDATES = 3
MAX_FANOUT_INGREDIENTS = 3
MEALS_PER_INGREDIENT = 3
MAX_HYDRATED = 8


def _dedupe_meals(meals: list[MealPayload]) -> list[MealPayload]:
    unique: dict[str, MealPayload] = {}
    for meal in meals:
        meal_id = str(meal.get("idMeal") or "")
        if meal_id:
            unique.setdefault(meal_id, meal)
    return list(unique.values())


class CatalogSourceAdapter(SourceAdapter):
    """
    TheMealDB: termos em português viram candidatos em inglês na ida e as
    receitas voltam traduzidas. Falhas do catálogo resultam em lista vazia.
    """

    source = SourceTag.CATALOG

    def __init__(self, client: TheMealDBClient) -> None:
        self._client = client

    def _to_recipes(self, meals: list[MealPayload]) -> list[Recipe]:
        return [translate_recipe(recipe) for recipe in normalize_many([CatalogMeal(meal) for meal in meals])]

    async def _hydrated(self, partials: list[MealPayload], limit: int) -> list[Recipe]:
        details = await self._client.hydrate(partials, limit)
        return self._to_recipes(details)

    async def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        candidates = translate_query_to_source_language(query)[:MAX_QUERY_CANDIDATES]
        if not candidates:
            return []

        found: list[MealPayload] = []
        for candidate in candidates:
            found.extend(await self._client.search_by_name(candidate))
        found = _dedupe_meals(found)
        if found:
            return self._to_recipes(found[:limit])

        # Nada pelo nome: tenta os mesmos termos como ingrediente
        logger.info("No catalog meal named %r, trying ingredient lookup", query)
        partials = await self._client.filter_by_ingredients(
            candidates,
            max_ingredients=MAX_FANOUT_INGREDIENTS,
            per_ingredient=MEALS_PER_INGREDIENT,
        )
        return await self._hydrated(partials, limit)

    async def search_by_ingredients(self, ingredients: list[str], limit: int = 10) -> list[Recipe]:
        terms: list[str] = []
        for ingredient in ingredients[:MAX_FANOUT_INGREDIENTS]:
            candidates = translate_query_to_source_language(ingredient)
            if candidates and candidates[0] not in terms:
                terms.append(candidates[0])
        if not terms:
            return []

        partials = await self._client.filter_by_ingredients(
            terms,
            max_ingredients=MAX_FANOUT_INGREDIENTS,
            per_ingredient=MEALS_PER_INGREDIENT,
        )
        return await self._hydrated(partials, limit)

    async def search_by_category(self, category: str, limit: int = 10) -> list[Recipe]:
        name = translate_category_to_source_language(category)
        if not name:
            return []
        partials = await self._client.filter_by_category(name)
        return await self._hydrated(partials, limit)

    async def search_by_origin(self, origin: str, limit: int = 10) -> list[Recipe]:
        area = translate_origin_to_source_language(origin)
        if not area:
            return []
        partials = await self._client.filter_by_area(area)
        return await self._hydrated(partials, limit)

    async def lookup_by_id(self, recipe_id: str) -> Optional[Recipe]:
        meal_id = recipe_id.removeprefix(CATALOG_ID_PREFIX)
        meal = await self._client.lookup(meal_id)
        recipes = self._to_recipes([meal]) if meal else []
        return recipes[0] if recipes else None

    async def random(self, count: int) -> list[Recipe]:
        meals = await self._client.random_many(count)
        return self._to_recipes(meals)
