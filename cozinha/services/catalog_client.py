from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Iterable

import httpx

from cozinha.services.errors import CatalogUnavailableError, NetworkTimeoutError

logger = logging.getLogger(__name__)

MEALDB_BASE_URL = os.getenv("MEALDB_BASE_URL", "https://www.themealdb.com/api/json/v1/1")
MEALDB_TIMEOUT_SECONDS = float(os.getenv("MEALDB_TIMEOUT_SECONDS", "5"))
MEALDB_MAX_CONCURRENCY = int(os.getenv("MEALDB_MAX_CONCURRENCY", "3"))

MealPayload = dict[str, Any]


class TheMealDBClient:
    """
    Cliente somente-leitura do TheMealDB.

    Os métodos públicos nunca levantam erro de rede: falhas viram lista vazia
    (ou None) e ficam apenas no log.
    """

    def __init__(
        self,
        base_url: str = MEALDB_BASE_URL,
        timeout: float = MEALDB_TIMEOUT_SECONDS,
        max_concurrency: int = MEALDB_MAX_CONCURRENCY,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_concurrency = max(1, max_concurrency)
        self._transport = transport

    async def _get_json(self, endpoint: str, params: dict[str, str]) -> dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as error:
            raise NetworkTimeoutError(url, self.timeout) from error
        except httpx.HTTPStatusError as error:
            raise CatalogUnavailableError(f"HTTP {error.response.status_code} from {url}") from error
        except (httpx.HTTPError, ValueError) as error:
            raise CatalogUnavailableError(f"Catalog request failed for {url}: {error}") from error

        if not isinstance(payload, dict):
            raise CatalogUnavailableError(f"Unexpected payload from {url}")
        return payload

    async def _meals(self, endpoint: str, params: dict[str, str]) -> list[MealPayload]:
        try:
            payload = await self._get_json(endpoint, params)
        except (NetworkTimeoutError, CatalogUnavailableError) as error:
            logger.warning("TheMealDB %s %s failed: %s", endpoint, params, error)
            return []
        meals = payload.get("meals")
        # O catálogo responde {"meals": null} (ou uma string) quando não acha nada
        if not isinstance(meals, list):
            return []
        return [meal for meal in meals if isinstance(meal, dict)]

    async def search_by_name(self, name: str) -> list[MealPayload]:
        return await self._meals("search.php", {"s": name})

    async def filter_by_ingredient(self, ingredient: str) -> list[MealPayload]:
        """Resposta parcial: só idMeal, strMeal e strMealThumb."""
        return await self._meals("filter.php", {"i": ingredient})

    async def filter_by_category(self, category: str) -> list[MealPayload]:
        return await self._meals("filter.php", {"c": category})

    async def filter_by_area(self, area: str) -> list[MealPayload]:
        return await self._meals("filter.php", {"a": area})

    async def lookup(self, meal_id: str) -> MealPayload | None:
        meals = await self._meals("lookup.php", {"i": meal_id})
        return meals[0] if meals else None

    async def random(self) -> MealPayload | None:
        meals = await self._meals("random.php", {})
        return meals[0] if meals else None

    async def _bounded(self, coroutines: Iterable[Any]) -> list[Any]:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _run(coroutine: Any) -> Any:
            async with semaphore:
                return await coroutine

        return await asyncio.gather(*(_run(coroutine) for coroutine in coroutines))

    async def hydrate(self, partials: list[MealPayload], limit: int) -> list[MealPayload]:
        """Completa resultados de filter.php com lookup.php, mantendo a ordem."""
        selected = partials[:max(0, limit)]
        ids = [str(meal.get("idMeal")) for meal in selected if meal.get("idMeal")]
        details = await self._bounded(self.lookup(meal_id) for meal_id in ids)
        return [meal for meal in details if meal]

    async def filter_by_ingredients(
        self,
        ingredients: list[str],
        max_ingredients: int = 3,
        per_ingredient: int = 3,
    ) -> list[MealPayload]:
        """Busca paralela por ingrediente; junta sem repetir idMeal."""
        lookups = await self._bounded(
            self.filter_by_ingredient(ingredient) for ingredient in ingredients[:max_ingredients]
        )
        merged: list[MealPayload] = []
        seen: set[str] = set()
        for meals in lookups:
            for meal in meals[:per_ingredient]:
                meal_id = str(meal.get("idMeal") or "")
                if meal_id and meal_id not in seen:
                    seen.add(meal_id)
                    merged.append(meal)
        return merged

    async def random_many(self, count: int) -> list[MealPayload]:
        meals = await self._bounded(self.random() for _ in range(max(0, count)))
        unique: dict[str, MealPayload] = {}
        for meal in meals:
            if meal and meal.get("idMeal"):
                unique.setdefault(str(meal["idMeal"]), meal)
        return list(unique.values())
