# cozinha/services/orchestrator.py
"""
Aggregation pipeline:

    QueryLocal -> QueryExternalIfInsufficient -> QueryGenerativeIfStillInsufficient
    -> Rank -> Persist -> Respond

Only invalid input is raised to the caller. Upstream failures shrink the result.
"""
from __future__ import annotations

import logging
import os
import time
from dataclasses import replace
from typing import Awaitable, Callable, Optional

from cozinha.app.domain.errors import InvalidQueryError, QuotaExceededError
from cozinha.app.domain.models import Recipe, SearchRequest, SearchResult
from cozinha.services.errors import ServiceError
from cozinha.services.governor import GenerationGovernor
from cozinha.services.persistence_gateway import PersistenceGateway
from cozinha.services.scoring import rank
from cozinha.services.sources.base import SourceAdapter
from cozinha.services.sources.catalog import MAX_HYDRATED, CatalogSourceAdapter
from cozinha.services.sources.generative import GenerativeSourceAdapter
from cozinha.services.static_recipes import static_suggestions
from cozinha.services.suggestion_cache import ingredients_key, query_key

logger = logging.getLogger(__name__)

SUFFICIENCY_THRESHOLD = int(os.getenv("SUFFICIENCY_THRESHOLD", "2"))
DEFAULT_LIMIT = 12
MIN_LIMIT = 1
MAX_LIMIT = 50
SUGGESTION_LIMIT = 12
LOCAL_SUGGESTION_LIMIT = 5


def clamp_limit(limit: Optional[int]) -> int:
    if not limit:
        return DEFAULT_LIMIT
    return min(max(int(limit), MIN_LIMIT), MAX_LIMIT)


def _clean_ingredients(ingredients: list[str]) -> list[str]:
    return [item.strip() for item in ingredients if item and item.strip()]


def _dedupe(recipes: list[Recipe]) -> list[Recipe]:
    seen: set[tuple[str, str]] = set()
    unique: list[Recipe] = []
    for recipe in recipes:
        identity = recipe.identity
        if identity is not None:
            if identity in seen:
                continue
            seen.add(identity)
        unique.append(recipe)
    return unique


def _response_source(counts: dict[str, int]) -> str:
    local = counts.get("local", 0) > 0
    external = counts.get("catalog", 0) + counts.get("generated", 0) > 0
    if local and external:
        return "mixed"
    if external:
        return "catalog"
    return "local"


class AggregationOrchestrator:
    def __init__(
        self,
        local: SourceAdapter,
        catalog: Optional[CatalogSourceAdapter] = None,
        generative: Optional[GenerativeSourceAdapter] = None,
        governor: Optional[GenerationGovernor] = None,
        gateway: Optional[PersistenceGateway] = None,
        threshold: int = SUFFICIENCY_THRESHOLD,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.local = local
        self.catalog = catalog
        self.generative = generative
        self.governor = governor
        self.gateway = gateway
        self.threshold = threshold
        self._clock = clock

    async def _query(self, adapter: SourceAdapter, request: SearchRequest, limit: int) -> list[Recipe]:
        """Um adaptador, um envelope: texto e ingredientes podem se combinar."""
        found: list[Recipe] = []
        if request.query and request.query.strip():
            found.extend(await adapter.search_by_text(request.query.strip(), limit))
        if request.ingredients:
            found.extend(await adapter.search_by_ingredients(request.ingredients, limit))
        if request.category and request.category.strip():
            found.extend(await adapter.search_by_category(request.category.strip(), limit))
        if request.origin and request.origin.strip():
            found.extend(await adapter.search_by_origin(request.origin.strip(), limit))
        return _dedupe(found)

    def _generative_plan(self, request: SearchRequest) -> Optional[tuple[str, Callable[[], Awaitable[list[Recipe]]]]]:
        generative = self.generative
        if generative is None:
            return None
        if request.ingredients:
            ingredients = list(request.ingredients)
            return ingredients_key(ingredients), lambda: generative.draft_for_ingredients(ingredients)
        if request.query and request.query.strip():
            query = request.query.strip()
            return query_key(query), lambda: generative.draft_for_query(query)
        if request.category and request.category.strip():
            category = request.category.strip()
            return f"categoria_{category.lower()}", lambda: generative.draft_for_category(category)
        if request.origin and request.origin.strip():
            subject = f"culinária {request.origin.strip()}"
            return query_key(subject), lambda: generative.draft_for_query(subject)
        return None

    async def _query_generative(self, request: SearchRequest, caller_id: Optional[str]) -> list[Recipe]:
        if self.governor is None or caller_id is None:
            return []
        plan = self._generative_plan(request)
        if plan is None:
            return []
        cache_key, producer = plan
        try:
            governed = await self.governor.run(caller_id, cache_key, producer)
        except QuotaExceededError:
            logger.info("Generative stage skipped: quota exhausted for %s", caller_id)
            return []
        except ServiceError as error:
            logger.warning("Generative stage failed for key %s: %s", cache_key, error)
            return []
        return [recipe.copy() for recipe in governed.value]

    async def _run(
        self,
        request: SearchRequest,
        caller_id: Optional[str],
        catalog_limit: Optional[int] = None,
        local_limit: Optional[int] = None,
    ) -> SearchResult:
        started = self._clock()
        limit = request.limit
        counts = {"local": 0, "catalog": 0, "generated": 0}

        # QueryLocal
        local = await self._query(self.local, request, local_limit or limit)
        counts["local"] = len(local)
        collected = list(local)

        # QueryExternalIfInsufficient
        if self.catalog is not None and (len(collected) < self.threshold or request.supplement):
            external = await self._query(self.catalog, request, catalog_limit or limit)
            counts["catalog"] = len(external)
            collected.extend(external)

        # QueryGenerativeIfStillInsufficient
        if len(collected) < self.threshold:
            generated = await self._query_generative(request, caller_id)
            counts["generated"] = len(generated)
            collected.extend(generated)

        # Rank
        ranked = rank(_dedupe(collected), query=request.query, ingredients=request.ingredients)[:limit]

        # Persist
        if self.gateway is not None:
            ranked = await self.gateway.persist_all(ranked)

        elapsed_ms = int((self._clock() - started) * 1000)
        logger.info(
            "Search done: %d recipes (local=%d, catalog=%d, generated=%d) in %dms",
            len(ranked),
            counts["local"],
            counts["catalog"],
            counts["generated"],
            elapsed_ms,
        )
        return SearchResult(
            recipes=ranked,
            filters=request.applied_filters(),
            source=_response_source(counts),
            counts=counts,
            elapsed_ms=elapsed_ms,
        )

    async def search(self, request: SearchRequest, caller_id: Optional[str] = None) -> SearchResult:
        """
        Raises:
            InvalidQueryError: the envelope carries no filter at all
        """
        request = replace(
            request,
            ingredients=_clean_ingredients(request.ingredients),
            limit=clamp_limit(request.limit),
        )
        if not request.has_filter:
            raise InvalidQueryError("Informe uma busca, ingredientes, categoria ou origem")
        return await self._run(request, caller_id)

    async def browse(self, limit: Optional[int] = None) -> SearchResult:
        """Receitas aleatórias do catálogo para quem abre a busca sem filtro."""
        started = self._clock()
        recipes = await self.catalog.random(clamp_limit(limit)) if self.catalog is not None else []
        return SearchResult(
            recipes=[recipe.copy(match_score=None) for recipe in recipes],
            filters={},
            source="catalog" if recipes else "local",
            counts={"local": 0, "catalog": len(recipes), "generated": 0},
            elapsed_ms=int((self._clock() - started) * 1000),
        )

    async def suggest(self, ingredients: list[str], caller_id: Optional[str] = None) -> SearchResult:
        """
        Sugestões pelo que o usuário tem em casa. Sem resultado de nenhuma fonte,
        caem as receitas fixas.

        Raises:
            InvalidQueryError: empty ingredient list
        """
        cleaned = _clean_ingredients(ingredients)
        if not cleaned:
            raise InvalidQueryError("Ingredientes são obrigatórios")

        request = SearchRequest(ingredients=cleaned, limit=SUGGESTION_LIMIT)
        result = await self._run(
            request,
            caller_id,
            catalog_limit=MAX_HYDRATED,
            local_limit=LOCAL_SUGGESTION_LIMIT,
        )
        if not result.recipes:
            result.recipes = static_suggestions(cleaned)[:SUGGESTION_LIMIT]
        return result
