from __future__ import annotations

import json
from typing import Optional

import httpx
import pytest

from cozinha.app.domain.models import Recipe, SourceTag
from cozinha.app.infra.db.memory_repo import InMemoryRecipeRepository
from cozinha.services.catalog_client import TheMealDBClient
from cozinha.services.errors import GenerationError, RateLimitedError
from cozinha.services.gemini_client import TextGenerator
from cozinha.services.sources.catalog import CatalogSourceAdapter
from cozinha.services.sources.generative import GenerativeSourceAdapter
from cozinha.services.sources.local import LocalSourceAdapter


class StubGenerator(TextGenerator):
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    def generate(self, prompt: str, *, system_instruction=None, temperature=None, max_output_tokens=None) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.text


class BrokenRepository(InMemoryRecipeRepository):
    def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        raise ConnectionError("database offline")

    def get_by_id(self, recipe_id: str) -> Optional[Recipe]:
        raise ConnectionError("database offline")


def _meal(meal_id: str, name: str) -> dict[str, str]:
    return {
        "idMeal": meal_id,
        "strMeal": name,
        "strCategory": "Chicken",
        "strArea": "Indian",
        "strInstructions": "Heat the oil and add the Chicken.",
        "strIngredient1": "Chicken",
        "strMeasure1": "1 cup",
    }


def _catalog_client(handler) -> TheMealDBClient:
    return TheMealDBClient(base_url="https://catalog.test/api", timeout=1.0, transport=httpx.MockTransport(handler))


class TestLocalSourceAdapter:
    @pytest.fixture
    def adapter(self) -> LocalSourceAdapter:
        repository = InMemoryRecipeRepository([
            Recipe(id="1", name="Frango ao molho", source=SourceTag.LOCAL, category="Frango", ingredients=["frango", "tomate"]),
            Recipe(id="2", name="Bolo de cenoura", source=SourceTag.LOCAL, category="Sobremesa", origin="Brasileira"),
        ])
        return LocalSourceAdapter(repository)

    async def test_search_by_text(self, adapter: LocalSourceAdapter) -> None:
        recipes = await adapter.search_by_text("frango")
        assert [recipe.id for recipe in recipes] == ["1"]

    async def test_search_by_ingredients(self, adapter: LocalSourceAdapter) -> None:
        recipes = await adapter.search_by_ingredients(["tomate"])
        assert [recipe.id for recipe in recipes] == ["1"]

    async def test_search_by_category_and_origin(self, adapter: LocalSourceAdapter) -> None:
        assert [recipe.id for recipe in await adapter.search_by_category("sobremesa")] == ["2"]
        assert [recipe.id for recipe in await adapter.search_by_origin("brasileira")] == ["2"]

    async def test_lookup_by_id(self, adapter: LocalSourceAdapter) -> None:
        recipe = await adapter.lookup_by_id("2")
        assert recipe is not None and recipe.name == "Bolo de cenoura"

    async def test_store_failure_degrades_to_empty(self) -> None:
        adapter = LocalSourceAdapter(BrokenRepository())

        assert await adapter.search_by_text("frango") == []
        assert await adapter.lookup_by_id("1") is None


class TestCatalogSourceAdapter:
    async def test_search_by_text_translates_both_ways(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"meals": [_meal("52772", "Chicken Curry")]})

        recipes = await CatalogSourceAdapter(_catalog_client(handler)).search_by_text("frango")

        assert seen == ["https://catalog.test/api/search.php?s=chicken"]
        recipe = recipes[0]
        assert recipe.source is SourceTag.CATALOG
        assert recipe.external_id == "themealdb-52772"
        assert recipe.name == "Frango Curry"
        assert recipe.category == "Frango"
        assert recipe.origin == "Indiana"
        assert recipe.ingredients == ["1 xícara Frango"]

    async def test_search_by_text_falls_back_to_ingredients(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            endpoint = request.url.path.rsplit("/", 1)[-1]
            if endpoint == "filter.php":
                return httpx.Response(200, json={"meals": [{"idMeal": "10"}, {"idMeal": "11"}]})
            if endpoint == "lookup.php":
                meal_id = request.url.params["i"]
                return httpx.Response(200, json={"meals": [_meal(meal_id, f"Meal {meal_id}")]})
            return httpx.Response(200, json={"meals": None})

        recipes = await CatalogSourceAdapter(_catalog_client(handler)).search_by_text("frango", limit=1)

        assert [recipe.external_id for recipe in recipes] == ["themealdb-10"]

    async def test_search_by_category_uses_catalog_name(self) -> None:
        params: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            params.append(request.url.params.get("c", ""))
            return httpx.Response(200, json={"meals": None})

        assert await CatalogSourceAdapter(_catalog_client(handler)).search_by_category("Sobremesa") == []
        assert params == ["Dessert"]

    async def test_catalog_down_is_empty(self) -> None:
        adapter = CatalogSourceAdapter(_catalog_client(lambda request: httpx.Response(502)))

        assert await adapter.search_by_text("frango") == []
        assert await adapter.search_by_ingredients(["frango", "arroz"]) == []

    async def test_lookup_strips_prefix(self) -> None:
        ids: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            ids.append(request.url.params["i"])
            return httpx.Response(200, json={"meals": [_meal("52977", "Corba")]})

        recipe = await CatalogSourceAdapter(_catalog_client(handler)).lookup_by_id("themealdb-52977")

        assert ids == ["52977"]
        assert recipe is not None and recipe.external_id == "themealdb-52977"


class TestGenerativeSourceAdapter:
    async def test_draft_for_ingredients(self) -> None:
        generator = StubGenerator(json.dumps({"nome": "Arroz de Frango", "ingredientes": ["arroz", "frango"]}))

        recipes = await GenerativeSourceAdapter(generator).draft_for_ingredients(["frango", "arroz"])

        assert recipes[0].source is SourceTag.GENERATED
        assert recipes[0].name == "Arroz de Frango"
        assert "frango, arroz" in generator.prompts[0]

    async def test_draft_without_recipe_raises(self) -> None:
        with pytest.raises(GenerationError):
            await GenerativeSourceAdapter(StubGenerator("Não sei.")).draft_for_query("bolo")

    async def test_search_swallows_service_errors(self) -> None:
        adapter = GenerativeSourceAdapter(StubGenerator(error=RateLimitedError("429")))

        assert await adapter.search_by_text("bolo") == []
        assert await adapter.search_by_ingredients(["ovo"]) == []

    async def test_reply_rejects_short_text(self) -> None:
        with pytest.raises(GenerationError):
            await GenerativeSourceAdapter(StubGenerator("ok")).reply("oi")

    async def test_reply(self) -> None:
        adapter = GenerativeSourceAdapter(StubGenerator("  Use manteiga gelada para a massa ficar crocante.  "))
        assert await adapter.reply("dica") == "Use manteiga gelada para a massa ficar crocante."

    async def test_lookup_is_never_addressable(self) -> None:
        assert await GenerativeSourceAdapter(StubGenerator()).lookup_by_id("gemini-1") is None
