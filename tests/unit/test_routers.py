from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from cozinha.app.deps import (
    CurrentUser,
    get_chat_service,
    get_current_user,
    get_favorites_service,
    get_optional_user,
    get_orchestrator,
    get_tip_service,
    get_weekly_menu_service,
)
from cozinha.app.domain.models import Recipe, SourceTag
from cozinha.app.infra.cache.base import InMemoryStore
from cozinha.app.infra.db.memory_repo import InMemoryFavoriteRepository, InMemoryRecipeRepository
from cozinha.app.main import app
from cozinha.app.services.quota_service import QuotaService
from cozinha.services.chat_agent import ChatService
from cozinha.services.favorites import FavoritesService
from cozinha.services.gemini_client import TextGenerator
from cozinha.services.governor import GenerationGovernor
from cozinha.services.orchestrator import AggregationOrchestrator
from cozinha.services.sources.generative import GenerativeSourceAdapter
from cozinha.services.sources.local import LocalSourceAdapter
from cozinha.services.suggestion_cache import SuggestionCache
from cozinha.services.tips import TipService
from cozinha.services.weekly_menu import WeeklyMenuService

USER = CurrentUser(id="user-1", email="cozinheiro@example.com")
NOW = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)


class StubGenerator(TextGenerator):
    def __init__(self, text: Optional[str] = None) -> None:
        self.text = text or "Use uma frigideira bem quente para selar a carne."

    def generate(self, prompt: str, *, system_instruction=None, temperature=None, max_output_tokens=None) -> str:
        return self.text


@pytest.fixture
def recipes() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository([
        Recipe(id="r-1", name="Frango assado", source=SourceTag.LOCAL, ingredients=["frango", "alho"]),
        Recipe(id="r-2", name="Frango xadrez", source=SourceTag.LOCAL, ingredients=["frango", "pimentão"]),
    ])


@pytest.fixture
def tip_quota() -> QuotaService:
    return QuotaService(store=InMemoryStore(), daily_limit=3, clock=lambda: NOW, namespace="dicas")


@pytest.fixture
def client(recipes: InMemoryRecipeRepository, tip_quota: QuotaService) -> Iterator[TestClient]:
    governor = GenerationGovernor(SuggestionCache(InMemoryStore(), clock=lambda: NOW), tip_quota)

    app.dependency_overrides[get_orchestrator] = lambda: AggregationOrchestrator(LocalSourceAdapter(recipes))
    app.dependency_overrides[get_optional_user] = lambda: None
    app.dependency_overrides[get_current_user] = lambda: USER
    app.dependency_overrides[get_chat_service] = lambda: ChatService(GenerativeSourceAdapter(StubGenerator()), visitor_limit=2)
    app.dependency_overrides[get_tip_service] = lambda: TipService(GenerativeSourceAdapter(StubGenerator()), governor)
    # Favoritos precisam sobreviver entre requisições do mesmo teste
    favorites_repo = InMemoryFavoriteRepository(recipes)
    app.dependency_overrides[get_favorites_service] = lambda: FavoritesService(favorites_repo, recipes)

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestSearchEndpoints:
    def test_get_search(self, client: TestClient) -> None:
        response = client.get("/kitchen/search", params={"query": "frango", "limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["source"] == "local"
        assert body["filters"] == {"query": "frango"}
        assert body["counts"] == {"local": 2, "catalog": 0, "generated": 0}
        assert body["recipes"][0]["matchScore"] == 50
        assert "elapsedMs" in body

    def test_get_search_splits_ingredients(self, client: TestClient) -> None:
        response = client.get("/kitchen/search", params={"ingredient": "frango, alho"})

        body = response.json()
        assert body["filters"] == {"ingredients": ["frango", "alho"]}
        assert body["recipes"][0]["id"] == "r-1"
        assert body["recipes"][0]["matchScore"] == 100

    def test_post_search(self, client: TestClient) -> None:
        response = client.post("/kitchen/search", json={"ingredients": ["pimentão"]})

        assert response.status_code == 200
        assert [recipe["id"] for recipe in response.json()["recipes"]] == ["r-2"]

    def test_without_filter_browses(self, client: TestClient) -> None:
        response = client.get("/kitchen/search")

        assert response.status_code == 200
        assert response.json()["total"] == 0

    def test_suggestions(self, client: TestClient) -> None:
        response = client.post("/kitchen/suggestions", json={"ingredients": ["frango", " "]})

        body = response.json()
        assert response.status_code == 200
        assert body["searchedIngredients"] == ["frango"]
        assert body["total"] == 2

    def test_suggestions_require_ingredients(self, client: TestClient) -> None:
        response = client.post("/kitchen/suggestions", json={"ingredients": []})
        assert response.status_code == 400


class TestChatEndpoint:
    def test_visitor_reply_reports_usage(self, client: TestClient) -> None:
        response = client.post("/kitchen/chat", json={"message": "Como selar carne?"})

        assert response.status_code == 200
        body = response.json()
        assert body["reply"].startswith("Use uma frigideira")
        assert body["usage"] == {"used": 1, "limit": 2}
        assert len(body["suggestions"]) <= 3

    def test_visitor_limit_is_429(self, client: TestClient) -> None:
        history = [
            {"role": "user", "content": "a"},
            {"role": "assistant", "content": "b"},
            {"role": "user", "content": "c"},
        ]

        response = client.post("/kitchen/chat", json={"message": "d", "history": history})

        assert response.status_code == 429
        assert response.json()["detail"]["limit"] == 2

    def test_signed_in_has_no_usage(self, client: TestClient) -> None:
        app.dependency_overrides[get_optional_user] = lambda: USER

        response = client.post("/kitchen/chat", json={"message": "oi"})

        assert response.json()["usage"] is None

    def test_empty_message_is_rejected(self, client: TestClient) -> None:
        assert client.post("/kitchen/chat", json={"message": ""}).status_code == 422

    def test_blank_message_is_rejected(self, client: TestClient) -> None:
        assert client.post("/kitchen/chat", json={"message": "   \n "}).status_code == 422


class TestTipsEndpoint:
    def test_generate_then_cache(self, client: TestClient) -> None:
        first = client.post("/tips/generate", json={"category": "cozinha"}).json()
        second = client.post("/tips/generate", json={"category": "cozinha"}).json()

        assert first["source"] == "ia"
        assert first["remaining"] == 2
        assert second["source"] == "cache"
        assert second["tip"] == first["tip"]

    def test_quota_exhausted_is_429_with_detail(self, client: TestClient, tip_quota: QuotaService) -> None:
        tip_quota.record_usage(USER.id, amount=3)

        response = client.post("/tips/generate", json={"category": "limpeza"})

        assert response.status_code == 429
        detail = response.json()["detail"]
        assert detail["used"] == 3
        assert detail["limit"] == 3
        assert detail["nextReset"] == "amanhã às 00:00"

    def test_model_failure_is_503(self, client: TestClient, tip_quota: QuotaService) -> None:
        governor = GenerationGovernor(SuggestionCache(InMemoryStore(), clock=lambda: NOW), tip_quota)
        app.dependency_overrides[get_tip_service] = lambda: TipService(GenerativeSourceAdapter(StubGenerator("curto")), governor)

        response = client.post("/tips/generate", json={"category": "economia"})

        assert response.status_code == 503


class TestWeeklyMenuEndpoint:
    def test_menu_without_forbidden_lines(self, client: TestClient, tip_quota: QuotaService) -> None:
        menu = "SEGUNDA:\nAlmoço: Moqueca de camarão\nJantar: Omelete de espinafre"
        governor = GenerationGovernor(SuggestionCache(InMemoryStore(), clock=lambda: NOW), tip_quota)
        app.dependency_overrides[get_weekly_menu_service] = lambda: WeeklyMenuService(
            GenerativeSourceAdapter(StubGenerator(menu)), governor
        )

        response = client.post("/kitchen/weekly-menu", json={"forbiddenIngredients": ["camarão"]})

        assert response.status_code == 200
        body = response.json()
        assert body["menu"] == "SEGUNDA:\nJantar: Omelete de espinafre"
        assert body["source"] == "ia"
        assert body["forbiddenIngredients"] == ["camarão"]
        assert body["remaining"] == 2

    def test_model_failure_is_503(self, client: TestClient, tip_quota: QuotaService) -> None:
        governor = GenerationGovernor(SuggestionCache(InMemoryStore(), clock=lambda: NOW), tip_quota)
        app.dependency_overrides[get_weekly_menu_service] = lambda: WeeklyMenuService(None, governor)

        assert client.post("/kitchen/weekly-menu", json={}).status_code == 503


class TestFavoritesEndpoints:
    def test_add_list_update_remove(self, client: TestClient) -> None:
        created = client.post("/kitchen/favorites/", json={"recipeId": "r-1", "rating": 5})
        assert created.status_code == 201
        assert created.json()["recipe"]["name"] == "Frango assado"

        listed = client.get("/kitchen/favorites/").json()
        assert [favorite["recipeId"] for favorite in listed] == ["r-1"]

        updated = client.put("/kitchen/favorites/r-1", json={"notes": "com batatas", "personalTags": ["domingo"]})
        assert updated.json()["notes"] == "com batatas"
        assert updated.json()["personalTags"] == ["domingo"]

        assert client.delete("/kitchen/favorites/r-1").status_code == 204
        assert client.get("/kitchen/favorites/").json() == []

    def test_duplicate_is_409(self, client: TestClient) -> None:
        client.post("/kitchen/favorites/", json={"recipeId": "r-1"})
        assert client.post("/kitchen/favorites/", json={"recipeId": "r-1"}).status_code == 409

    def test_unknown_recipe_is_404(self, client: TestClient) -> None:
        assert client.post("/kitchen/favorites/", json={"recipeId": "nope"}).status_code == 404

    def test_missing_favorite_is_404(self, client: TestClient) -> None:
        assert client.delete("/kitchen/favorites/r-2").status_code == 404

    def test_auto_create_from_recipe_fields(self, client: TestClient, recipes: InMemoryRecipeRepository) -> None:
        response = client.post("/kitchen/favorites/", json={"recipe": {"name": "Pudim", "difficulty": "Fácil"}})

        assert response.status_code == 201
        assert response.json()["recipe"]["difficulty"] == "Fácil"
        assert len(recipes) == 3

    def test_nothing_to_add_is_400(self, client: TestClient) -> None:
        assert client.post("/kitchen/favorites/", json={}).status_code == 400
