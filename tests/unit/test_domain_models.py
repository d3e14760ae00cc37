from __future__ import annotations

from datetime import datetime, timedelta, timezone

from cozinha.app.domain.models import (
    SOURCE_PRIORITY,
    CacheEntry,
    Difficulty,
    QuotaCheck,
    Recipe,
    SearchRequest,
    SearchResult,
    SourceTag,
)


class TestSourceTag:
    def test_values(self) -> None:
        assert SourceTag.LOCAL.value == "local"
        assert SourceTag.CATALOG.value == "mealdb"
        assert SourceTag.GENERATED.value == "ia"

    def test_is_string_enum(self) -> None:
        assert isinstance(SourceTag.LOCAL, str)
        assert SourceTag("mealdb") is SourceTag.CATALOG

    def test_priority_order(self) -> None:
        assert SOURCE_PRIORITY[SourceTag.CATALOG] < SOURCE_PRIORITY[SourceTag.LOCAL]
        assert SOURCE_PRIORITY[SourceTag.LOCAL] < SOURCE_PRIORITY[SourceTag.GENERATED]


class TestDifficulty:
    def test_labels(self) -> None:
        assert Difficulty.EASY.value == "Fácil"
        assert Difficulty.MEDIUM.value == "Médio"
        assert Difficulty.HARD.value == "Difícil"


class TestRecipe:
    def test_defaults(self) -> None:
        recipe = Recipe(name="Bolo", source=SourceTag.LOCAL)

        assert recipe.ingredients == []
        assert recipe.difficulty is Difficulty.MEDIUM
        assert recipe.active is True
        assert recipe.verified is False
        assert recipe.match_score is None

    def test_copy_accepts_new_lists(self) -> None:
        recipe = Recipe(name="a", source=SourceTag.CATALOG, ingredients=["1 cup Rice"], tags=["Soup"])

        copied = recipe.copy(ingredients=["1 xícara Arroz"], tags=["Sopa"])

        assert copied.ingredients == ["1 xícara Arroz"]
        assert copied.tags == ["Sopa"]
        assert recipe.ingredients == ["1 cup Rice"]

    def test_is_external(self) -> None:
        assert Recipe(name="a", source=SourceTag.CATALOG).is_external
        assert Recipe(name="a", source=SourceTag.GENERATED).is_external
        assert not Recipe(name="a", source=SourceTag.LOCAL).is_external

    def test_identity_prefers_external_id(self) -> None:
        recipe = Recipe(name="a", source=SourceTag.CATALOG, id="1", external_id="themealdb-52977")
        assert recipe.identity == ("mealdb", "themealdb-52977")

    def test_identity_falls_back_to_local_id(self) -> None:
        assert Recipe(name="a", source=SourceTag.LOCAL, id="7").identity == ("id", "7")
        assert Recipe(name="a", source=SourceTag.LOCAL).identity is None

    def test_copy_does_not_share_lists(self) -> None:
        recipe = Recipe(name="a", source=SourceTag.LOCAL, ingredients=["ovo"], tags=["rápido"])

        copied = recipe.copy(match_score=80)
        copied.ingredients.append("sal")

        assert recipe.ingredients == ["ovo"]
        assert copied.match_score == 80
        assert recipe.match_score is None


class TestCacheEntry:
    def test_freshness_window(self) -> None:
        created = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        entry = CacheEntry(key="k", value="v", created_at=created)

        assert entry.is_fresh(created + timedelta(hours=23), ttl_seconds=86400)
        assert not entry.is_fresh(created + timedelta(hours=24), ttl_seconds=86400)


class TestQuotaCheck:
    def test_remaining_never_negative(self) -> None:
        assert QuotaCheck(allowed=True, used=1, daily_limit=3).remaining == 2
        assert QuotaCheck(allowed=False, used=5, daily_limit=3).remaining == 0


class TestSearchRequest:
    def test_has_filter(self) -> None:
        assert not SearchRequest().has_filter
        assert not SearchRequest(query="   ").has_filter
        assert SearchRequest(query="bolo").has_filter
        assert SearchRequest(ingredients=["ovo"]).has_filter
        assert SearchRequest(category="Sobremesa").has_filter
        assert SearchRequest(origin="Italiana").has_filter

    def test_applied_filters_echo(self) -> None:
        request = SearchRequest(query="bolo", ingredients=["ovo"])
        assert request.applied_filters() == {"query": "bolo", "ingredients": ["ovo"]}


class TestSearchResult:
    def test_total(self) -> None:
        result = SearchResult(
            recipes=[Recipe(name="a", source=SourceTag.LOCAL)],
            filters={},
            source="local",
        )
        assert result.total == 1
