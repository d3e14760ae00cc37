from __future__ import annotations

import pytest

from cozinha.app.domain.errors import (
    FavoriteConflictError,
    FavoriteNotFoundError,
    InvalidQueryError,
    RecipeNotFoundError,
)
from cozinha.app.domain.models import Recipe, SourceTag
from cozinha.app.infra.db.memory_repo import InMemoryFavoriteRepository, InMemoryRecipeRepository
from cozinha.services.favorites import FavoritesService


@pytest.fixture
def recipes() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository([Recipe(id="r-1", name="Feijoada", source=SourceTag.LOCAL)])


@pytest.fixture
def service(recipes: InMemoryRecipeRepository) -> FavoritesService:
    return FavoritesService(InMemoryFavoriteRepository(recipes), recipes)


class TestAddFavorite:
    def test_existing_recipe(self, service: FavoritesService) -> None:
        favorite = service.add("user-1", recipe_id="r-1", rating=5, personal_tags=["domingo"])

        assert favorite.recipe_id == "r-1"
        assert favorite.collection == "Favoritos"
        assert favorite.recipe is not None and favorite.recipe.name == "Feijoada"
        assert favorite.id is not None

    def test_unknown_recipe(self, service: FavoritesService) -> None:
        with pytest.raises(RecipeNotFoundError):
            service.add("user-1", recipe_id="missing")

    def test_duplicate_favorite(self, service: FavoritesService) -> None:
        service.add("user-1", recipe_id="r-1")

        with pytest.raises(FavoriteConflictError):
            service.add("user-1", recipe_id="r-1")

    def test_same_recipe_for_different_owners(self, service: FavoritesService) -> None:
        service.add("user-1", recipe_id="r-1")
        assert service.add("user-2", recipe_id="r-1").owner_id == "user-2"

    def test_auto_created_recipe_is_always_new_and_local(
        self,
        service: FavoritesService,
        recipes: InMemoryRecipeRepository,
    ) -> None:
        submitted = Recipe(name="Corba", source=SourceTag.CATALOG, external_id="themealdb-52977")

        first = service.add("user-1", recipe=submitted)
        second = service.add("user-1", recipe=submitted)

        assert first.recipe_id != second.recipe_id
        assert len(recipes) == 3
        created = recipes.get_by_id(first.recipe_id)
        assert created is not None
        assert created.source is SourceTag.LOCAL
        assert created.external_id is None

    def test_nothing_to_favorite(self, service: FavoritesService) -> None:
        with pytest.raises(InvalidQueryError):
            service.add("user-1")
        with pytest.raises(InvalidQueryError):
            service.add("user-1", recipe=Recipe(name="  ", source=SourceTag.LOCAL))


class TestListUpdateRemove:
    def test_list_by_collection(self, service: FavoritesService, recipes: InMemoryRecipeRepository) -> None:
        recipes.insert(Recipe(id="r-2", name="Moqueca", source=SourceTag.LOCAL))
        service.add("user-1", recipe_id="r-1")
        service.add("user-1", recipe_id="r-2", collection="Fim de semana")
        service.add("user-2", recipe_id="r-1")

        assert len(service.list_for_owner("user-1")) == 2
        weekend = service.list_for_owner("user-1", "Fim de semana")
        assert [favorite.recipe_id for favorite in weekend] == ["r-2"]

    def test_update_only_allowed_fields(self, service: FavoritesService) -> None:
        service.add("user-1", recipe_id="r-1")

        updated = service.update("user-1", "r-1", {"notes": "menos sal", "rating": 4, "owner_id": "intruso"})

        assert updated.notes == "menos sal"
        assert updated.rating == 4
        assert updated.owner_id == "user-1"

    def test_update_missing(self, service: FavoritesService) -> None:
        with pytest.raises(FavoriteNotFoundError):
            service.update("user-1", "r-1", {"notes": "x"})

    def test_remove(self, service: FavoritesService) -> None:
        service.add("user-1", recipe_id="r-1")

        service.remove("user-1", "r-1")

        assert service.list_for_owner("user-1") == []
        with pytest.raises(FavoriteNotFoundError):
            service.remove("user-1", "r-1")
