from __future__ import annotations

import logging
from typing import Any, Optional

from cozinha.app.domain.errors import FavoriteNotFoundError, InvalidQueryError, RecipeNotFoundError
from cozinha.app.domain.models import Favorite, Recipe, SourceTag
from cozinha.app.infra.db.base import FavoriteRepository, RecipeRepository

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("notes", "rating", "personal_tags", "collection")


class FavoritesService:
    def __init__(self, favorites: FavoriteRepository, recipes: RecipeRepository) -> None:
        self._favorites = favorites
        self._recipes = recipes

    def list_for_owner(self, owner_id: str, collection: Optional[str] = None) -> list[Favorite]:
        return self._favorites.list_for_owner(owner_id, collection)

    def _create_recipe(self, recipe: Recipe) -> str:
        # Receita enviada pelo usuário: sempre local e sempre nova, sem checagem de duplicidade
        local = recipe.copy(
            id=None,
            external_id=None,
            source=SourceTag.LOCAL,
            match_score=None,
        )
        recipe_id = self._recipes.insert(local)
        logger.info("Recipe auto-created from favorite: id=%s, name=%s", recipe_id, recipe.name)
        return recipe_id

    def add(
        self,
        owner_id: str,
        recipe_id: Optional[str] = None,
        recipe: Optional[Recipe] = None,
        notes: Optional[str] = None,
        rating: Optional[int] = None,
        personal_tags: Optional[list[str]] = None,
        collection: Optional[str] = None,
    ) -> Favorite:
        """
        Raises:
            InvalidQueryError: neither recipe_id nor recipe fields were given
            RecipeNotFoundError: recipe_id does not exist
            FavoriteConflictError: already a favorite
        """
        if recipe_id:
            if self._recipes.get_by_id(recipe_id) is None:
                raise RecipeNotFoundError(recipe_id)
        elif recipe is not None and recipe.name.strip():
            recipe_id = self._create_recipe(recipe)
        else:
            raise InvalidQueryError("Informe recipeId ou os dados da receita")

        favorite = self._favorites.add(Favorite(
            owner_id=owner_id,
            recipe_id=recipe_id,
            notes=notes,
            rating=rating,
            personal_tags=list(personal_tags or []),
            collection=collection or "Favoritos",
        ))
        logger.info("Favorite added: owner=%s, recipe=%s", owner_id, recipe_id)
        return favorite

    def update(self, owner_id: str, recipe_id: str, changes: dict[str, Any]) -> Favorite:
        allowed = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        favorite = self._favorites.update(owner_id, recipe_id, allowed)
        if favorite is None:
            raise FavoriteNotFoundError(recipe_id)
        return favorite

    def remove(self, owner_id: str, recipe_id: str) -> None:
        if not self._favorites.remove(owner_id, recipe_id):
            raise FavoriteNotFoundError(recipe_id)
        logger.info("Favorite removed: owner=%s, recipe=%s", owner_id, recipe_id)
