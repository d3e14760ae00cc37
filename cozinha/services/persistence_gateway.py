from __future__ import annotations

import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from cozinha.app.domain.models import Recipe
from cozinha.app.infra.db.base import RecipeRepository
from cozinha.services.translator import looks_like_source_language, translate_recipe

logger = logging.getLogger(__name__)


class PersistenceGateway:
    """
    Salva receitas externas (catálogo e IA) no banco local.

    A unicidade de (source_type, external_id) fica a cargo do banco; a checagem
    prévia só evita um insert desnecessário no caminho comum.
    """

    def __init__(self, repository: RecipeRepository) -> None:
        self._repo = repository

    def maybe_persist(self, recipe: Recipe) -> Optional[str]:
        if not recipe.is_external or not recipe.external_id:
            return None

        try:
            if looks_like_source_language(f"{recipe.name} {recipe.instructions}"):
                recipe = translate_recipe(recipe)

            existing = self._repo.find_by_external_id(recipe.source.value, recipe.external_id)
            if existing and existing.id:
                logger.debug("Recipe %s already persisted as %s", recipe.external_id, existing.id)
                return existing.id

            return self._repo.insert(recipe.copy(id=None, match_score=None))
        except Exception:
            logger.exception("Could not persist recipe %s", recipe.external_id)
            return None

    async def persist_all(self, recipes: list[Recipe]) -> list[Recipe]:
        """Persiste as externas e devolve a lista com os ids locais preenchidos."""
        persisted: list[Recipe] = []
        for recipe in recipes:
            recipe_id = await run_in_threadpool(self.maybe_persist, recipe)
            persisted.append(recipe.copy(id=recipe_id) if recipe_id else recipe)
        return persisted
