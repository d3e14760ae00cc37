from __future__ import annotations

import logging
from typing import Awaitable, Optional

from starlette.concurrency import run_in_threadpool

from cozinha.app.domain.models import Recipe, SourceTag
from cozinha.services.errors import GenerationError, ServiceError
from cozinha.services.gemini_client import PROMPT_DIR, TextGenerator, load_prompt
from cozinha.services.normalizer import generated_drafts, normalize_many
from cozinha.services.sources.base import SourceAdapter

logger = logging.getLogger(__name__)

RECIPE_SYSTEM_PROMPT = PROMPT_DIR / "RECIPE_SYSTEM_PROMPT.txt"
RECIPE_TEMPERATURE = 0.7
RECIPE_MAX_OUTPUT_TOKENS = 1024
MIN_REPLY_LENGTH = 20


class GenerativeSourceAdapter(SourceAdapter):
    """
    Rascunhos de receita gerados pelo Gemini.

    Os métodos `draft_*` e `reply` levantam GenerationError para que o chamador
    decida entre cache, cota e fallback. A interface de busca engole as falhas.
    """

    source = SourceTag.GENERATED

    def __init__(self, generator: TextGenerator, provider: str = "gemini") -> None:
        self._generator = generator
        self.provider = provider

    async def _generate(self, prompt: str, system_instruction: str | None, temperature: float, max_output_tokens: int) -> str:
        return await run_in_threadpool(
            self._generator.generate,
            prompt,
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    async def _draft(self, prompt: str, requested_ingredients: list[str]) -> list[Recipe]:
        text = await self._generate(
            prompt,
            load_prompt(RECIPE_SYSTEM_PROMPT),
            RECIPE_TEMPERATURE,
            RECIPE_MAX_OUTPUT_TOKENS,
        )
        recipes = normalize_many(generated_drafts(text, requested_ingredients, provider=self.provider))
        if not recipes:
            raise GenerationError("Model response did not contain a recipe")
        logger.info("Generated %d recipe draft(s): %s", len(recipes), ", ".join(recipe.name for recipe in recipes))
        return recipes

    async def draft_for_ingredients(self, ingredients: list[str]) -> list[Recipe]:
        prompt = (
            "Crie 1 receita brasileira deliciosa e prática usando principalmente: "
            f"{', '.join(ingredients)}."
        )
        return await self._draft(prompt, ingredients)

    async def draft_for_query(self, query: str) -> list[Recipe]:
        return await self._draft(f"Crie 1 receita prática para o pedido: {query.strip()}.", [])

    async def draft_for_category(self, category: str) -> list[Recipe]:
        return await self._draft(f"Crie 1 receita prática da categoria: {category.strip()}.", [])

    async def reply(
        self,
        prompt: str,
        system_instruction: str | None = None,
        temperature: float = 0.7,
        max_output_tokens: int = 200,
    ) -> str:
        """Resposta livre (chat, dicas). Textos curtos demais contam como falha."""
        text = (await self._generate(prompt, system_instruction, temperature, max_output_tokens)).strip()
        if len(text) < MIN_REPLY_LENGTH:
            raise GenerationError("Resposta muito curta ou vazia do modelo")
        return text

    async def _quietly(self, operation: str, drafts: Awaitable[list[Recipe]]) -> list[Recipe]:
        try:
            return await drafts
        except ServiceError as error:
            logger.warning("Generative %s failed: %s", operation, error)
            return []

    async def search_by_text(self, query: str, limit: int = 10) -> list[Recipe]:
        return (await self._quietly("search_by_text", self.draft_for_query(query)))[:limit]

    async def search_by_ingredients(self, ingredients: list[str], limit: int = 10) -> list[Recipe]:
        return (await self._quietly("search_by_ingredients", self.draft_for_ingredients(ingredients)))[:limit]

    async def search_by_category(self, category: str, limit: int = 10) -> list[Recipe]:
        return (await self._quietly("search_by_category", self.draft_for_category(category)))[:limit]

    async def lookup_by_id(self, recipe_id: str) -> Optional[Recipe]:
        # Rascunhos gerados não são endereçáveis antes de serem persistidos
        return None
