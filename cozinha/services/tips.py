from __future__ import annotations

import logging
from typing import Optional

from starlette.concurrency import run_in_threadpool

from cozinha.app.domain.models import TipResult
from cozinha.app.infra.db.base import TipLogRepository
from cozinha.services.errors import GenerationError
from cozinha.services.gemini_client import PROMPT_DIR, load_prompt
from cozinha.services.governor import GenerationGovernor
from cozinha.services.sources.generative import GenerativeSourceAdapter
from cozinha.services.suggestion_cache import tip_key

logger = logging.getLogger(__name__)

TIPS_SYSTEM_PROMPT = PROMPT_DIR / "TIPS_SYSTEM_PROMPT.txt"
TIP_TEMPERATURE = 1.1
TIP_MAX_OUTPUT_TOKENS = 200
DEFAULT_CATEGORY = "cozinha"

CATEGORY_PROMPTS: dict[str, str] = {
    "cozinha": (
        "Você é um chef experiente. Crie UMA dica prática de cozinha.\n"
        "- Máximo 2 frases curtas e claras\n"
        "- Dica aplicável imediatamente, com ingredientes comuns\n"
        "- Foque em técnicas básicas mas úteis"
    ),
    "limpeza": (
        "Você é um especialista em limpeza doméstica. Crie UMA dica prática de limpeza.\n"
        "- Use produtos caseiros e acessíveis\n"
        "- Técnica segura e eficaz, em no máximo 2 frases"
    ),
    "organizacao": (
        "Você é um consultor de organização. Crie UMA dica prática de organização doméstica.\n"
        "- Solução simples que não exige produtos caros\n"
        "- Máximo 2 frases"
    ),
    "economia": (
        "Você é um consultor financeiro doméstico. Crie UMA dica de economia doméstica.\n"
        "- Economia real e aplicável para qualquer família\n"
        "- Máximo 2 frases"
    ),
}
TIP_CATEGORIES = tuple(CATEGORY_PROMPTS)


def normalize_category(category: Optional[str]) -> str:
    value = (category or "").strip().lower().replace("ç", "c").replace("ã", "a")
    return value if value in CATEGORY_PROMPTS else DEFAULT_CATEGORY


def build_tip_prompt(category: str, context: Optional[str] = None) -> str:
    prompt = CATEGORY_PROMPTS[category]
    if context and context.strip():
        prompt += f"\n- Relacione com: {context.strip()}"
    return prompt


class TipService:
    """Dicas diárias com IA: 3 por dia por usuário, cache de 24h por categoria+contexto."""

    def __init__(
        self,
        generative: Optional[GenerativeSourceAdapter],
        governor: GenerationGovernor,
        tip_log: Optional[TipLogRepository] = None,
    ) -> None:
        self._generative = generative
        self._governor = governor
        self._tip_log = tip_log

    async def _log(self, owner_id: str, category: str, context: Optional[str], tip: str) -> None:
        if self._tip_log is None:
            return
        try:
            await run_in_threadpool(self._tip_log.log_tip, owner_id, category, context, tip)
        except Exception as error:
            logger.warning("Could not log generated tip: %s", error)

    async def generate(self, owner_id: str, category: Optional[str] = None, context: Optional[str] = None) -> TipResult:
        """
        Raises:
            QuotaExceededError: daily tip budget used up (no model call is made)
            GenerationError: model unavailable or returned nothing usable
        """
        category = normalize_category(category)
        context = context.strip() if context and context.strip() else None
        generative = self._generative

        async def _produce() -> str:
            if generative is None:
                raise GenerationError("Nenhum modelo de IA configurado")
            return await generative.reply(
                build_tip_prompt(category, context),
                system_instruction=load_prompt(TIPS_SYSTEM_PROMPT),
                temperature=TIP_TEMPERATURE,
                max_output_tokens=TIP_MAX_OUTPUT_TOKENS,
            )

        governed = await self._governor.run(owner_id, tip_key(category, context), _produce)

        if not governed.from_cache:
            await self._log(owner_id, category, context, governed.value)

        return TipResult(
            tip=governed.value,
            source="cache" if governed.from_cache else "ia",
            category=category,
            remaining=governed.remaining,
            next_refresh=governed.expires_at,
        )
