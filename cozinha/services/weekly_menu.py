from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from cozinha.app.domain.models import WeeklyMenuResult
from cozinha.services.errors import GenerationError
from cozinha.services.gemini_client import PROMPT_DIR, load_prompt
from cozinha.services.governor import GenerationGovernor
from cozinha.services.sources.generative import GenerativeSourceAdapter
from cozinha.services.suggestion_cache import menu_key

logger = logging.getLogger(__name__)

WEEKLY_MENU_SYSTEM_PROMPT = PROMPT_DIR / "WEEKLY_MENU_SYSTEM_PROMPT.txt"
MENU_TEMPERATURE = 1.2
MENU_MAX_OUTPUT_TOKENS = 2048
MAX_FORBIDDEN = 20

MENU_RULES = (
    "Crie um cardápio semanal completo, de SEGUNDA a DOMINGO, com café da manhã, almoço e jantar em todos os dias.\n"
    "- Nunca repita pratos nem ingredientes principais\n"
    "- Varie as proteínas (carne, frango, peixe, ovos, vegetariano) e inclua pelo menos um prato vegano\n"
    "- Misture pratos brasileiros de várias regiões com pratos internacionais simples\n"
    "- Use ingredientes comuns e acessíveis"
)


def clean_forbidden(items: Optional[Iterable[str]]) -> list[str]:
    seen: list[str] = []
    for item in items or ():
        value = str(item).strip()
        if value and value.lower() not in (known.lower() for known in seen):
            seen.append(value)
    return seen[:MAX_FORBIDDEN]


def build_menu_prompt(forbidden: list[str]) -> str:
    prompt = MENU_RULES
    if forbidden:
        prompt += (
            "\n\nRESTRIÇÃO ABSOLUTA: nenhum prato, acompanhamento, molho ou tempero pode conter "
            f"{', '.join(forbidden)}. Na dúvida, não sugira o prato."
        )
    return prompt


def remove_forbidden_lines(menu: str, forbidden: list[str]) -> str:
    """
    Remove toda linha que cite um ingrediente proibido.
    O modelo às vezes ignora a restrição do prompt; esta é a garantia final.
    """
    if not forbidden:
        return menu.strip()
    pattern = re.compile("|".join(re.escape(item) for item in forbidden), re.IGNORECASE)
    kept = [line for line in menu.splitlines() if not pattern.search(line)]
    return "\n".join(kept).strip()


class WeeklyMenuService:
    """Cardápio semanal gerado por IA, com a mesma cota diária e cache de 24h das dicas."""

    def __init__(self, generative: Optional[GenerativeSourceAdapter], governor: GenerationGovernor) -> None:
        self._generative = generative
        self._governor = governor

    async def generate(self, owner_id: str, forbidden: Optional[Iterable[str]] = None) -> WeeklyMenuResult:
        """
        Raises:
            QuotaExceededError: daily menu budget used up (no model call is made)
            GenerationError: model unavailable or nothing left after filtering
        """
        restrictions = clean_forbidden(forbidden)
        generative = self._generative

        async def _produce() -> str:
            if generative is None:
                raise GenerationError("Nenhum modelo de IA configurado")
            menu = await generative.reply(
                build_menu_prompt(restrictions),
                system_instruction=load_prompt(WEEKLY_MENU_SYSTEM_PROMPT),
                temperature=MENU_TEMPERATURE,
                max_output_tokens=MENU_MAX_OUTPUT_TOKENS,
            )
            filtered = remove_forbidden_lines(menu, restrictions)
            if not filtered:
                raise GenerationError("Cardápio vazio após remover ingredientes proibidos")
            if filtered != menu.strip():
                logger.info("Weekly menu lines dropped for restrictions: %s", ", ".join(restrictions))
            return filtered

        governed = await self._governor.run(owner_id, menu_key(restrictions), _produce)

        return WeeklyMenuResult(
            menu=governed.value,
            source="cache" if governed.from_cache else "ia",
            forbidden=restrictions,
            remaining=governed.remaining,
            next_refresh=governed.expires_at,
        )
