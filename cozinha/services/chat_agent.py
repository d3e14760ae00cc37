from __future__ import annotations

import logging
import os
from typing import Iterable, Optional

from cozinha.app.domain.errors import QuotaExceededError
from cozinha.app.domain.models import ChatReply, ChatTurn
from cozinha.services.errors import ServiceError
from cozinha.services.gemini_client import PROMPT_DIR, load_prompt
from cozinha.services.sources.generative import GenerativeSourceAdapter

logger = logging.getLogger(__name__)

CHAT_SYSTEM_PROMPT = PROMPT_DIR / "CHAT_SYSTEM_PROMPT.txt"
VISITOR_MESSAGE_LIMIT = int(os.getenv("VISITOR_MESSAGE_LIMIT", "4"))
HISTORY_WINDOW = 3
CHAT_TEMPERATURE = 0.7
CHAT_MAX_OUTPUT_TOKENS = 200
MAX_SUGGESTIONS = 3

CONTEXT_CHEF = "chef"
CONTEXT_INGREDIENTS = "ingredientes"
CONTEXT_SUBSTITUTIONS = "substituicoes"

CONTEXT_PROMPTS: dict[str, str] = {
    CONTEXT_CHEF: (
        "Você é um Chef IA especialista em culinária brasileira e internacional. "
        "Dê dicas práticas e acessíveis, com ingredientes disponíveis no Brasil, "
        "e sugira substituições quando necessário."
    ),
    CONTEXT_INGREDIENTS: (
        "Como Chef IA, analise os ingredientes fornecidos e:\n"
        "1. Sugira receitas práticas e saborosas\n"
        "2. Indique tempo de preparo realista\n"
        "3. Dê dicas de preparo e armazenamento\n"
        "4. Sugira acompanhamentos\n"
        "5. Mencione variações possíveis"
    ),
    CONTEXT_SUBSTITUTIONS: (
        "Como Chef IA especialista, ajude com substituições de ingredientes:\n"
        "- Sugira alternativas comuns e acessíveis\n"
        "- Explique como a substituição afeta o sabor e a textura\n"
        "- Indique proporções corretas"
    ),
}

SUBSTITUTION_WORDS = ("substituir", "trocar", "substituto")

VISITOR_LIMIT_MESSAGE = (
    "Você atingiu o limite de {limit} mensagens como visitante. "
    "Crie uma conta gratuita para conversas ilimitadas!"
)


def detect_context(message: str, ingredients: Optional[list[str]] = None) -> str:
    if ingredients:
        return CONTEXT_INGREDIENTS
    lowered = message.lower()
    if any(word in lowered for word in SUBSTITUTION_WORDS):
        return CONTEXT_SUBSTITUTIONS
    return CONTEXT_CHEF


def build_prompt(
    message: str,
    context: str,
    ingredients: Optional[list[str]] = None,
    history: Iterable[ChatTurn] = (),
) -> str:
    prompt_sections: list[str] = [CONTEXT_PROMPTS.get(context, CONTEXT_PROMPTS[CONTEXT_CHEF])]

    if ingredients:
        prompt_sections.append(f"Ingredientes disponíveis: {', '.join(ingredients)}")

    recent = [turn for turn in history if turn.content.strip()][-HISTORY_WINDOW:]
    if recent:
        lines = [
            f"{'Usuário' if turn.role == 'user' else 'Chef'}: {turn.content.strip()}"
            for turn in recent
        ]
        prompt_sections.append("Histórico da conversa:\n" + "\n".join(lines))

    prompt_sections.append(f"Usuário: {message.strip()}\nChef IA:")
    return "\n\n".join(prompt_sections)


def fallback_reply(message: str) -> str:
    lowered = message.lower()
    if "receita" in lowered:
        return "Que ingredientes você tem disponíveis? Posso sugerir algumas receitas deliciosas baseadas no que você tem em casa!"
    if "ingrediente" in lowered:
        return "Vamos cozinhar algo especial! Me conte quais ingredientes você tem e eu vou te ajudar a criar uma refeição incrível."
    return "Como Chef IA, estou aqui para te ajudar na cozinha! Me conte o que você gostaria de cozinhar ou quais ingredientes você tem disponível."


def follow_up_suggestions(message: str, ingredients: Optional[list[str]] = None) -> list[str]:
    suggestions: list[str] = []
    if ingredients:
        suggestions.extend([
            f"Como conservar {ingredients[0]}?",
            f"Outras receitas com {' e '.join(ingredients[:2])}",
            "Dicas de temperos para essa receita",
        ])
    if "receita" in message.lower():
        suggestions.extend([
            "Qual o tempo de preparo?",
            "Posso substituir algum ingrediente?",
            "Como servir essa receita?",
        ])
    if not suggestions:
        suggestions.extend([
            "Me ajude a criar um cardápio semanal",
            "Quais temperos combinam bem juntos?",
            "Receitas rápidas para o dia a dia",
        ])
    return suggestions[:MAX_SUGGESTIONS]


class ChatService:
    """Chef IA: uma resposta por mensagem, nunca falha por causa do modelo."""

    def __init__(
        self,
        generative: Optional[GenerativeSourceAdapter],
        visitor_limit: int = VISITOR_MESSAGE_LIMIT,
    ) -> None:
        self._generative = generative
        self.visitor_limit = visitor_limit

    async def _answer(self, prompt: str, message: str) -> str:
        if self._generative is None:
            return fallback_reply(message)
        try:
            return await self._generative.reply(
                prompt,
                system_instruction=load_prompt(CHAT_SYSTEM_PROMPT),
                temperature=CHAT_TEMPERATURE,
                max_output_tokens=CHAT_MAX_OUTPUT_TOKENS,
            )
        except ServiceError as error:
            logger.warning("Chat generation failed, using canned reply: %s", error)
            return fallback_reply(message)

    async def reply(
        self,
        message: str,
        ingredients: Optional[list[str]] = None,
        history: Iterable[ChatTurn] = (),
        visitor: bool = False,
    ) -> ChatReply:
        """
        Raises:
            QuotaExceededError: visitor already sent `visitor_limit` messages
        """
        turns = list(history)
        ingredients = [item.strip() for item in ingredients or [] if item.strip()]

        used: Optional[int] = None
        if visitor:
            used = sum(1 for turn in turns if turn.role == "user")
            if used >= self.visitor_limit:
                raise QuotaExceededError(
                    message=VISITOR_LIMIT_MESSAGE.format(limit=self.visitor_limit),
                    limit=self.visitor_limit,
                    used=self.visitor_limit,
                )

        context = detect_context(message, ingredients)
        prompt = build_prompt(message, context, ingredients, turns)
        answer = await self._answer(prompt, message)

        return ChatReply(
            reply=answer,
            suggestions=follow_up_suggestions(message, ingredients),
            used=used + 1 if used is not None else None,
            limit=self.visitor_limit if visitor else None,
        )
