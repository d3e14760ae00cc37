from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from cozinha.app.domain.models import Recipe
from cozinha.services import term_dictionary

logger = logging.getLogger(__name__)

WORD_PATTERN = re.compile(r"[a-zà-ÿ']+", re.IGNORECASE)

# Palavras muito frequentes em instruções em inglês e raras em português
ENGLISH_MARKERS = frozenset({
    "the", "and", "with", "until", "minutes", "add", "heat", "cook", "into",
    "stir", "pan", "over", "then", "for", "of", "to", "in", "it", "on",
    "bake", "oven", "mix", "serve", "place", "remove", "pour", "season",
})
ENGLISH_DENSITY_THRESHOLD = 0.12
ENGLISH_MIN_HITS = 3


def _match_case(source: str, target: str) -> str:
    if source.isupper() and len(source) > 1:
        return target.upper()
    if source[:1].isupper():
        return target[:1].upper() + target[1:]
    if source.islower():
        return target.lower()
    return target


@dataclass(frozen=True, eq=False)
class TranslationTable:
    """
    Tabela imutável de substituição de frases.

    As frases são tentadas da mais longa para a mais curta, então
    "Black Pepper" sempre vence "Pepper" no mesmo trecho. A substituição
    acontece em uma única passada, o que impede que o texto já traduzido
    seja traduzido de novo.
    """
    name: str
    entries: Mapping[str, str]
    _lookup: dict[str, str] = field(init=False, repr=False, compare=False)
    _pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lookup: dict[str, str] = {}
        for source, target in self.entries.items():
            lookup.setdefault(source.lower(), target)
        phrases = sorted(lookup, key=lambda phrase: (-len(phrase), phrase))
        pattern = None
        if phrases:
            alternation = "|".join(re.escape(phrase) for phrase in phrases)
            pattern = re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)
        object.__setattr__(self, "_lookup", lookup)
        object.__setattr__(self, "_pattern", pattern)

    @classmethod
    def merge(cls, name: str, *tables: "TranslationTable") -> "TranslationTable":
        merged: dict[str, str] = {}
        for table in tables:
            for source, target in table.entries.items():
                merged.setdefault(source, target)
        return cls(name, merged)

    def translate(self, text: str) -> str:
        if not text or self._pattern is None:
            return text or ""

        def _replace(match: re.Match[str]) -> str:
            found = match.group(0)
            return _match_case(found, self._lookup[found.lower()])

        return self._pattern.sub(_replace, text)

    def lookup(self, phrase: str) -> str | None:
        return self._lookup.get(phrase.strip().lower())

    def reverse_index(self) -> dict[str, tuple[str, ...]]:
        """Índice alvo -> origem, usado na busca em português."""
        index: dict[str, list[str]] = {}
        for source, target in self.entries.items():
            sources = index.setdefault(target.lower(), [])
            if source.lower() not in sources:
                sources.append(source.lower())
        return {target: tuple(sources) for target, sources in index.items()}


CATEGORY_TABLE = TranslationTable("categories", term_dictionary.CATEGORIES)
ORIGIN_TABLE = TranslationTable("origins", term_dictionary.ORIGINS)
INGREDIENT_TABLE = TranslationTable("ingredients", term_dictionary.INGREDIENTS)
UNIT_TABLE = TranslationTable("units", term_dictionary.UNITS)
INSTRUCTION_TABLE = TranslationTable("instructions", term_dictionary.INSTRUCTION_WORDS)

INGREDIENT_LINE_TABLE = TranslationTable.merge("ingredient_lines", UNIT_TABLE, INGREDIENT_TABLE)
INSTRUCTION_TEXT_TABLE = TranslationTable.merge("instruction_text", INSTRUCTION_TABLE, INGREDIENT_TABLE)

REVERSE_INGREDIENTS = INGREDIENT_TABLE.reverse_index()
REVERSE_CATEGORIES = CATEGORY_TABLE.reverse_index()
REVERSE_ORIGINS = ORIGIN_TABLE.reverse_index()


def translate(text: str, table: TranslationTable) -> str:
    return table.translate(text)


def translate_category(category: str) -> str:
    return CATEGORY_TABLE.translate(category)


def translate_origin(origin: str) -> str:
    return ORIGIN_TABLE.translate(origin)


def translate_ingredient_line(line: str) -> str:
    return INGREDIENT_LINE_TABLE.translate(line).strip()


def translate_instructions(text: str) -> str:
    return INSTRUCTION_TEXT_TABLE.translate(text)


def translate_recipe_name(name: str) -> str:
    return INGREDIENT_TABLE.translate(name)


def translate_recipe(recipe: Recipe) -> Recipe:
    """
    Traduz cada campo da receita de forma independente.
    Se algo falhar, a receita original continua utilizável.
    """
    try:
        return recipe.copy(
            name=translate_recipe_name(recipe.name),
            category=translate_category(recipe.category),
            origin=translate_origin(recipe.origin),
            ingredients=[translate_ingredient_line(line) for line in recipe.ingredients],
            instructions=translate_instructions(recipe.instructions),
        )
    except (re.error, KeyError):
        logger.exception("Translation failed for recipe %s", recipe.external_id or recipe.name)
        return recipe


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


def translate_query_to_source_language(term: str) -> list[str]:
    """
    Converte um termo de busca em português para candidatos em inglês.
    Consulta termos populares, índice reverso de ingredientes e de categorias
    e, por fim, procura termos populares contidos no texto. Sem nenhum acerto,
    devolve o termo original.
    """
    normalized = " ".join(term.strip().lower().split())
    if not normalized:
        return []

    hits: list[str] = []
    hits.extend(term_dictionary.COLLOQUIAL_TERMS.get(normalized, ()))
    hits.extend(REVERSE_INGREDIENTS.get(normalized, ()))
    hits.extend(REVERSE_CATEGORIES.get(normalized, ()))

    for colloquial, candidates in term_dictionary.COLLOQUIAL_TERMS.items():
        if colloquial != normalized and re.search(rf"(?<!\w){re.escape(colloquial)}(?!\w)", normalized):
            hits.extend(candidates)

    candidates = _dedupe(hits)
    return candidates or [term.strip()]


def translate_category_to_source_language(category: str) -> str:
    """Categoria em português -> nome usado pelo catálogo."""
    sources = REVERSE_CATEGORIES.get(category.strip().lower())
    return sources[0].title() if sources else category.strip()


def translate_origin_to_source_language(origin: str) -> str:
    sources = REVERSE_ORIGINS.get(origin.strip().lower())
    return sources[0].title() if sources else origin.strip()


def looks_like_source_language(text: str) -> bool:
    """Heurística de densidade de palavras-chave: o texto ainda está em inglês?"""
    words = [word.lower() for word in WORD_PATTERN.findall(text or "")]
    if not words:
        return False
    hits = sum(1 for word in words if word in ENGLISH_MARKERS)
    return hits >= ENGLISH_MIN_HITS and hits / len(words) >= ENGLISH_DENSITY_THRESHOLD
