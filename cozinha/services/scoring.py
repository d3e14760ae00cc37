from __future__ import annotations

import math
from typing import Iterable, Sequence

from cozinha.app.domain.models import SOURCE_PRIORITY, Recipe

NEUTRAL_SCORE = 50
MAX_SCORE = 100

NAME_WEIGHT = 40
CATEGORY_WEIGHT = 20
ORIGIN_WEIGHT = 15
TAGS_WEIGHT = 15
INGREDIENTS_WEIGHT = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def relevance_score(recipe: Recipe, query: str | None) -> int:
    """Pontuação por texto livre; sem consulta, devolve o valor neutro."""
    needle = (query or "").strip().lower()
    if not needle:
        return NEUTRAL_SCORE

    score = 0
    if needle in recipe.name.lower():
        score += NAME_WEIGHT
    if needle in recipe.category.lower():
        score += CATEGORY_WEIGHT
    if needle in recipe.origin.lower():
        score += ORIGIN_WEIGHT
    if needle in " ".join(recipe.tags).lower():
        score += TAGS_WEIGHT
    if any(needle in line.lower() for line in recipe.ingredients):
        score += INGREDIENTS_WEIGHT
    return min(score, MAX_SCORE)


def ingredient_match_score(recipe_ingredients: Sequence[str], wanted: Sequence[str]) -> int:
    """
    Percentual de linhas da receita que batem (substring nos dois sentidos) com
    algum ingrediente pedido, dividido pela maior das duas listas.
    """
    lines = [line.strip().lower() for line in recipe_ingredients if line and line.strip()]
    terms = [term.strip().lower() for term in wanted if term and term.strip()]
    denominator = max(len(lines), len(terms))
    if denominator == 0 or not lines or not terms:
        return 0

    matches = sum(
        1 for line in lines
        if any(term in line or line in term for term in terms)
    )
    return min(MAX_SCORE, _round_half_up(matches / denominator * 100))


def score(recipe: Recipe, query: str | None = None, ingredients: Sequence[str] = ()) -> int:
    if ingredients:
        return ingredient_match_score(recipe.ingredients, ingredients)
    return relevance_score(recipe, query)


def rank(recipes: Iterable[Recipe], query: str | None = None, ingredients: Sequence[str] = ()) -> list[Recipe]:
    """
    Pontua e ordena: maior score primeiro, empate por prioridade de fonte
    (catálogo, local, gerada) e depois pela ordem de chegada.
    """
    scored: list[tuple[int, int, int, Recipe]] = []
    for index, recipe in enumerate(recipes):
        value = score(recipe, query, ingredients)
        scored.append((-value, SOURCE_PRIORITY[recipe.source], index, recipe.copy(match_score=value)))
    scored.sort(key=lambda item: item[:3])
    return [item[3] for item in scored]
