from __future__ import annotations

from cozinha.app.domain.models import Difficulty, Recipe, SourceTag
from cozinha.services.scoring import ingredient_match_score

MIN_STATIC_MATCH = 20

# Receitas de reserva quando nenhuma fonte respondeu. Nunca são persistidas.
STATIC_RECIPES: tuple[Recipe, ...] = (
    Recipe(
        id="est-1",
        name="Frango Grelhado com Batatas",
        source=SourceTag.LOCAL,
        category="Prato Principal",
        origin="Brasileira",
        ingredients=["500g de peito de frango", "4 batatas médias", "sal", "pimenta", "azeite", "alho"],
        instructions=(
            "1. Tempere o frango com sal, pimenta e alho\n"
            "2. Corte as batatas em cubos\n"
            "3. Grelhe o frango por 6-8 minutos de cada lado\n"
            "4. Frite as batatas até dourar\n"
            "5. Sirva quente"
        ),
        time_label="30min",
        difficulty=Difficulty.EASY,
        image_url="https://images.unsplash.com/photo-1532550907401-a500c9a57435?w=400",
    ),
    Recipe(
        id="est-2",
        name="Arroz com Feijão Especial",
        source=SourceTag.LOCAL,
        category="Prato Principal",
        origin="Brasileira",
        ingredients=["2 xícaras de arroz", "1 xícara de feijão", "cebola", "alho", "óleo", "sal"],
        instructions=(
            "1. Refogue a cebola e alho\n"
            "2. Adicione o arroz e refogue\n"
            "3. Adicione água e cozinhe\n"
            "4. Prepare o feijão separadamente\n"
            "5. Sirva junto"
        ),
        time_label="45min",
        difficulty=Difficulty.EASY,
        image_url="https://images.unsplash.com/photo-1512058564366-18510be2db19?w=400",
    ),
    Recipe(
        id="est-3",
        name="Omelete com Queijo",
        source=SourceTag.LOCAL,
        category="Café da Manhã",
        origin="Brasileira",
        ingredients=["3 ovos", "100g queijo mussarela", "sal", "pimenta", "manteiga"],
        instructions=(
            "1. Bata os ovos com sal e pimenta\n"
            "2. Aqueça a frigideira com manteiga\n"
            "3. Despeje os ovos\n"
            "4. Adicione o queijo\n"
            "5. Dobre ao meio e sirva"
        ),
        time_label="10min",
        difficulty=Difficulty.EASY,
        image_url="https://images.unsplash.com/photo-1506084868230-bb9d95c24759?w=400",
    ),
)


def static_suggestions(ingredients: list[str]) -> list[Recipe]:
    """Receitas fixas com mais de 20% de match, melhor match primeiro."""
    matched: list[Recipe] = []
    for recipe in STATIC_RECIPES:
        value = ingredient_match_score(recipe.ingredients, ingredients)
        if value > MIN_STATIC_MATCH:
            matched.append(recipe.copy(match_score=value))
    matched.sort(key=lambda recipe: recipe.match_score or 0, reverse=True)
    return matched
