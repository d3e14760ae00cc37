from __future__ import annotations

import re

import pytest

from cozinha.app.domain.models import Recipe, SourceTag
from cozinha.services import translator
from cozinha.services.translator import (
    CATEGORY_TABLE,
    INGREDIENT_LINE_TABLE,
    INGREDIENT_TABLE,
    INSTRUCTION_TABLE,
    INSTRUCTION_TEXT_TABLE,
    ORIGIN_TABLE,
    UNIT_TABLE,
    TranslationTable,
    looks_like_source_language,
    translate,
    translate_category_to_source_language,
    translate_origin_to_source_language,
    translate_query_to_source_language,
    translate_recipe,
)

ALL_TABLES = [CATEGORY_TABLE, ORIGIN_TABLE, INGREDIENT_TABLE, UNIT_TABLE, INSTRUCTION_TABLE]


def _whole_word(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE)


def _translatable_pairs(table: TranslationTable) -> list[tuple[str, str]]:
    return [
        (source, target)
        for source, target in table.entries.items()
        if not _whole_word(source).search(target)
    ]


class TestTranslationTable:
    @pytest.mark.parametrize("table", ALL_TABLES, ids=lambda table: table.name)
    def test_every_pair_is_replaced(self, table: TranslationTable) -> None:
        for source, target in _translatable_pairs(table):
            result = translate(f"- {source} -", table)

            assert target in result, (source, result)
            assert not _whole_word(source).search(result), (source, result)

    @pytest.mark.parametrize("table", ALL_TABLES, ids=lambda table: table.name)
    def test_second_pass_is_a_no_op(self, table: TranslationTable) -> None:
        for source in table.entries:
            once = translate(f"{source} e {source.lower()}", table)
            assert translate(once, table) == once

    def test_longer_phrase_wins(self) -> None:
        assert INGREDIENT_TABLE.translate("Black Pepper") == "Pimenta Preta"
        assert INGREDIENT_TABLE.translate("Red Pepper") == "Pimentão Vermelho"
        assert INGREDIENT_TABLE.translate("Pepper") == "Pimenta"
        assert INGREDIENT_TABLE.translate("Chicken Breast") == "Peito de Frango"

    def test_multi_word_instruction(self) -> None:
        assert INSTRUCTION_TABLE.translate("Bring to the boil") == "Leve à fervura"

    def test_case_is_kept(self) -> None:
        assert INGREDIENT_TABLE.translate("chicken") == "frango"
        assert INGREDIENT_TABLE.translate("Chicken") == "Frango"

    def test_respects_word_boundaries(self) -> None:
        assert INGREDIENT_TABLE.translate("Peasant") == "Peasant"
        assert INSTRUCTION_TABLE.translate("Cookie") == "Cookie"

    def test_empty_text(self) -> None:
        assert INGREDIENT_TABLE.translate("") == ""

    def test_merge_keeps_first_table_entry(self) -> None:
        first = TranslationTable("a", {"Pasta": "Massa"})
        second = TranslationTable("b", {"Pasta": "Macarrão", "Rice": "Arroz"})

        merged = TranslationTable.merge("ab", first, second)

        assert merged.translate("Pasta with Rice") == "Massa with Arroz"

    def test_lookup(self) -> None:
        assert CATEGORY_TABLE.lookup(" dessert ") == "Sobremesa"
        assert CATEGORY_TABLE.lookup("unknown") is None

    def test_reverse_index(self) -> None:
        reverse = INGREDIENT_TABLE.reverse_index()
        assert reverse["caldo"] == ("stock", "broth")


class TestIngredientLines:
    def test_units_and_ingredients_in_one_line(self) -> None:
        line = translator.translate_ingredient_line("1 tsp Black Pepper")
        assert line == "1 colher de chá Pimenta Preta"

    def test_plural_units(self) -> None:
        assert translator.translate_ingredient_line("2 cups Rice") == "2 xícaras Arroz"

    def test_merged_tables_are_idempotent(self) -> None:
        for table in (INGREDIENT_LINE_TABLE, INSTRUCTION_TEXT_TABLE):
            text = "Heat 2 tbsp Olive Oil over medium heat, add Garlic and stir for 2 minutes"
            once = table.translate(text)
            assert table.translate(once) == once


class TestTranslateRecipe:
    def test_each_field_translated(self) -> None:
        recipe = Recipe(
            name="Chicken Curry",
            source=SourceTag.CATALOG,
            category="Chicken",
            origin="Indian",
            ingredients=["1 tsp Black Pepper", "2 cups Rice"],
            instructions="Heat the oil and add the Chicken.",
        )

        translated = translate_recipe(recipe)

        assert translated.name == "Frango Curry"
        assert translated.category == "Frango"
        assert translated.origin == "Indiana"
        assert translated.ingredients == ["1 colher de chá Pimenta Preta", "2 xícaras Arroz"]
        assert translated.instructions == "Aqueça the oil e adicione the Frango."
        assert recipe.name == "Chicken Curry"

    def test_translating_twice_changes_nothing(self) -> None:
        recipe = Recipe(name="Beef Stew", source=SourceTag.CATALOG, instructions="Simmer for 2 hours.")

        once = translate_recipe(recipe)
        twice = translate_recipe(once)

        assert twice.name == once.name
        assert twice.instructions == once.instructions

    def test_failure_keeps_original(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(_: str) -> str:
            raise KeyError("cook")

        monkeypatch.setattr(translator, "translate_instructions", _boom)
        recipe = Recipe(name="Chicken", source=SourceTag.CATALOG, instructions="Cook")

        assert translate_recipe(recipe) is recipe

    def test_programming_errors_propagate(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def _boom(_: str) -> str:
            raise TypeError("bad argument")

        monkeypatch.setattr(translator, "translate_instructions", _boom)

        with pytest.raises(TypeError):
            translate_recipe(Recipe(name="Chicken", source=SourceTag.CATALOG, instructions="Cook"))


class TestQueryToSourceLanguage:
    def test_colloquial_term(self) -> None:
        assert translate_query_to_source_language("frango") == ["chicken"]

    def test_union_without_duplicates(self) -> None:
        assert translate_query_to_source_language("carne moída") == ["minced beef", "beef"]

    def test_reverse_ingredient_index(self) -> None:
        assert translate_query_to_source_language("Cogumelos") == ["mushrooms"]

    def test_substring_scan(self) -> None:
        assert translate_query_to_source_language("frango com arroz") == ["chicken", "rice"]

    def test_falls_back_to_original(self) -> None:
        assert translate_query_to_source_language(" moqueca ") == ["moqueca"]

    def test_blank_term(self) -> None:
        assert translate_query_to_source_language("   ") == []

    def test_category_and_origin(self) -> None:
        assert translate_category_to_source_language("Sobremesa") == "Dessert"
        assert translate_category_to_source_language("Frutos do Mar") == "Seafood"
        assert translate_category_to_source_language("Lanches") == "Lanches"
        assert translate_origin_to_source_language("italiana") == "Italian"


class TestLooksLikeSourceLanguage:
    def test_english_instructions(self) -> None:
        assert looks_like_source_language("Heat the oil in a pan and cook the onions until soft")

    def test_portuguese_instructions(self) -> None:
        assert not looks_like_source_language("Aqueça o óleo na panela e cozinhe as cebolas até ficarem macias")

    def test_empty(self) -> None:
        assert not looks_like_source_language("")
