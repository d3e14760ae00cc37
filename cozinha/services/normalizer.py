from __future__ import annotations

import json
import logging
import re
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Union

from cozinha.app.domain.models import Difficulty, Recipe, SourceTag
from cozinha.services.errors import MalformedRecordError

logger = logging.getLogger(__name__)

CATALOG_ID_PREFIX = "themealdb-"
MAX_CATALOG_SLOTS = 20

TIME_15_30 = "15-30min"
TIME_30_45 = "30-45min"
TIME_45_60 = "45-60min"
TIME_60_PLUS = "60min+"

GENERATED_DEFAULT_TIME = "30min"
GENERATED_DEFAULT_DIFFICULTY = Difficulty.MEDIUM
GENERATED_DEFAULT_CATEGORY = "Diversos"
GENERATED_DEFAULT_ORIGIN = "Brasileira"
LOCAL_DEFAULT_TIME = "30min"

JSON_BLOCK_PATTERN = re.compile(r"[\[{][\s\S]*[\]}]")
FIELD_LINE_PATTERN = re.compile(r"^\s*[-*]?\s*([A-Za-zÀ-ÿ ]+?)\s*:\s*(.+)$")
FIRST_NUMBER_PATTERN = re.compile(r"(\d+)")

_DIFFICULTY_ALIASES: dict[str, Difficulty] = {
    "fácil": Difficulty.EASY,
    "facil": Difficulty.EASY,
    "easy": Difficulty.EASY,
    "médio": Difficulty.MEDIUM,
    "medio": Difficulty.MEDIUM,
    "média": Difficulty.MEDIUM,
    "media": Difficulty.MEDIUM,
    "medium": Difficulty.MEDIUM,
    "difícil": Difficulty.HARD,
    "dificil": Difficulty.HARD,
    "hard": Difficulty.HARD,
}

_DRAFT_KEYS: dict[str, str] = {
    "nome": "name",
    "name": "name",
    "categoria": "category",
    "category": "category",
    "origem": "origin",
    "origin": "origin",
    "ingredientes": "ingredients",
    "ingredients": "ingredients",
    "instrucoes": "instructions",
    "instruções": "instructions",
    "modo de preparo": "instructions",
    "instructions": "instructions",
    "tempo": "time",
    "tempo estimado": "time",
    "time": "time",
    "dificuldade": "difficulty",
    "difficulty": "difficulty",
    "tags": "tags",
}


@dataclass(frozen=True)
class LocalRecord:
    """Linha da tabela `recipes` do Supabase."""
    row: dict[str, Any]


@dataclass(frozen=True)
class CatalogMeal:
    """Entrada de `meals` retornada pelo TheMealDB."""
    payload: dict[str, Any]


@dataclass(frozen=True)
class GeneratedDraft:
    """Texto livre devolvido pelo modelo generativo."""
    text: str
    requested_ingredients: tuple[str, ...] = ()
    provider: str = "gemini"
    fields: dict[str, Any] = field(default_factory=dict)


RawRecord = Union[LocalRecord, CatalogMeal, GeneratedDraft]


def estimate_time_label(ingredient_count: int, instructions_length: int) -> str:
    if ingredient_count < 6 and instructions_length < 400:
        return TIME_15_30
    if ingredient_count < 9 and instructions_length < 800:
        return TIME_30_45
    if ingredient_count < 13 and instructions_length < 1200:
        return TIME_45_60
    return TIME_60_PLUS


def estimate_difficulty(ingredient_count: int, instructions_length: int) -> Difficulty:
    if ingredient_count > 15 or instructions_length > 1500:
        return Difficulty.HARD
    if ingredient_count > 10 or instructions_length > 800:
        return Difficulty.MEDIUM
    return Difficulty.EASY


def estimate_time_and_difficulty(ingredient_count: int, instructions_length: int) -> tuple[str, Difficulty]:
    """Deriva tempo e dificuldade apenas de contagem de ingredientes e tamanho do texto."""
    return (
        estimate_time_label(ingredient_count, instructions_length),
        estimate_difficulty(ingredient_count, instructions_length),
    )


def parse_difficulty(value: object, default: Difficulty = Difficulty.MEDIUM) -> Difficulty:
    if isinstance(value, Difficulty):
        return value
    if not isinstance(value, str):
        return default
    return _DIFFICULTY_ALIASES.get(value.strip().lower(), default)


def time_label_to_minutes(label: str | None) -> int:
    """Converte o rótulo de tempo em minutos para a coluna `time_minutes`."""
    if not label:
        return 30
    lowered = label.lower()
    if "15-30" in lowered:
        return 25
    if "30-45" in lowered:
        return 37
    if "45-60" in lowered:
        return 52
    if "60min+" in lowered or "60+" in lowered:
        return 75
    match = FIRST_NUMBER_PATTERN.search(label)
    if match:
        return int(match.group(1))
    return 30


def _clean(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""


def _as_list(value: object) -> list[str]:
    if isinstance(value, list):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    if isinstance(value, str) and value.strip():
        return [part.strip() for part in value.split(",") if part.strip()]
    return []


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def extract_catalog_ingredients(meal: dict[str, Any]) -> list[str]:
    """Junta os pares strMeasureN/strIngredientN, ignorando posições vazias."""
    ingredients: list[str] = []
    for slot in range(1, MAX_CATALOG_SLOTS + 1):
        ingredient = _clean(meal.get(f"strIngredient{slot}"))
        if not ingredient:
            continue
        measure = _clean(meal.get(f"strMeasure{slot}"))
        ingredients.append(f"{measure} {ingredient}" if measure else ingredient)
    return ingredients


def catalog_external_id(meal_id: str) -> str:
    return f"{CATALOG_ID_PREFIX}{meal_id}"


def _normalize_catalog(meal: dict[str, Any]) -> Recipe:
    meal_id = _clean(meal.get("idMeal"))
    name = _clean(meal.get("strMeal"))
    if not meal_id or not name:
        raise MalformedRecordError("Catalog meal without idMeal/strMeal")

    ingredients = extract_catalog_ingredients(meal)
    instructions = _clean(meal.get("strInstructions"))
    time_label, difficulty = estimate_time_and_difficulty(len(ingredients), len(instructions))

    return Recipe(
        name=name,
        source=SourceTag.CATALOG,
        external_id=catalog_external_id(meal_id),
        category=_clean(meal.get("strCategory")),
        origin=_clean(meal.get("strArea")),
        ingredients=ingredients,
        instructions=instructions,
        time_label=time_label,
        difficulty=difficulty,
        image_url=_clean(meal.get("strMealThumb")),
        tags=_as_list(meal.get("strTags")),
        video_url=_clean(meal.get("strYoutube")),
    )


def _normalize_local(row: dict[str, Any]) -> Recipe:
    if not row.get("name"):
        raise MalformedRecordError("Local recipe row without name")

    try:
        source = SourceTag(row.get("source_type") or SourceTag.LOCAL.value)
    except ValueError:
        source = SourceTag.LOCAL

    time_label = _clean(row.get("time_label"))
    if not time_label and row.get("time_minutes"):
        time_label = f"{row['time_minutes']}min"

    return Recipe(
        id=str(row["id"]) if row.get("id") is not None else None,
        external_id=_clean(row.get("external_id")) or None,
        name=str(row["name"]),
        source=source,
        category=_clean(row.get("category")) or GENERATED_DEFAULT_CATEGORY,
        origin=_clean(row.get("origin")),
        ingredients=_as_list(row.get("ingredients")),
        instructions=_clean(row.get("instructions")),
        time_label=time_label or LOCAL_DEFAULT_TIME,
        difficulty=parse_difficulty(row.get("difficulty")),
        image_url=_clean(row.get("image_url")),
        tags=_as_list(row.get("tags")),
        active=bool(row.get("active", True)),
        verified=bool(row.get("verified", False)),
        created_at=_parse_datetime(row.get("created_at")),
        description=_clean(row.get("description")),
        video_url=_clean(row.get("video_url")),
    )


def _decode_json_drafts(text: str) -> list[dict[str, Any]]:
    match = JSON_BLOCK_PATTERN.search(text)
    if not match:
        return []
    try:
        decoded = json.loads(match.group(0))
    except json.JSONDecodeError:
        return []
    if isinstance(decoded, dict):
        nested = decoded.get("receitas") or decoded.get("recipes")
        if isinstance(nested, list):
            return [item for item in nested if isinstance(item, dict)]
        return [decoded]
    if isinstance(decoded, list):
        return [item for item in decoded if isinstance(item, dict)]
    return []


def _decode_field_lines(text: str) -> dict[str, Any]:
    """Formato 'Campo: valor', uma linha por campo."""
    fields: dict[str, Any] = {}
    for line in text.splitlines():
        match = FIELD_LINE_PATTERN.match(line)
        if not match:
            continue
        key = _DRAFT_KEYS.get(match.group(1).strip().lower())
        if key and key not in fields:
            fields[key] = match.group(2).strip()
    return fields


def _canonical_draft_fields(data: dict[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for key, value in data.items():
        canonical = _DRAFT_KEYS.get(str(key).strip().lower())
        if canonical and canonical not in fields:
            fields[canonical] = value
    return fields


def _is_recipe_draft(fields: dict[str, Any]) -> bool:
    return any(fields.get(key) for key in ("name", "ingredients", "instructions"))


def _text_block(value: object) -> str:
    # O modelo às vezes devolve o preparo como lista de passos
    if isinstance(value, list):
        return "\n".join(_as_list(value))
    return _clean(value)


def _time_text(value: object) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return f"{int(value)}min"
    return _clean(value)


def parse_generated_text(text: str) -> list[dict[str, Any]]:
    """Extrai um ou mais rascunhos de receita do texto do modelo."""
    drafts = [_canonical_draft_fields(item) for item in _decode_json_drafts(text)]
    drafts = [draft for draft in drafts if _is_recipe_draft(draft)]
    if drafts:
        return drafts
    fields = _decode_field_lines(text)
    return [fields] if _is_recipe_draft(fields) else []


def generated_external_id(provider: str) -> str:
    return f"{provider}-{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def _normalize_generated(draft: GeneratedDraft) -> Recipe:
    fields = draft.fields or next(iter(parse_generated_text(draft.text)), {})
    if not _is_recipe_draft(fields):
        raise MalformedRecordError("Generated text without a recipe")

    ingredients = _as_list(fields.get("ingredients"))
    name = _clean(fields.get("name"))
    if not name:
        first = next(iter(draft.requested_ingredients or ingredients), "")
        if not first:
            raise MalformedRecordError("Generated draft without a recipe name")
        name = f"Receita com {first}"
    if not ingredients:
        ingredients = [*draft.requested_ingredients, "sal a gosto", "temperos"]

    return Recipe(
        name=name,
        source=SourceTag.GENERATED,
        external_id=generated_external_id(draft.provider),
        category=_clean(fields.get("category")) or GENERATED_DEFAULT_CATEGORY,
        origin=_clean(fields.get("origin")) or GENERATED_DEFAULT_ORIGIN,
        ingredients=ingredients,
        instructions=_text_block(fields.get("instructions")) or "Instruções não disponíveis",
        time_label=_time_text(fields.get("time")) or GENERATED_DEFAULT_TIME,
        difficulty=parse_difficulty(fields.get("difficulty"), GENERATED_DEFAULT_DIFFICULTY),
        tags=_as_list(fields.get("tags")),
        created_at=datetime.now(timezone.utc),
    )


def normalize(raw: RawRecord) -> Recipe:
    """
    Converts a source-specific raw record into the canonical Recipe.

    Raises:
        MalformedRecordError: when required fields are missing
        TypeError: for an unknown raw record variant
    """
    if isinstance(raw, CatalogMeal):
        return _normalize_catalog(raw.payload)
    if isinstance(raw, LocalRecord):
        return _normalize_local(raw.row)
    if isinstance(raw, GeneratedDraft):
        return _normalize_generated(raw)
    raise TypeError(f"Unsupported raw record: {type(raw).__name__}")


def normalize_many(raws: list[RawRecord]) -> list[Recipe]:
    """Normaliza uma lista, pulando registros malformados."""
    recipes: list[Recipe] = []
    for raw in raws:
        try:
            recipes.append(normalize(raw))
        except MalformedRecordError as error:
            logger.warning("Skipping malformed record: %s", error)
    return recipes


def generated_drafts(text: str, requested_ingredients: list[str] | tuple[str, ...] = (), provider: str = "gemini") -> list[GeneratedDraft]:
    return [
        GeneratedDraft(
            text=text,
            requested_ingredients=tuple(requested_ingredients),
            provider=provider,
            fields=fields,
        )
        for fields in parse_generated_text(text)
    ]
