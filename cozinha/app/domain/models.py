# cozinha/app/domain/models.py
"""
Domain models for the recipe aggregation pipeline.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class SourceTag(str, Enum):
    """Where a recipe was first discovered."""
    LOCAL = "local"
    CATALOG = "mealdb"
    GENERATED = "ia"


class Difficulty(str, Enum):
    """Difficulty tiers, stored with their caller-facing labels."""
    EASY = "Fácil"
    MEDIUM = "Médio"
    HARD = "Difícil"


# Ties in the ranked list: catalog first, then local, then generated
SOURCE_PRIORITY: dict[SourceTag, int] = {
    SourceTag.CATALOG: 0,
    SourceTag.LOCAL: 1,
    SourceTag.GENERATED: 2,
}


@dataclass
class Recipe:
    """
    Canonical, source-agnostic recipe.
    Every adapter produces this shape through the normalizer.
    """
    name: str
    source: SourceTag
    id: Optional[str] = None
    external_id: Optional[str] = None
    category: str = ""
    origin: str = ""
    ingredients: list[str] = field(default_factory=list)  # "quantidade + unidade + item"
    instructions: str = ""
    time_label: str = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    image_url: str = ""
    tags: list[str] = field(default_factory=list)
    active: bool = True
    verified: bool = False
    created_at: Optional[datetime] = None
    description: str = ""
    video_url: str = ""

    # Filled in by the scorer, never persisted
    match_score: Optional[int] = None

    @property
    def is_external(self) -> bool:
        """Catalog and generated recipes are candidates for persistence."""
        return self.source in (SourceTag.CATALOG, SourceTag.GENERATED)

    @property
    def identity(self) -> tuple[str, str] | None:
        """De-duplication key: (source, external id), falling back to the local id."""
        if self.external_id:
            return (self.source.value, self.external_id)
        if self.id:
            return ("id", self.id)
        return None

    def copy(self, **changes: Any) -> "Recipe":
        changes.setdefault("ingredients", list(self.ingredients))
        changes.setdefault("tags", list(self.tags))
        return replace(self, **changes)


@dataclass
class Favorite:
    """A caller's bookmark on a persisted recipe."""
    owner_id: str
    recipe_id: str
    notes: Optional[str] = None
    rating: Optional[int] = None
    personal_tags: list[str] = field(default_factory=list)
    collection: str = "Favoritos"
    id: Optional[str] = None
    created_at: Optional[datetime] = None
    recipe: Optional[Recipe] = None


@dataclass
class CacheEntry(Generic[T]):
    """A cached generative output. Superseded on the next write once expired."""
    key: str
    value: T
    created_at: datetime

    def is_fresh(self, now: datetime, ttl_seconds: int) -> bool:
        return (now - self.created_at).total_seconds() < ttl_seconds


@dataclass
class QuotaCounter:
    """Generative calls used by one caller on one calendar day."""
    owner_id: str
    day: str  # YYYY-MM-DD format
    count: int = 0


@dataclass
class QuotaCheck:
    """Result of a quota check operation."""
    allowed: bool
    used: int
    daily_limit: int
    reason: Optional[str] = None

    @property
    def remaining(self) -> int:
        return max(0, self.daily_limit - self.used)


@dataclass
class SearchRequest:
    """
    Query envelope handed over by the HTTP layer.
    At most one primary filter; free text and ingredients may combine.
    """
    query: Optional[str] = None
    ingredients: list[str] = field(default_factory=list)
    category: Optional[str] = None
    origin: Optional[str] = None
    limit: int = 12
    supplement: bool = False

    @property
    def has_filter(self) -> bool:
        return bool(
            (self.query and self.query.strip())
            or self.ingredients
            or (self.category and self.category.strip())
            or (self.origin and self.origin.strip())
        )

    def applied_filters(self) -> dict[str, Any]:
        filters: dict[str, Any] = {}
        if self.query:
            filters["query"] = self.query
        if self.ingredients:
            filters["ingredients"] = list(self.ingredients)
        if self.category:
            filters["category"] = self.category
        if self.origin:
            filters["origin"] = self.origin
        return filters


@dataclass
class SearchResult:
    """Ranked output of one aggregation run."""
    recipes: list[Recipe]
    filters: dict[str, Any]
    source: str  # local | catalog | mixed
    counts: dict[str, int] = field(default_factory=dict)
    elapsed_ms: int = 0

    @property
    def total(self) -> int:
        return len(self.recipes)


@dataclass
class ChatTurn:
    """One message of a conversation history."""
    role: str  # user | assistant
    content: str


@dataclass
class ChatReply:
    reply: str
    suggestions: list[str] = field(default_factory=list)
    used: Optional[int] = None
    limit: Optional[int] = None


@dataclass
class TipResult:
    tip: str
    source: str  # cache | ia
    category: str
    remaining: int
    next_refresh: datetime


@dataclass
class WeeklyMenuResult:
    menu: str
    source: str  # cache | ia
    forbidden: list[str]
    remaining: int
    next_refresh: datetime
