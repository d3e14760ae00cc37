from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from cozinha.app.domain.models import Recipe, SearchResult


class RecipeOut(BaseModel):
    id: Optional[str] = None
    externalId: Optional[str] = None
    name: str
    description: str = ""
    category: str = ""
    origin: str = ""
    ingredients: list[str] = Field(default_factory=list)
    instructions: str = ""
    estimatedTime: str = ""
    difficulty: str
    imageUrl: str = ""
    videoUrl: str = ""
    tags: list[str] = Field(default_factory=list)
    source: str
    verified: bool = False
    matchScore: Optional[int] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_domain(cls, recipe: Recipe) -> "RecipeOut":
        return cls(
            id=recipe.id,
            externalId=recipe.external_id,
            name=recipe.name,
            description=recipe.description,
            category=recipe.category,
            origin=recipe.origin,
            ingredients=list(recipe.ingredients),
            instructions=recipe.instructions,
            estimatedTime=recipe.time_label,
            difficulty=recipe.difficulty.value,
            imageUrl=recipe.image_url,
            videoUrl=recipe.video_url,
            tags=list(recipe.tags),
            source=recipe.source.value,
            verified=recipe.verified,
            matchScore=recipe.match_score,
            createdAt=recipe.created_at,
        )


class SearchRequestBody(BaseModel):
    query: Optional[str] = None
    ingredients: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    origin: Optional[str] = None
    limit: Optional[int] = None
    supplement: bool = False


class SourceCounts(BaseModel):
    local: int = 0
    catalog: int = 0
    generated: int = 0


class SearchResponse(BaseModel):
    recipes: list[RecipeOut]
    filters: dict[str, Any] = Field(default_factory=dict)
    total: int
    source: str
    counts: SourceCounts = Field(default_factory=SourceCounts)
    elapsedMs: int = 0

    @classmethod
    def from_domain(cls, result: SearchResult) -> "SearchResponse":
        return cls(
            recipes=[RecipeOut.from_domain(recipe) for recipe in result.recipes],
            filters=result.filters,
            total=result.total,
            source=result.source,
            counts=SourceCounts(**result.counts),
            elapsedMs=result.elapsed_ms,
        )


class SuggestionsRequest(BaseModel):
    ingredients: list[str] = Field(default_factory=list)


class SuggestionsResponse(SearchResponse):
    searchedIngredients: list[str] = Field(default_factory=list)


class WeeklyMenuRequest(BaseModel):
    forbiddenIngredients: list[str] = Field(default_factory=list)


class WeeklyMenuResponse(BaseModel):
    menu: str
    source: Literal["cache", "ia"]
    forbiddenIngredients: list[str] = Field(default_factory=list)
    remaining: int
    nextRefresh: datetime
