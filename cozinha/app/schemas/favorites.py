from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from cozinha.app.domain.models import Favorite, Recipe, SourceTag
from cozinha.app.schemas.kitchen import RecipeOut
from cozinha.services.normalizer import parse_difficulty


class RecipeIn(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    category: str = ""
    origin: str = ""
    ingredients: list[str] = Field(default_factory=list)
    instructions: str = ""
    estimatedTime: str = "30min"
    difficulty: str = "Médio"
    imageUrl: str = ""
    tags: list[str] = Field(default_factory=list)

    def to_domain(self) -> Recipe:
        return Recipe(
            name=self.name,
            source=SourceTag.LOCAL,
            description=self.description,
            category=self.category,
            origin=self.origin,
            ingredients=list(self.ingredients),
            instructions=self.instructions,
            time_label=self.estimatedTime,
            difficulty=parse_difficulty(self.difficulty),
            image_url=self.imageUrl,
            tags=list(self.tags),
        )


class FavoriteCreate(BaseModel):
    recipeId: Optional[str] = None
    recipe: Optional[RecipeIn] = None
    notes: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    personalTags: list[str] = Field(default_factory=list)
    collection: Optional[str] = None


class FavoriteUpdate(BaseModel):
    notes: Optional[str] = None
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    personalTags: Optional[list[str]] = None
    collection: Optional[str] = None

    def changes(self) -> dict[str, object]:
        renamed = {"personalTags": "personal_tags"}
        return {
            renamed.get(key, key): value
            for key, value in self.model_dump(exclude_unset=True).items()
        }


class FavoriteOut(BaseModel):
    id: Optional[str] = None
    recipeId: str
    notes: Optional[str] = None
    rating: Optional[int] = None
    personalTags: list[str] = Field(default_factory=list)
    collection: str
    createdAt: Optional[datetime] = None
    recipe: Optional[RecipeOut] = None

    @classmethod
    def from_domain(cls, favorite: Favorite) -> "FavoriteOut":
        return cls(
            id=favorite.id,
            recipeId=favorite.recipe_id,
            notes=favorite.notes,
            rating=favorite.rating,
            personalTags=list(favorite.personal_tags),
            collection=favorite.collection,
            createdAt=favorite.created_at,
            recipe=RecipeOut.from_domain(favorite.recipe) if favorite.recipe else None,
        )
