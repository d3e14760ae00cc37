from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from cozinha.app.deps import CurrentUser, get_current_user, get_favorites_service, http_error
from cozinha.app.domain.errors import KitchenError
from cozinha.app.schemas.favorites import FavoriteCreate, FavoriteOut, FavoriteUpdate
from cozinha.services.favorites import FavoritesService

router = APIRouter(prefix="/kitchen/favorites", tags=["favorites"])


@router.get("/", response_model=list[FavoriteOut])
def list_favorites(
    collection: Optional[str] = Query(default=None),
    user: CurrentUser = Depends(get_current_user),
    service: FavoritesService = Depends(get_favorites_service),
) -> list[FavoriteOut]:
    return [FavoriteOut.from_domain(favorite) for favorite in service.list_for_owner(user.id, collection)]


@router.post("/", response_model=FavoriteOut, status_code=status.HTTP_201_CREATED)
def add_favorite(
    payload: FavoriteCreate,
    user: CurrentUser = Depends(get_current_user),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteOut:
    try:
        favorite = service.add(
            user.id,
            recipe_id=payload.recipeId,
            recipe=payload.recipe.to_domain() if payload.recipe else None,
            notes=payload.notes,
            rating=payload.rating,
            personal_tags=payload.personalTags,
            collection=payload.collection,
        )
    except KitchenError as exc:
        raise http_error(exc)
    return FavoriteOut.from_domain(favorite)


@router.put("/{recipe_id}", response_model=FavoriteOut)
def update_favorite(
    recipe_id: str,
    payload: FavoriteUpdate,
    user: CurrentUser = Depends(get_current_user),
    service: FavoritesService = Depends(get_favorites_service),
) -> FavoriteOut:
    try:
        favorite = service.update(user.id, recipe_id, payload.changes())
    except KitchenError as exc:
        raise http_error(exc)
    return FavoriteOut.from_domain(favorite)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_favorite(
    recipe_id: str,
    user: CurrentUser = Depends(get_current_user),
    service: FavoritesService = Depends(get_favorites_service),
) -> Response:
    try:
        service.remove(user.id, recipe_id)
    except KitchenError as exc:
        raise http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
