from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from cozinha.app.deps import (
    CurrentUser,
    get_chat_service,
    get_current_user,
    get_optional_user,
    get_orchestrator,
    get_weekly_menu_service,
    http_error,
)
from cozinha.app.domain.errors import KitchenError
from cozinha.app.domain.models import ChatTurn, SearchRequest
from cozinha.app.schemas.chat import ChatRequest, ChatResponse, ChatUsage
from cozinha.app.schemas.kitchen import (
    SearchRequestBody,
    SearchResponse,
    SuggestionsRequest,
    SuggestionsResponse,
    WeeklyMenuRequest,
    WeeklyMenuResponse,
)
from cozinha.services.chat_agent import ChatService
from cozinha.services.errors import ServiceError
from cozinha.services.orchestrator import AggregationOrchestrator
from cozinha.services.weekly_menu import WeeklyMenuService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/kitchen", tags=["kitchen"])


def _split_ingredients(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


async def _run_search(
    request: SearchRequest,
    orchestrator: AggregationOrchestrator,
    user: CurrentUser | None,
) -> SearchResponse:
    try:
        if not request.has_filter:
            result = await orchestrator.browse(request.limit)
        else:
            result = await orchestrator.search(request, caller_id=user.id if user else None)
    except KitchenError as exc:
        raise http_error(exc)
    return SearchResponse.from_domain(result)


@router.get("/search", response_model=SearchResponse)
async def search_recipes(
    query: Optional[str] = Query(default=None),
    ingredient: Optional[str] = Query(default=None, description="Um ou mais ingredientes separados por vírgula"),
    category: Optional[str] = Query(default=None),
    origin: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None),
    supplement: bool = Query(default=False),
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    user: CurrentUser | None = Depends(get_optional_user),
) -> SearchResponse:
    request = SearchRequest(
        query=query,
        ingredients=_split_ingredients(ingredient),
        category=category,
        origin=origin,
        limit=limit or 12,
        supplement=supplement,
    )
    return await _run_search(request, orchestrator, user)


@router.post("/search", response_model=SearchResponse)
async def search_recipes_post(
    payload: SearchRequestBody,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    user: CurrentUser | None = Depends(get_optional_user),
) -> SearchResponse:
    request = SearchRequest(
        query=payload.query,
        ingredients=[item for item in payload.ingredients if item.strip()],
        category=payload.category,
        origin=payload.origin,
        limit=payload.limit or 12,
        supplement=payload.supplement,
    )
    return await _run_search(request, orchestrator, user)


@router.post("/suggestions", response_model=SuggestionsResponse)
async def suggest_recipes(
    payload: SuggestionsRequest,
    orchestrator: AggregationOrchestrator = Depends(get_orchestrator),
    user: CurrentUser | None = Depends(get_optional_user),
) -> SuggestionsResponse:
    try:
        result = await orchestrator.suggest(payload.ingredients, caller_id=user.id if user else None)
    except KitchenError as exc:
        raise http_error(exc)

    response = SearchResponse.from_domain(result)
    return SuggestionsResponse(
        **response.model_dump(),
        searchedIngredients=[item.strip() for item in payload.ingredients if item.strip()],
    )


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
    user: CurrentUser | None = Depends(get_optional_user),
) -> ChatResponse:
    try:
        reply = await chat_service.reply(
            message=payload.message,
            ingredients=payload.ingredients,
            history=[ChatTurn(role=turn.role, content=turn.content) for turn in payload.history],
            visitor=user is None,
        )
    except KitchenError as exc:
        raise http_error(exc)
    except Exception as exc:
        logger.exception("Chat failed")
        raise HTTPException(
            status_code=500,
            detail=f"Erro ao processar mensagem do chat: {str(exc)}"
        )

    usage = None
    if reply.used is not None and reply.limit is not None:
        usage = ChatUsage(used=reply.used, limit=reply.limit)
    return ChatResponse(reply=reply.reply, suggestions=reply.suggestions, usage=usage)


@router.post("/weekly-menu", response_model=WeeklyMenuResponse)
async def weekly_menu(
    payload: WeeklyMenuRequest,
    user: CurrentUser = Depends(get_current_user),
    service: WeeklyMenuService = Depends(get_weekly_menu_service),
) -> WeeklyMenuResponse:
    try:
        result = await service.generate(user.id, payload.forbiddenIngredients)
    except KitchenError as exc:
        raise http_error(exc)
    except ServiceError as exc:
        logger.warning("Weekly menu unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Serviço de IA indisponível no momento")

    return WeeklyMenuResponse(
        menu=result.menu,
        source=result.source,
        forbiddenIngredients=result.forbidden,
        remaining=result.remaining,
        nextRefresh=result.next_refresh,
    )
