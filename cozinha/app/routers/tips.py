from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from cozinha.app.deps import CurrentUser, get_current_user, get_tip_service, http_error
from cozinha.app.domain.errors import KitchenError
from cozinha.app.schemas.tips import TipRequest, TipResponse
from cozinha.services.errors import ServiceError
from cozinha.services.tips import TipService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tips", tags=["tips"])


@router.post("/generate", response_model=TipResponse)
async def generate_tip(
    payload: TipRequest,
    user: CurrentUser = Depends(get_current_user),
    service: TipService = Depends(get_tip_service),
) -> TipResponse:
    try:
        result = await service.generate(user.id, payload.category, payload.context)
    except KitchenError as exc:
        raise http_error(exc)
    except ServiceError as exc:
        logger.warning("Tip generation unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Serviço de IA indisponível no momento")

    return TipResponse(
        tip=result.tip,
        source=result.source,
        category=result.category,
        remaining=result.remaining,
        nextRefresh=result.next_refresh,
    )
