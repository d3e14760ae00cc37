# cozinha/app/deps.py (singletons do processo expostos como dependências)

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from cozinha.app.config import settings
from cozinha.app.domain.errors import (
    FavoriteConflictError,
    FavoriteNotFoundError,
    InvalidQueryError,
    KitchenError,
    QuotaExceededError,
    RecipeNotFoundError,
)
from cozinha.app.infra.cache.base import InMemoryStore, KeyValueStore
from cozinha.app.infra.db.base import RecipeRepository
from cozinha.app.infra.db.supabase_repo import (
    SupabaseFavoriteRepository,
    SupabaseRecipeRepository,
    SupabaseTipLogRepository,
)
from cozinha.app.services.quota_service import QuotaService
from cozinha.services.catalog_client import TheMealDBClient
from cozinha.services.chat_agent import ChatService
from cozinha.services.errors import GeminiConfigurationError
from cozinha.services.favorites import FavoritesService
from cozinha.services.gemini_client import GeminiClient, TextGenerator
from cozinha.services.governor import GenerationGovernor
from cozinha.services.orchestrator import AggregationOrchestrator
from cozinha.services.persistence_gateway import PersistenceGateway
from cozinha.services.sources.catalog import CatalogSourceAdapter
from cozinha.services.sources.generative import GenerativeSourceAdapter
from cozinha.services.sources.local import LocalSourceAdapter
from cozinha.services.suggestion_cache import SuggestionCache
from cozinha.services.tips import TipService
from cozinha.services.weekly_menu import WeeklyMenuService

logger = logging.getLogger(__name__)

_client: Client | None = None
_generator: TextGenerator | None = None
_generator_ready = False

# Estado compartilhado do processo: cache de sugestões e contadores de cota
_store: KeyValueStore = InMemoryStore()
_cache = SuggestionCache(_store)
_recipe_quota = QuotaService(_store, namespace="receitas")
_tip_quota = QuotaService(_store, namespace="dicas")
_menu_quota = QuotaService(_store, namespace="cardapio")
_catalog_client = TheMealDBClient()


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None


def _resolve_user(token: str, supa: Client) -> CurrentUser:
    try:
        # valida token e obtém o usuário (Admin API do supabase-py)
        res = supa.auth.get_user(token)
        user = res.user
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")

        # metadados podem conter 'name'
        name = None
        meta = getattr(user, "user_metadata", None) or {}
        if isinstance(meta, dict):
            name = meta.get("name")

        return CurrentUser(id=str(user.id), email=user.email, name=name)
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid/expired token")


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser:
    """
    Recebe Authorization: Bearer <access_token> do Supabase,
    valida no GoTrue e retorna dados mínimos do usuário.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")
    return _resolve_user(cred.credentials, supa)


async def get_optional_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
) -> CurrentUser | None:
    """Igual a get_current_user, mas sem token o chamador é visitante (None)."""
    if cred is None:
        return None
    return _resolve_user(cred.credentials, supa)


def get_text_generator() -> TextGenerator | None:
    global _generator, _generator_ready
    if not _generator_ready:
        api_key = settings.GEMINI_API_KEY.get_secret_value() if settings.GEMINI_API_KEY else None
        try:
            _generator = GeminiClient(api_key=api_key, model_name=settings.GEMINI_MODEL)
        except GeminiConfigurationError as error:
            logger.warning("Gemini disabled: %s", error)
            _generator = None
        _generator_ready = True
    return _generator


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> RecipeRepository:
    return SupabaseRecipeRepository(supa)


def _generative(generator: TextGenerator | None) -> GenerativeSourceAdapter | None:
    return GenerativeSourceAdapter(generator) if generator is not None else None


def get_orchestrator(
    recipes: RecipeRepository = Depends(get_recipe_repository),
    generator: TextGenerator | None = Depends(get_text_generator),
) -> AggregationOrchestrator:
    return AggregationOrchestrator(
        local=LocalSourceAdapter(recipes),
        catalog=CatalogSourceAdapter(_catalog_client),
        generative=_generative(generator),
        governor=GenerationGovernor(_cache, _recipe_quota),
        gateway=PersistenceGateway(recipes),
    )


def get_chat_service(generator: TextGenerator | None = Depends(get_text_generator)) -> ChatService:
    return ChatService(_generative(generator))


def get_tip_service(
    supa: Client = Depends(get_supabase),
    generator: TextGenerator | None = Depends(get_text_generator),
) -> TipService:
    return TipService(
        _generative(generator),
        GenerationGovernor(_cache, _tip_quota),
        tip_log=SupabaseTipLogRepository(supa),
    )


def get_weekly_menu_service(generator: TextGenerator | None = Depends(get_text_generator)) -> WeeklyMenuService:
    return WeeklyMenuService(_generative(generator), GenerationGovernor(_cache, _menu_quota))


def get_favorites_service(supa: Client = Depends(get_supabase)) -> FavoritesService:
    return FavoritesService(SupabaseFavoriteRepository(supa), SupabaseRecipeRepository(supa))


def http_error(error: KitchenError) -> HTTPException:
    """Traduz erros de domínio para respostas HTTP."""
    if isinstance(error, QuotaExceededError):
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": str(error),
                "nextReset": error.reset_hint,
                "used": error.used,
                "limit": error.limit,
            },
        )
    if isinstance(error, InvalidQueryError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (RecipeNotFoundError, FavoriteNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, FavoriteConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
