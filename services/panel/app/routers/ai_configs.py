from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, get_current_user, require_admin
from app.core.database import get_db
from app.crud import ai_configs as crud
from app.schemas.ai_config_schema import AIConfigOut, AIConfigTestIn, AIConfigTestOut, AIConfigUpdate
from app.services.ai_preview import build_preview
from app.services.assistant_client import solicitar_resposta_assistente
from shared.cache import get_cache_ttl, get_cached_ai_config, invalidate_ai_config_cache, set_cached_ai_config

router = APIRouter(prefix="/ai-configs", tags=["AI Configs"])


def _cache(request: Request):
    return getattr(request.app.state, "redis_cache", None)


def _load_config_data(db: Session, request: Request, user_id: UUID) -> dict:
    cache = _cache(request)
    cached = get_cached_ai_config(cache, user_id)
    if cached is not None:
        return cached

    data = crud.serialize_config(crud.get_or_create_config(db, user_id))
    set_cached_ai_config(cache, user_id, data, ttl=get_cache_ttl("AI_CONFIG", 300))
    return data


@router.get("/me", response_model=AIConfigOut)
def get_my_config(
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return _load_config_data(db, request, current_user.id)


@router.put("/me", response_model=AIConfigOut)
def update_my_config(
    payload: AIConfigUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    config = crud.get_or_create_config(db, current_user.id)
    config = crud.update_config(db, config, payload)
    invalidate_ai_config_cache(_cache(request), current_user.id)
    return config


@router.post("/me/reset", response_model=AIConfigOut)
def reset_my_knowledge_base(
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    config = crud.get_or_create_config(db, current_user.id)
    config = crud.reset_knowledge_base(db, config)
    invalidate_ai_config_cache(_cache(request), current_user.id)
    return config


@router.post("/me/test", response_model=AIConfigTestOut)
async def test_my_config(
    payload: AIConfigTestIn,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    config_data = _load_config_data(db, request, current_user.id)

    reply = await solicitar_resposta_assistente(
        request.app.state.assistant_service_url,
        config_data,
        payload.message,
        transport=getattr(request.app.state, "assistant_transport", None),
    )
    if reply:
        return {"reply": reply, "source": "assistant"}
    return {"reply": build_preview(config_data, payload.message), "source": "template"}


@router.get("/{user_id}", response_model=AIConfigOut)
def get_user_config(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    config = crud.get_config(db, user_id)
    if not config:
        raise HTTPException(status_code=404, detail="Configuração de IA não encontrada")
    return config
