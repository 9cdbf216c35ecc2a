from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, get_current_user, require_admin, require_super_admin
from app.core.database import get_db
from app.crud import clients as crud
from app.schemas.auth_schema import ProfileOut, ProfileUpdate
from app.schemas.client_schema import AdminCreate, AdminOut, ClientOut, ClientUpdate
from . import validators

router = APIRouter(prefix="/clients", tags=["Clients"])
admins_router = APIRouter(prefix="/admins", tags=["Admins"])
profile_router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("", response_model=List[ClientOut])
def list_clients(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    plan: Optional[str] = Query(default=None),
    is_active: Optional[bool] = Query(default=None),
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return crud.list_clients(db, status_filter, plan, is_active, search)


@router.get("/{client_id}", response_model=ClientOut)
def get_client(
    client_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    client = crud.get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")
    return client


@router.put("/{client_id}", response_model=ClientOut)
def update_client(
    client_id: UUID,
    payload: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    client = crud.get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Cliente não encontrado")

    if payload.email:
        validators.ensure_unique_client_email(db, payload.email.strip().lower(), client_id)

    try:
        return crud.update_client(db, client, payload, actor_id=current_user.id)
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Erro ao atualizar cliente")


@admins_router.get("", response_model=List[AdminOut])
def list_admins(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return crud.list_admins(db)


@admins_router.post("", response_model=AdminOut, status_code=status.HTTP_201_CREATED)
def create_admin(
    payload: AdminCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_super_admin),
):
    validators.ensure_unique_admin_email(db, payload.email)

    try:
        return crud.create_admin(db, payload, actor_id=current_user.id)
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Erro ao criar administrador")


@profile_router.get("/me", response_model=ProfileOut)
def get_my_profile(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return crud.get_or_create_profile(db, current_user.user)


@profile_router.put("/me", response_model=ProfileOut)
def update_my_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return crud.update_profile(db, current_user.user, payload)
