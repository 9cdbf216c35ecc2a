from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, get_current_user
from app.core.database import get_db
from app.crud import whatsapp as crud
from app.schemas.whatsapp_schema import (
    ContactOut,
    ContactUpsert,
    InstanceAIToggle,
    InstanceCreate,
    InstanceOut,
    InstanceUpdate,
    MessageCreate,
    MessageOut,
)
from . import validators

router = APIRouter(prefix="/whatsapp/instances", tags=["WhatsApp"])


def _load_instance(db: Session, instance_id: UUID, current_user: CurrentUser):
    instance = crud.get_instance(db, instance_id)
    if not instance:
        raise HTTPException(status_code=404, detail="Instância não encontrada")
    validators.ensure_instance_access(instance, current_user)
    return instance


def _load_contact(db: Session, instance_id: UUID, contact_id: UUID, current_user: CurrentUser):
    _load_instance(db, instance_id, current_user)
    contact = crud.get_contact(db, instance_id, contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contato não encontrado")
    return contact


@router.get("", response_model=List[InstanceOut])
def list_instances(
    user_id: Optional[UUID] = Query(default=None, description="Filtro por dono (apenas admin)"),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    owner_id = user_id if current_user.is_admin else current_user.id
    return crud.list_instances(db, owner_id, status_filter)


@router.post("", response_model=InstanceOut, status_code=status.HTTP_201_CREATED)
def create_instance(
    payload: InstanceCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    owner_id = current_user.id
    if payload.user_id and not current_user.owns(payload.user_id):
        if not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Você só pode criar instâncias para a sua própria conta.",
            )
        owner_id = payload.user_id
    return crud.create_instance(db, owner_id, payload)


@router.get("/{instance_id}", response_model=InstanceOut)
def get_instance(
    instance_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return _load_instance(db, instance_id, current_user)


@router.put("/{instance_id}", response_model=InstanceOut)
def update_instance(
    instance_id: UUID,
    payload: InstanceUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    instance = _load_instance(db, instance_id, current_user)
    return crud.update_instance(db, instance, payload)


@router.delete("/{instance_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_instance(
    instance_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    instance = _load_instance(db, instance_id, current_user)
    crud.delete_instance(db, instance)
    return None


@router.post("/{instance_id}/ai", response_model=InstanceOut)
def toggle_ai(
    instance_id: UUID,
    payload: InstanceAIToggle,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    instance = _load_instance(db, instance_id, current_user)
    return crud.set_ai_active(db, instance, payload.is_ai_active)


@router.get("/{instance_id}/contacts", response_model=List[ContactOut])
def list_contacts(
    instance_id: UUID,
    search: Optional[str] = Query(default=None),
    unread_only: bool = Query(default=False),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    _load_instance(db, instance_id, current_user)
    return crud.list_contacts(db, instance_id, search, unread_only)


@router.post("/{instance_id}/contacts", response_model=ContactOut)
def upsert_contact(
    instance_id: UUID,
    payload: ContactUpsert,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    _load_instance(db, instance_id, current_user)
    try:
        return crud.upsert_contact(db, instance_id, payload)
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Contato já cadastrado nesta instância")


@router.get("/{instance_id}/contacts/{contact_id}/messages", response_model=List[MessageOut])
def list_messages(
    instance_id: UUID,
    contact_id: UUID,
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    contact = _load_contact(db, instance_id, contact_id, current_user)
    return crud.list_messages(db, contact, limit)


@router.post(
    "/{instance_id}/contacts/{contact_id}/messages",
    response_model=MessageOut,
    status_code=status.HTTP_201_CREATED,
)
def send_message(
    instance_id: UUID,
    contact_id: UUID,
    payload: MessageCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    contact = _load_contact(db, instance_id, contact_id, current_user)
    if not payload.content and not payload.media_url:
        raise HTTPException(status_code=400, detail="Mensagem sem conteúdo")
    return crud.add_message(db, contact, payload)


@router.post("/{instance_id}/contacts/{contact_id}/read", response_model=ContactOut)
def mark_contact_read(
    instance_id: UUID,
    contact_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    contact = _load_contact(db, instance_id, contact_id, current_user)
    return crud.mark_read(db, contact)
