from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, get_current_user, require_admin
from app.core.database import get_db
from app.crud import tickets as crud
from app.schemas.ticket_schema import (
    TicketCreate,
    TicketDetailOut,
    TicketMessageCreate,
    TicketMessageOut,
    TicketOut,
    TicketUpdate,
)
from . import validators

router = APIRouter(prefix="/tickets", tags=["Support"])


def _load_ticket(db: Session, ticket_id: UUID, current_user: CurrentUser):
    ticket = crud.buscar_ticket(db, ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Chamado não encontrado")
    validators.ensure_ticket_access(ticket, current_user)
    return ticket


@router.post("", response_model=TicketDetailOut, status_code=status.HTTP_201_CREATED)
def open_ticket(
    payload: TicketCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return crud.abrir_ticket(db, current_user.id, payload, publisher=request.app.state.event_publisher)


@router.get("", response_model=List[TicketOut])
def list_tickets(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    # admin vê a fila inteira; cliente só os próprios chamados
    owner_id = None if current_user.is_admin else current_user.id
    return crud.listar_tickets(db, owner_id, status_filter)


@router.get("/{ticket_id}", response_model=TicketDetailOut)
def get_ticket(
    ticket_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return _load_ticket(db, ticket_id, current_user)


@router.post("/{ticket_id}/messages", response_model=TicketMessageOut, status_code=status.HTTP_201_CREATED)
def add_ticket_message(
    ticket_id: UUID,
    payload: TicketMessageCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    ticket = _load_ticket(db, ticket_id, current_user)
    validators.ensure_ticket_open_for(ticket, current_user)
    return crud.adicionar_mensagem(db, ticket, current_user.id, payload)


@router.patch("/{ticket_id}", response_model=TicketDetailOut)
def update_ticket(
    ticket_id: UUID,
    payload: TicketUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    ticket = _load_ticket(db, ticket_id, current_user)
    return crud.atualizar_ticket(db, ticket, payload, admin_id=current_user.id)
