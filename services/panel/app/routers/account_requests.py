from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, require_admin
from app.core.database import get_db
from app.crud import account_requests as crud
from app.schemas.account_request_schema import (
    AccountRequestCreate,
    AccountRequestCreated,
    AccountRequestOut,
    AccountRequestReject,
)
from app.schemas.client_schema import ClientOut
from . import validators

router = APIRouter(prefix="/account-requests", tags=["Account Requests"])


def _load_request(db: Session, request_id: UUID):
    account_request = crud.get_request(db, request_id)
    if not account_request:
        raise HTTPException(status_code=404, detail="Solicitação não encontrada")
    return account_request


@router.post("", response_model=AccountRequestCreated, status_code=status.HTTP_201_CREATED)
def create_account_request(payload: AccountRequestCreate, request: Request, db: Session = Depends(get_db)):
    """
    Cadastro público: qualquer visitante pode solicitar uma conta.
    Duplicidade de e-mail ou CPF volta como 409 com mensagem para o usuário.
    """
    validators.ensure_unique_account_request(db, payload.email, payload.cpf)

    try:
        return crud.create_request(
            db,
            payload,
            publisher=request.app.state.event_publisher,
            ip_address=request.client.host if request.client else None,
        )
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Não foi possível registrar a solicitação. Tente novamente.")


@router.get("", response_model=List[AccountRequestOut])
def list_account_requests(
    status_filter: Optional[str] = Query(default=None, alias="status", pattern="^(pending|approved|rejected)$"),
    search: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return crud.list_requests(db, status_filter, search)


@router.get("/{request_id}", response_model=AccountRequestOut)
def get_account_request(
    request_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return _load_request(db, request_id)


@router.post("/{request_id}/approve", response_model=ClientOut)
def approve_account_request(
    request_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    account_request = _load_request(db, request_id)
    validators.ensure_pending(account_request)

    try:
        return crud.approve_request(
            db,
            account_request,
            reviewer_id=current_user.id,
            publisher=request.app.state.event_publisher,
        )
    except IntegrityError:
        raise HTTPException(status_code=409, detail="Já existe um cliente com esta matrícula")


@router.post("/{request_id}/reject", response_model=AccountRequestOut)
def reject_account_request(
    request_id: UUID,
    request: Request,
    payload: Optional[AccountRequestReject] = None,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    account_request = _load_request(db, request_id)
    validators.ensure_pending(account_request)

    return crud.reject_request(
        db,
        account_request,
        reviewer_id=current_user.id,
        reason=payload.reason if payload else None,
        publisher=request.app.state.event_publisher,
    )
