import os
from datetime import date
from typing import Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.models.client import (
    CLIENT_ACTIVE,
    CLIENT_MATRICULA_LENGTH,
    REQUEST_APPROVED,
    REQUEST_REJECTED,
    AccountRequest,
    Client,
)
from app.schemas.account_request_schema import AccountRequestCreate
from app.services.matricula import generate_matricula
from . import system_logs


def default_plan() -> str:
    return os.getenv("DEFAULT_PLAN", "isa-2.5")


def _event_payload(account_request: AccountRequest) -> dict:
    return {
        "account_request_id": str(account_request.id),
        "matricula": account_request.matricula,
        "email": account_request.email,
        "full_name": account_request.full_name,
        "status": account_request.status,
    }


def create_request(
    db: Session,
    payload: AccountRequestCreate,
    publisher=None,
    ip_address: Optional[str] = None,
) -> AccountRequest:
    account_request = AccountRequest(
        full_name=payload.full_name,
        email=payload.email,
        cpf=payload.cpf,
        phone=payload.phone,
        company_name=payload.company_name,
        segmento=payload.segmento,
        birth_date=payload.birth_date,
        message=payload.message,
        matricula=generate_matricula(db, CLIENT_MATRICULA_LENGTH),
    )
    db.add(account_request)
    db.flush()
    system_logs.record(
        db,
        "account_request.created",
        details={"account_request_id": str(account_request.id), "email": account_request.email},
        ip_address=ip_address,
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(account_request)

    if publisher:
        publisher.publish("account_request.created", _event_payload(account_request))
    return account_request


def list_requests(db: Session, status: Optional[str] = None, search: Optional[str] = None):
    query = db.query(AccountRequest)
    if status:
        query = query.filter(AccountRequest.status == status)
    if search:
        like_pattern = f"%{search}%"
        query = query.filter(
            or_(
                AccountRequest.full_name.ilike(like_pattern),
                AccountRequest.email.ilike(like_pattern),
                AccountRequest.matricula.ilike(like_pattern),
                AccountRequest.cpf.ilike(like_pattern),
            )
        )
    return query.order_by(AccountRequest.created_at.desc()).all()


def get_request(db: Session, request_id: UUID) -> Optional[AccountRequest]:
    return db.query(AccountRequest).filter(AccountRequest.id == request_id).first()


def approve_request(
    db: Session,
    account_request: AccountRequest,
    reviewer_id: UUID,
    publisher=None,
) -> Client:
    """Aprova a solicitação e cria o cliente com a mesma matrícula."""
    account_request.status = REQUEST_APPROVED
    account_request.reviewed_at = utcnow()
    account_request.reviewed_by = reviewer_id

    client = Client(
        matricula=account_request.matricula,
        email=account_request.email,
        cpf=account_request.cpf,
        full_name=account_request.full_name,
        phone=account_request.phone,
        company_name=account_request.company_name,
        segmento=account_request.segmento,
        birth_date=account_request.birth_date,
        plan=default_plan(),
        status=CLIENT_ACTIVE,
        is_active=True,
        start_date=date.today(),
    )
    db.add(client)
    system_logs.record(
        db,
        "account_request.approved",
        user_id=reviewer_id,
        details={"account_request_id": str(account_request.id), "matricula": account_request.matricula},
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(client)
    db.refresh(account_request)

    if publisher:
        payload = _event_payload(account_request)
        payload["client_id"] = str(client.id)
        publisher.publish("account_request.approved", payload)
    return client


def reject_request(
    db: Session,
    account_request: AccountRequest,
    reviewer_id: UUID,
    reason: Optional[str] = None,
    publisher=None,
) -> AccountRequest:
    account_request.status = REQUEST_REJECTED
    account_request.rejection_reason = reason
    account_request.reviewed_at = utcnow()
    account_request.reviewed_by = reviewer_id
    system_logs.record(
        db,
        "account_request.rejected",
        user_id=reviewer_id,
        details={"account_request_id": str(account_request.id), "reason": reason},
    )
    db.commit()
    db.refresh(account_request)

    if publisher:
        payload = _event_payload(account_request)
        payload["reason"] = reason
        publisher.publish("account_request.rejected", payload)
    return account_request
