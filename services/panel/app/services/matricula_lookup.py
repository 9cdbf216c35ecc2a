from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.client import (
    REQUEST_APPROVED,
    REQUEST_PENDING,
    REQUEST_REJECTED,
    AccountRequest,
    Client,
)
from app.services.matricula import CPF_LENGTH, only_digits
from app.services.provisioning import (
    LOGIN_TYPE_ADMIN,
    LOGIN_TYPE_CLIENT,
    MATRICULA_LENGTHS,
    Record,
    find_record,
)

STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_PENDING = "pending"
STATUS_REJECTED = "rejected"
STATUS_NOT_FOUND = "not_found"

_MESSAGES = {
    STATUS_ACTIVE: "Matrícula encontrada. Informe sua senha para entrar.",
    STATUS_INACTIVE: "Conta inativa. Entre em contato com o suporte.",
    STATUS_PENDING: "Sua solicitação de cadastro ainda está em análise.",
    STATUS_REJECTED: "Sua solicitação de cadastro foi recusada.",
    STATUS_NOT_FOUND: "Matrícula não encontrada.",
}


@dataclass
class LookupResult:
    status: str
    login_type: str
    matricula: Optional[str] = None
    display_name: Optional[str] = None
    message: str = ""
    record: Optional[Record] = None


def _result(status_value: str, login_type: str, **kwargs) -> LookupResult:
    message = kwargs.pop("message", None) or _MESSAGES[status_value]
    return LookupResult(status=status_value, login_type=login_type, message=message, **kwargs)


def _find_client_by_cpf(db: Session, cpf: str) -> Optional[Client]:
    return db.query(Client).filter(Client.cpf == cpf).order_by(Client.created_at.desc()).first()


def _find_request(db: Session, identifier: str, by_cpf: bool) -> Optional[AccountRequest]:
    column = AccountRequest.cpf if by_cpf else AccountRequest.matricula
    return (
        db.query(AccountRequest)
        .filter(column == identifier)
        .order_by(AccountRequest.created_at.desc())
        .first()
    )


def lookup_matricula(db: Session, login_type: str, raw_identifier: str) -> LookupResult:
    """
    Descobre em que situação está uma matrícula antes do login.

    Clientes também podem se identificar pelo CPF. Cadastros ainda não
    convertidos em cliente são respondidos pela solicitação de conta.
    """
    identifier = only_digits(raw_identifier)
    by_cpf = login_type == LOGIN_TYPE_CLIENT and len(identifier) == CPF_LENGTH
    if not by_cpf and len(identifier) != MATRICULA_LENGTHS[login_type]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Matrícula inválida",
        )

    record = _find_client_by_cpf(db, identifier) if by_cpf else find_record(db, login_type, identifier)
    if record is not None:
        return _result(
            STATUS_ACTIVE if record.can_sign_in else STATUS_INACTIVE,
            login_type,
            matricula=record.matricula,
            display_name=record.full_name,
            record=record,
        )

    if login_type == LOGIN_TYPE_ADMIN:
        return _result(STATUS_NOT_FOUND, login_type)

    request = _find_request(db, identifier, by_cpf)
    if request is None:
        return _result(STATUS_NOT_FOUND, login_type)

    if request.status == REQUEST_REJECTED:
        message = _MESSAGES[STATUS_REJECTED]
        if request.rejection_reason:
            message = f"{message} Motivo: {request.rejection_reason}"
        return _result(
            STATUS_REJECTED,
            login_type,
            matricula=request.matricula,
            display_name=request.full_name,
            message=message,
        )

    # aprovada sem registro em clients ainda conta como pendente
    if request.status in (REQUEST_PENDING, REQUEST_APPROVED):
        return _result(
            STATUS_PENDING,
            login_type,
            matricula=request.matricula,
            display_name=request.full_name,
        )

    return _result(STATUS_NOT_FOUND, login_type)
