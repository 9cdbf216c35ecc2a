from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from app.core.auth_dependencies import CurrentUser
from app.models.client import REQUEST_PENDING, REQUEST_REJECTED, AccountRequest, Admin, Client
from app.models.ticket import TICKET_FINISHED_STATUSES, Ticket
from app.models.whatsapp import WhatsAppInstance


def _conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def ensure_unique_account_request(db: Session, email: str, cpf: str) -> None:
    open_requests = db.query(AccountRequest).filter(AccountRequest.status != REQUEST_REJECTED)
    if open_requests.filter(AccountRequest.email == email).first():
        raise _conflict("Já existe uma solicitação de cadastro para este e-mail.")
    if open_requests.filter(AccountRequest.cpf == cpf).first():
        raise _conflict("Já existe uma solicitação de cadastro para este CPF.")

    if db.query(Client.id).filter(Client.email == email).first():
        raise _conflict("Já existe um cliente cadastrado com este e-mail.")
    if db.query(Client.id).filter(Client.cpf == cpf).first():
        raise _conflict("Já existe um cliente cadastrado com este CPF.")


def ensure_pending(account_request: AccountRequest) -> None:
    if account_request.status != REQUEST_PENDING:
        raise _conflict("Esta solicitação já foi analisada.")


def ensure_unique_admin_email(db: Session, email: str) -> None:
    if db.query(Admin.id).filter(Admin.email == email).first():
        raise _conflict("Já existe um administrador cadastrado com este e-mail.")


def ensure_unique_client_email(db: Session, email: str, client_id: UUID) -> None:
    if db.query(Client.id).filter(Client.email == email, Client.id != client_id).first():
        raise _conflict("Já existe um cliente cadastrado com este e-mail.")


def ensure_instance_access(instance: WhatsAppInstance, current_user: CurrentUser) -> None:
    # cliente só enxerga as próprias instâncias
    if not current_user.is_admin and not current_user.owns(instance.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Você não tem permissão para acessar esta instância.",
        )


def ensure_ticket_access(ticket: Ticket, current_user: CurrentUser) -> None:
    if not current_user.is_admin and not current_user.owns(ticket.user_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Você não tem permissão para acessar este chamado.",
        )


def ensure_ticket_open_for(ticket: Ticket, current_user: CurrentUser) -> None:
    if current_user.is_admin:
        return
    if ticket.status in TICKET_FINISHED_STATUSES:
        raise _conflict("Este chamado já foi encerrado e não aceita novas mensagens.")
