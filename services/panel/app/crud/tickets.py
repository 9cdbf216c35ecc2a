from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.models.ticket import Ticket, TicketMessage
from app.schemas.ticket_schema import TicketCreate, TicketMessageCreate, TicketUpdate

STATUS_LABELS = {
    "open": "Aberto",
    "in_progress": "Em andamento",
    "resolved": "Resolvido",
    "closed": "Fechado",
}


def abrir_ticket(db: Session, user_id: UUID, payload: TicketCreate, publisher=None) -> Ticket:
    ticket = Ticket(
        user_id=user_id,
        subject=payload.subject,
        category=payload.category,
        priority=payload.priority,
    )
    ticket.messages.append(
        TicketMessage(
            sender_id=user_id,
            content=payload.message,
            attachment_url=payload.attachment_url,
        )
    )
    db.add(ticket)
    db.commit()
    db.refresh(ticket)

    if publisher:
        publisher.publish(
            "ticket.created",
            {
                "ticket_id": str(ticket.id),
                "user_id": str(user_id),
                "subject": ticket.subject,
                "priority": ticket.priority,
            },
        )
    return ticket


def listar_tickets(db: Session, user_id: Optional[UUID] = None, status: Optional[str] = None):
    query = db.query(Ticket)
    if user_id:
        query = query.filter(Ticket.user_id == user_id)
    if status:
        query = query.filter(Ticket.status == status)
    return query.order_by(Ticket.updated_at.desc()).all()


def buscar_ticket(db: Session, ticket_id: UUID) -> Optional[Ticket]:
    return db.query(Ticket).filter(Ticket.id == ticket_id).first()


def adicionar_mensagem(
    db: Session,
    ticket: Ticket,
    sender_id: UUID,
    payload: TicketMessageCreate,
) -> TicketMessage:
    message = TicketMessage(
        ticket_id=ticket.id,
        sender_id=sender_id,
        content=payload.content,
        attachment_url=payload.attachment_url,
    )
    db.add(message)
    ticket.updated_at = utcnow()
    db.commit()
    db.refresh(message)
    return message


def atualizar_ticket(db: Session, ticket: Ticket, payload: TicketUpdate, admin_id: UUID) -> Ticket:
    update_data = payload.model_dump(exclude_unset=True)
    new_status = update_data.get("status")
    if new_status and new_status != ticket.status:
        db.add(
            TicketMessage(
                ticket_id=ticket.id,
                sender_id=admin_id,
                content=f"Status alterado para: {STATUS_LABELS[new_status]}",
                is_system_message=True,
            )
        )

    for field, value in update_data.items():
        setattr(ticket, field, value)
    ticket.updated_at = utcnow()

    db.commit()
    db.refresh(ticket)
    return ticket
