import os
from datetime import datetime, time, timezone
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.client import CLIENT_ACTIVE, REQUEST_PENDING, AccountRequest, Client
from app.models.ticket import Ticket
from app.models.whatsapp import WhatsAppInstance, WhatsAppMessage
from . import system_logs

OPEN_TICKET_STATUSES = ("open", "in_progress")


def plan_price() -> float:
    return float(os.getenv("PLAN_PRICE", "97"))


def _count(query) -> int:
    return query.scalar() or 0


def admin_report(db: Session) -> dict:
    active_clients = _count(
        db.query(func.count(Client.id)).filter(Client.is_active.is_(True), Client.status == CLIENT_ACTIVE)
    )
    return {
        "total_clients": _count(db.query(func.count(Client.id))),
        "active_clients": active_clients,
        "connected_instances": _count(
            db.query(func.count(WhatsAppInstance.id)).filter(WhatsAppInstance.status == "connected")
        ),
        "pending_requests": _count(
            db.query(func.count(AccountRequest.id)).filter(AccountRequest.status == REQUEST_PENDING)
        ),
        "open_tickets": _count(
            db.query(func.count(Ticket.id)).filter(Ticket.status.in_(OPEN_TICKET_STATUSES))
        ),
        "mrr": active_clients * plan_price(),
        "recent_logs": system_logs.recent_logs(db, limit=5),
    }


def _start_of_today() -> datetime:
    return datetime.combine(datetime.now(timezone.utc).date(), time.min, tzinfo=timezone.utc)


def client_report(db: Session, user_id: UUID) -> dict:
    instances = (
        db.query(WhatsAppInstance)
        .filter(WhatsAppInstance.user_id == user_id)
        .order_by(WhatsAppInstance.created_at.asc())
        .all()
    )
    instance_ids = [instance.id for instance in instances]
    primary = instances[0] if instances else None

    conversations_today = 0
    messages_today = 0
    if instance_ids:
        todays_messages = db.query(WhatsAppMessage).filter(
            WhatsAppMessage.instance_id.in_(instance_ids),
            WhatsAppMessage.timestamp >= _start_of_today(),
        )
        messages_today = _count(todays_messages.with_entities(func.count(WhatsAppMessage.id)))
        conversations_today = _count(
            todays_messages.with_entities(func.count(func.distinct(WhatsAppMessage.contact_id)))
        )

    return {
        "instance_status": primary.status if primary else None,
        "is_ai_active": bool(primary and primary.is_ai_active),
        "conversations_today": conversations_today,
        "messages_today": messages_today,
        "open_tickets": _count(
            db.query(func.count(Ticket.id)).filter(
                Ticket.user_id == user_id,
                Ticket.status.in_(OPEN_TICKET_STATUSES),
            )
        ),
    }
