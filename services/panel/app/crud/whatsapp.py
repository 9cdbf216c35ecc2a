from typing import Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.models.whatsapp import WhatsAppContact, WhatsAppInstance, WhatsAppMessage
from app.schemas.whatsapp_schema import ContactUpsert, InstanceCreate, InstanceUpdate, MessageCreate

STATUS_CONNECTED = "connected"


def list_instances(db: Session, owner_id: Optional[UUID] = None, status: Optional[str] = None):
    query = db.query(WhatsAppInstance)
    if owner_id:
        query = query.filter(WhatsAppInstance.user_id == owner_id)
    if status:
        query = query.filter(WhatsAppInstance.status == status)
    return query.order_by(WhatsAppInstance.created_at.asc()).all()


def get_instance(db: Session, instance_id: UUID) -> Optional[WhatsAppInstance]:
    return db.query(WhatsAppInstance).filter(WhatsAppInstance.id == instance_id).first()


def create_instance(db: Session, user_id: UUID, payload: InstanceCreate) -> WhatsAppInstance:
    instance = WhatsAppInstance(
        user_id=user_id,
        instance_name=payload.instance_name,
        phone_number=payload.phone_number,
        is_ai_active=payload.is_ai_active,
    )
    db.add(instance)
    db.commit()
    db.refresh(instance)
    return instance


def update_instance(db: Session, instance: WhatsAppInstance, payload: InstanceUpdate) -> WhatsAppInstance:
    update_data = payload.model_dump(exclude_unset=True)
    if update_data.get("status") == STATUS_CONNECTED and instance.status != STATUS_CONNECTED:
        instance.last_connected_at = utcnow()
        # QR code só serve enquanto conecta
        update_data.setdefault("qr_code", None)

    for field, value in update_data.items():
        setattr(instance, field, value)

    db.commit()
    db.refresh(instance)
    return instance


def set_ai_active(db: Session, instance: WhatsAppInstance, is_ai_active: bool) -> WhatsAppInstance:
    instance.is_ai_active = is_ai_active
    db.commit()
    db.refresh(instance)
    return instance


def delete_instance(db: Session, instance: WhatsAppInstance) -> None:
    # SQLite não aplica ON DELETE CASCADE sem PRAGMA
    db.query(WhatsAppMessage).filter(WhatsAppMessage.instance_id == instance.id).delete(synchronize_session=False)
    db.query(WhatsAppContact).filter(WhatsAppContact.instance_id == instance.id).delete(synchronize_session=False)
    db.delete(instance)
    db.commit()


def list_contacts(
    db: Session,
    instance_id: UUID,
    search: Optional[str] = None,
    unread_only: bool = False,
):
    query = db.query(WhatsAppContact).filter(WhatsAppContact.instance_id == instance_id)
    if search:
        like_pattern = f"%{search}%"
        query = query.filter(
            or_(
                WhatsAppContact.name.ilike(like_pattern),
                WhatsAppContact.phone_number.ilike(like_pattern),
            )
        )
    if unread_only:
        query = query.filter(WhatsAppContact.unread_count > 0)
    return query.order_by(WhatsAppContact.updated_at.desc()).all()


def get_contact(db: Session, instance_id: UUID, contact_id: UUID) -> Optional[WhatsAppContact]:
    return (
        db.query(WhatsAppContact)
        .filter(WhatsAppContact.id == contact_id, WhatsAppContact.instance_id == instance_id)
        .first()
    )


def upsert_contact(db: Session, instance_id: UUID, payload: ContactUpsert) -> WhatsAppContact:
    contact = (
        db.query(WhatsAppContact)
        .filter(
            WhatsAppContact.instance_id == instance_id,
            WhatsAppContact.phone_number == payload.phone_number,
        )
        .first()
    )
    update_data = payload.model_dump(exclude_unset=True, exclude={"phone_number"})
    if contact is None:
        contact = WhatsAppContact(instance_id=instance_id, phone_number=payload.phone_number)
        db.add(contact)

    for field, value in update_data.items():
        setattr(contact, field, value)

    db.commit()
    db.refresh(contact)
    return contact


def list_messages(db: Session, contact: WhatsAppContact, limit: int = 100):
    """As ``limit`` mensagens mais recentes, em ordem cronológica."""
    latest = (
        db.query(WhatsAppMessage)
        .filter(WhatsAppMessage.contact_id == contact.id)
        .order_by(WhatsAppMessage.timestamp.desc(), WhatsAppMessage.created_at.desc())
        .limit(limit)
        .all()
    )
    latest.reverse()
    return latest


def add_message(db: Session, contact: WhatsAppContact, payload: MessageCreate) -> WhatsAppMessage:
    message = WhatsAppMessage(
        instance_id=contact.instance_id,
        contact_id=contact.id,
        content=payload.content,
        is_from_me=payload.is_from_me,
        is_ai_response=payload.is_ai_response,
        media_type=payload.media_type,
        media_url=payload.media_url,
        status="sent" if payload.is_from_me else "received",
        timestamp=utcnow(),
    )
    db.add(message)
    if not payload.is_from_me:
        contact.unread_count = (contact.unread_count or 0) + 1
    contact.updated_at = utcnow()
    db.commit()
    db.refresh(message)
    return message


def mark_read(db: Session, contact: WhatsAppContact) -> WhatsAppContact:
    contact.unread_count = 0
    db.commit()
    db.refresh(contact)
    return contact
