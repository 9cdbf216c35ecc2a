import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, JSON
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
from app.core.database import Base, utcnow

INSTANCE_STATUSES = ("disconnected", "connecting", "connected", "error")


class WhatsAppInstance(Base):
    __tablename__ = "whatsapp_instances"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    instance_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    status = Column(String, nullable=False, default="disconnected", index=True)
    is_ai_active = Column(Boolean, nullable=False, default=True)
    qr_code = Column(Text, nullable=True)
    # blob opaco da sessão do provedor, nunca interpretado aqui
    session_data = Column(JSONB().with_variant(JSON, "sqlite"), nullable=True)
    last_connected_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)


class WhatsAppContact(Base):
    __tablename__ = "whatsapp_contacts"
    __table_args__ = (
        UniqueConstraint("instance_id", "phone_number", name="uq_whatsapp_contacts_instance_phone"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    instance_id = Column(UUID(as_uuid=True), ForeignKey("whatsapp_instances.id", ondelete="CASCADE"), nullable=False, index=True)
    phone_number = Column(String, nullable=False)
    name = Column(String, nullable=True)
    profile_pic_url = Column(String, nullable=True)
    is_online = Column(Boolean, nullable=False, default=False)
    last_seen_at = Column(DateTime(timezone=True), nullable=True)
    unread_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)


class WhatsAppMessage(Base):
    __tablename__ = "whatsapp_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    instance_id = Column(UUID(as_uuid=True), ForeignKey("whatsapp_instances.id", ondelete="CASCADE"), nullable=False, index=True)
    contact_id = Column(UUID(as_uuid=True), ForeignKey("whatsapp_contacts.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=True)
    is_from_me = Column(Boolean, nullable=False, default=False)
    is_ai_response = Column(Boolean, nullable=False, default=False)
    media_type = Column(String, nullable=True)
    media_url = Column(String, nullable=True)
    status = Column(String, nullable=True, default="sent")
    timestamp = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
