import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text, UniqueConstraint, JSON
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
from app.core.database import Base, utcnow

ANNOUNCEMENT_PRIORITIES = ("normal", "important", "urgent")


class Announcement(Base):
    __tablename__ = "announcements"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default="normal")
    created_by = Column(UUID(as_uuid=True), nullable=False)
    target_all = Column(Boolean, nullable=False, default=True)
    target_plans = Column(JSONB().with_variant(JSON, "sqlite"), nullable=False, default=list)
    target_users = Column(JSONB().with_variant(JSON, "sqlite"), nullable=False, default=list)
    attachment_url = Column(String, nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), index=True)


class AnnouncementRead(Base):
    __tablename__ = "announcement_reads"
    __table_args__ = (
        UniqueConstraint("announcement_id", "user_id", name="uq_announcement_reads_announcement_user"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    announcement_id = Column(UUID(as_uuid=True), ForeignKey("announcements.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    read_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
