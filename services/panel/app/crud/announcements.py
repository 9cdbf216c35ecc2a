from typing import List, Optional, Set
from uuid import UUID
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.models.announcement import Announcement, AnnouncementRead
from app.schemas.announcement_schema import AnnouncementCreate


def create_announcement(db: Session, payload: AnnouncementCreate, created_by: UUID) -> Announcement:
    announcement = Announcement(
        title=payload.title,
        content=payload.content,
        priority=payload.priority,
        created_by=created_by,
        target_all=payload.target_all,
        target_plans=list(payload.target_plans),
        target_users=[str(user_id) for user_id in payload.target_users],
        attachment_url=payload.attachment_url,
        scheduled_at=payload.scheduled_at,
        sent_at=None if payload.scheduled_at else utcnow(),
    )
    db.add(announcement)
    db.commit()
    db.refresh(announcement)
    return announcement


def list_all(db: Session) -> List[Announcement]:
    return db.query(Announcement).order_by(Announcement.created_at.desc()).all()


def _is_published(announcement: Announcement, now) -> bool:
    scheduled_at = announcement.scheduled_at
    if scheduled_at is None:
        return True
    # SQLite devolve datetimes sem fuso
    if scheduled_at.tzinfo is None:
        scheduled_at = scheduled_at.replace(tzinfo=now.tzinfo)
    return scheduled_at <= now


def is_targeted(announcement: Announcement, user_id: UUID, plan: Optional[str]) -> bool:
    if announcement.target_all:
        return True
    if str(user_id) in {str(target) for target in announcement.target_users or []}:
        return True
    return bool(plan) and plan in (announcement.target_plans or [])


def list_for_user(db: Session, user_id: UUID, plan: Optional[str]) -> List[Announcement]:
    """Avisos já publicados que alcançam o usuário (todos, por plano ou nominal)."""
    now = utcnow()
    return [
        announcement
        for announcement in list_all(db)
        if _is_published(announcement, now) and is_targeted(announcement, user_id, plan)
    ]


def get_announcement(db: Session, announcement_id: UUID) -> Optional[Announcement]:
    return db.query(Announcement).filter(Announcement.id == announcement_id).first()


def read_ids(db: Session, user_id: UUID) -> Set[UUID]:
    rows = db.query(AnnouncementRead.announcement_id).filter(AnnouncementRead.user_id == user_id).all()
    return {announcement_id for (announcement_id,) in rows}


def mark_read(db: Session, announcement: Announcement, user_id: UUID) -> AnnouncementRead:
    existing = (
        db.query(AnnouncementRead)
        .filter(
            AnnouncementRead.announcement_id == announcement.id,
            AnnouncementRead.user_id == user_id,
        )
        .first()
    )
    if existing:
        return existing

    read = AnnouncementRead(announcement_id=announcement.id, user_id=user_id)
    db.add(read)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return (
            db.query(AnnouncementRead)
            .filter(
                AnnouncementRead.announcement_id == announcement.id,
                AnnouncementRead.user_id == user_id,
            )
            .first()
        )
    db.refresh(read)
    return read


def unread_count(db: Session, user_id: UUID, plan: Optional[str]) -> int:
    already_read = read_ids(db, user_id)
    return sum(1 for announcement in list_for_user(db, user_id, plan) if announcement.id not in already_read)
