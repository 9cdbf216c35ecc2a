from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, get_current_user, require_admin
from app.core.database import get_db
from app.crud import announcements as crud
from app.models.auth import Profile
from app.schemas.announcement_schema import AnnouncementCreate, AnnouncementOut, UnreadCountOut

router = APIRouter(prefix="/announcements", tags=["Announcements"])


def _user_plan(db: Session, current_user: CurrentUser):
    profile = db.get(Profile, current_user.id)
    return profile.plan if profile else None


@router.post("", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
def create_announcement(
    payload: AnnouncementCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return crud.create_announcement(db, payload, created_by=current_user.id)


@router.get("", response_model=List[AnnouncementOut])
def list_announcements(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    if current_user.is_admin:
        announcements = crud.list_all(db)
    else:
        announcements = crud.list_for_user(db, current_user.id, _user_plan(db, current_user))

    already_read = crud.read_ids(db, current_user.id)
    result = []
    for announcement in announcements:
        item = AnnouncementOut.model_validate(announcement)
        item.is_read = announcement.id in already_read
        result.append(item)
    return result


@router.get("/unread-count", response_model=UnreadCountOut)
def get_unread_count(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return {"unread": crud.unread_count(db, current_user.id, _user_plan(db, current_user))}


@router.post("/{announcement_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_announcement_read(
    announcement_id: UUID,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    announcement = crud.get_announcement(db, announcement_id)
    if not announcement:
        raise HTTPException(status_code=404, detail="Aviso não encontrado")
    if not current_user.is_admin and not crud.is_targeted(announcement, current_user.id, _user_plan(db, current_user)):
        raise HTTPException(status_code=404, detail="Aviso não encontrado")

    crud.mark_read(db, announcement, current_user.id)
    return None
