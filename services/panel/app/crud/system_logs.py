from typing import Any, Dict, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from app.models.system_log import SystemLog


def record(
    db: Session,
    action: str,
    *,
    user_id: Optional[UUID] = None,
    details: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> SystemLog:
    # entra no commit de quem chamou
    entry = SystemLog(action=action, user_id=user_id, details=details or {}, ip_address=ip_address)
    db.add(entry)
    return entry


def list_logs(db: Session, action: Optional[str] = None, limit: int = 50, offset: int = 0):
    query = db.query(SystemLog)
    if action:
        query = query.filter(SystemLog.action.ilike(f"%{action}%"))
    return query.order_by(SystemLog.created_at.desc()).offset(offset).limit(limit).all()


def recent_logs(db: Session, limit: int = 5):
    return list_logs(db, limit=limit)
