from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, get_current_user, require_admin
from app.core.database import get_db
from app.crud import reports as crud
from app.crud import system_logs
from app.schemas.report_schema import AdminReport, ClientReport, SystemLogOut

router = APIRouter(prefix="/reports", tags=["Reports"])
logs_router = APIRouter(prefix="/system-logs", tags=["Reports"])


@logs_router.get("", response_model=List[SystemLogOut])
def list_system_logs(
    action: Optional[str] = Query(default=None),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return system_logs.list_logs(db, action, limit, offset)


@router.get("/admin", response_model=AdminReport)
def admin_report(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_admin),
):
    return crud.admin_report(db)


@router.get("/client", response_model=ClientReport)
def client_report(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    return crud.client_report(db, current_user.id)
