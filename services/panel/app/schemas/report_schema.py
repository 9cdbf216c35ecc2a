from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class SystemLogOut(BaseModel):
    id: UUID
    action: str
    user_id: Optional[UUID]
    details: Optional[Any]
    ip_address: Optional[str]
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class AdminReport(BaseModel):
    total_clients: int
    active_clients: int
    connected_instances: int
    pending_requests: int
    open_tickets: int
    mrr: float
    recent_logs: List[SystemLogOut]


class ClientReport(BaseModel):
    instance_status: Optional[str]
    is_ai_active: bool
    conversations_today: int
    messages_today: int
    open_tickets: int
