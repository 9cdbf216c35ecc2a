from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, model_validator


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=3)
    content: str = Field(..., min_length=1)
    priority: str = Field(default="normal", pattern="^(normal|important|urgent)$")
    target_all: bool = True
    target_plans: List[str] = Field(default_factory=list)
    target_users: List[UUID] = Field(default_factory=list)
    attachment_url: Optional[str] = None
    scheduled_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _require_audience(self):
        if not self.target_all and not self.target_plans and not self.target_users:
            raise ValueError("Informe o público do aviso: todos, planos ou usuários")
        return self


class AnnouncementOut(BaseModel):
    id: UUID
    title: str
    content: str
    priority: str
    created_by: UUID
    target_all: bool
    target_plans: List[str]
    target_users: List[UUID]
    attachment_url: Optional[str]
    scheduled_at: Optional[datetime]
    sent_at: Optional[datetime]
    created_at: Optional[datetime]
    is_read: bool = False

    model_config = ConfigDict(from_attributes=True)


class UnreadCountOut(BaseModel):
    unread: int
