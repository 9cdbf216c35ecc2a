from datetime import datetime
from typing import Any, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

_INSTANCE_STATUS_PATTERN = "^(disconnected|connecting|connected|error)$"


class InstanceCreate(BaseModel):
    instance_name: str = Field(..., min_length=1, examples=["Atendimento Loja"])
    phone_number: Optional[str] = Field(default=None, examples=["5511987654321"])
    is_ai_active: bool = True
    # só administradores podem criar instâncias para outro cliente
    user_id: Optional[UUID] = None


class InstanceUpdate(BaseModel):
    instance_name: Optional[str] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    status: Optional[str] = Field(default=None, pattern=_INSTANCE_STATUS_PATTERN)
    is_ai_active: Optional[bool] = None
    qr_code: Optional[str] = None
    session_data: Optional[Any] = None

    @field_validator("instance_name", "status", "is_ai_active")
    @classmethod
    def campos_obrigatorios(cls, value):
        if value is None:
            raise ValueError("não pode ser nulo")
        return value


class InstanceAIToggle(BaseModel):
    is_ai_active: bool


class InstanceOut(BaseModel):
    id: UUID
    user_id: UUID
    instance_name: str
    phone_number: Optional[str]
    status: str
    is_ai_active: bool
    qr_code: Optional[str]
    last_connected_at: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class ContactUpsert(BaseModel):
    phone_number: str = Field(..., min_length=8)
    name: Optional[str] = None
    profile_pic_url: Optional[str] = None
    is_online: Optional[bool] = None
    last_seen_at: Optional[datetime] = None


class ContactOut(BaseModel):
    id: UUID
    instance_id: UUID
    phone_number: str
    name: Optional[str]
    profile_pic_url: Optional[str]
    is_online: bool
    last_seen_at: Optional[datetime]
    unread_count: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class MessageCreate(BaseModel):
    content: Optional[str] = None
    is_from_me: bool = True
    is_ai_response: bool = False
    media_type: Optional[str] = None
    media_url: Optional[str] = None


class MessageOut(BaseModel):
    id: UUID
    instance_id: UUID
    contact_id: UUID
    content: Optional[str]
    is_from_me: bool
    is_ai_response: bool
    media_type: Optional[str]
    media_url: Optional[str]
    status: Optional[str]
    timestamp: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
