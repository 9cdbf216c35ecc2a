from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.services.matricula import CPF_LENGTH, only_digits

_CLIENT_STATUS_PATTERN = "^(active|suspended|cancelled|trial)$"


class ClientOut(BaseModel):
    id: UUID
    matricula: str
    email: str
    cpf: str
    full_name: str
    phone: Optional[str]
    company_name: Optional[str]
    segmento: Optional[str]
    birth_date: Optional[date]
    plan: Optional[str]
    status: str
    is_active: bool
    trial_days: Optional[int]
    start_date: Optional[date]
    expiration_date: Optional[date]
    data_ultima_renovacao: Optional[date]
    observations: Optional[str]
    last_login_at: Optional[datetime]
    user_id: Optional[UUID]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class ClientUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    segmento: Optional[str] = None
    plan: Optional[str] = None
    status: Optional[str] = Field(default=None, pattern=_CLIENT_STATUS_PATTERN)
    is_active: Optional[bool] = None
    trial_days: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    expiration_date: Optional[date] = None
    data_ultima_renovacao: Optional[date] = None
    observations: Optional[str] = None


class AdminCreate(BaseModel):
    full_name: str = Field(..., min_length=3)
    email: EmailStr
    cpf: str
    role: str = Field(default="admin", pattern="^(admin|super_admin)$")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("cpf")
    @classmethod
    def _normalize_cpf(cls, value: str) -> str:
        digits = only_digits(value)
        if len(digits) != CPF_LENGTH:
            raise ValueError("CPF deve conter 11 dígitos")
        return digits


class AdminOut(BaseModel):
    id: UUID
    matricula: str
    email: str
    full_name: str
    role: str
    is_active: bool
    user_id: Optional[UUID]
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
