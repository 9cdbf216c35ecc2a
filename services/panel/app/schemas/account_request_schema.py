from datetime import date, datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.services.matricula import CPF_LENGTH, only_digits


class AccountRequestCreate(BaseModel):
    full_name: str = Field(..., min_length=3, examples=["João Silva"])
    email: EmailStr = Field(..., examples=["joao.silva@exemplo.com"])
    cpf: str = Field(..., examples=["123.456.789-09"])
    phone: str = Field(..., min_length=8, examples=["(11) 98765-4321"])
    company_name: Optional[str] = Field(default=None, examples=["Loja do João"])
    segmento: Optional[str] = Field(default=None, examples=["varejo"])
    birth_date: Optional[date] = None
    message: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        return value.strip()

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


class AccountRequestCreated(BaseModel):
    id: UUID
    matricula: Optional[str]
    status: str

    model_config = ConfigDict(from_attributes=True)


class AccountRequestReject(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=1000)


class AccountRequestOut(BaseModel):
    id: UUID
    full_name: str
    email: str
    cpf: Optional[str]
    phone: Optional[str]
    company_name: Optional[str]
    segmento: Optional[str]
    birth_date: Optional[date]
    message: Optional[str]
    matricula: Optional[str]
    status: str
    rejection_reason: Optional[str]
    reviewed_at: Optional[datetime]
    reviewed_by: Optional[UUID]
    created_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
