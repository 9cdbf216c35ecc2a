from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: UUID
    roles: List[str]


class MatriculaLoginOut(TokenOut):
    login_type: str
    redirect_to: str


class MatriculaLookupIn(BaseModel):
    loginType: str = Field(..., pattern="^(admin|client)$", examples=["client"])
    matricula: str = Field(..., examples=["123456"])


class MatriculaLookupOut(BaseModel):
    status: str
    login_type: str
    matricula: Optional[str] = None
    display_name: Optional[str] = None
    message: str


class MatriculaLoginIn(MatriculaLookupIn):
    password: str = Field(..., min_length=1)


class PasswordResetRequestIn(BaseModel):
    email: EmailStr


class PasswordResetIn(BaseModel):
    token: str
    new_password: str = Field(..., min_length=8)


class PasswordChangeIn(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8)


class ProfileOut(BaseModel):
    id: UUID
    email: str
    full_name: Optional[str]
    cpf: Optional[str]
    phone: Optional[str]
    company_name: Optional[str]
    birth_date: Optional[date]
    matricula: Optional[str]
    plan: Optional[str]
    avatar_url: Optional[str]
    is_active: bool
    updated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    phone: Optional[str] = None
    company_name: Optional[str] = None
    birth_date: Optional[date] = None
    avatar_url: Optional[str] = None


class MeOut(BaseModel):
    id: UUID
    email: str
    full_name: Optional[str]
    roles: List[str]
    is_admin: bool
    last_sign_in_at: Optional[datetime]
    profile: Optional[ProfileOut]
