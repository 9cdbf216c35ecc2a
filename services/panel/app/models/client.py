import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from app.core.database import Base, utcnow

REQUEST_PENDING = "pending"
REQUEST_APPROVED = "approved"
REQUEST_REJECTED = "rejected"
REQUEST_STATUSES = (REQUEST_PENDING, REQUEST_APPROVED, REQUEST_REJECTED)

CLIENT_ACTIVE = "active"
CLIENT_STATUSES = ("active", "suspended", "cancelled", "trial")

CLIENT_MATRICULA_LENGTH = 6
ADMIN_MATRICULA_LENGTH = 7


class AccountRequest(Base):
    __tablename__ = "account_requests"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False, index=True)
    cpf = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    segmento = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    message = Column(Text, nullable=True)
    matricula = Column(String, nullable=True, unique=True)
    status = Column(String, nullable=False, default=REQUEST_PENDING, index=True)
    rejection_reason = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by = Column(UUID(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())


class Client(Base):
    __tablename__ = "clients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    matricula = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=False, index=True)
    cpf = Column(String, nullable=False, index=True)
    full_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    segmento = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    plan = Column(String, nullable=True)
    status = Column(String, nullable=False, default=CLIENT_ACTIVE)
    is_active = Column(Boolean, nullable=False, default=True)
    trial_days = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=True)
    expiration_date = Column(Date, nullable=True)
    data_ultima_renovacao = Column(Date, nullable=True)
    observations = Column(Text, nullable=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    user_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    @property
    def can_sign_in(self) -> bool:
        return bool(self.is_active) and self.status == CLIENT_ACTIVE


class Admin(Base):
    __tablename__ = "admins"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    matricula = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=False, unique=True)
    cpf = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="admin")
    is_active = Column(Boolean, nullable=False, default=True)
    user_id = Column(UUID(as_uuid=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    @property
    def can_sign_in(self) -> bool:
        return bool(self.is_active)
