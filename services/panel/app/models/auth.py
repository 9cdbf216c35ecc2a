import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, String, UniqueConstraint, JSON
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base, utcnow

ROLE_SUPER_ADMIN = "super_admin"
ROLE_ADMIN = "admin"
ROLE_CLIENT = "client"
APP_ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN, ROLE_CLIENT)
ADMIN_ROLES = (ROLE_SUPER_ADMIN, ROLE_ADMIN)


class AuthUser(Base):
    """Conta de autenticação (email + senha), independente do cadastro de negócio."""

    __tablename__ = "auth_users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=True)
    full_name = Column(String, nullable=True)
    user_metadata = Column(JSONB().with_variant(JSON, "sqlite"), nullable=False, default=dict)
    email_confirmed_at = Column(DateTime(timezone=True), nullable=True)
    last_sign_in_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan", lazy="selectin")


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("auth_users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=False, default=ROLE_CLIENT)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    user = relationship("AuthUser", back_populates="roles")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), ForeignKey("auth_users.id", ondelete="CASCADE"), primary_key=True)
    email = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    cpf = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    company_name = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    matricula = Column(String, nullable=True, index=True)
    plan = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)
