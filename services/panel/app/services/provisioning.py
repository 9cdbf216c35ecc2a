"""Provisionamento de contas de acesso a partir de clientes e administradores.

Um cliente aprovado (ou um administrador cadastrado) só tem matrícula; a conta
de autenticação é criada no primeiro acesso, com a senha inicial igual aos
dígitos do CPF. Chamadas repetidas não alteram uma conta já existente.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import utcnow
from app.core.security import get_password_hash
from app.models.auth import ROLE_CLIENT, AuthUser, Profile, UserRole
from app.models.client import ADMIN_MATRICULA_LENGTH, CLIENT_MATRICULA_LENGTH, Admin, Client
from app.services.matricula import only_digits
from shared import FunctionError

logger = logging.getLogger(__name__)

LOGIN_TYPE_ADMIN = "admin"
LOGIN_TYPE_CLIENT = "client"
LOGIN_TYPES = (LOGIN_TYPE_ADMIN, LOGIN_TYPE_CLIENT)

MATRICULA_LENGTHS = {
    LOGIN_TYPE_ADMIN: ADMIN_MATRICULA_LENGTH,
    LOGIN_TYPE_CLIENT: CLIENT_MATRICULA_LENGTH,
}

Record = Union[Admin, Client]


@dataclass
class ProvisionResult:
    user: AuthUser
    record: Record
    created: bool

    @property
    def email(self) -> str:
        # como está no cadastro; a conta usa a forma minúscula
        return self.record.email


def normalize_login_request(login_type, raw_matricula) -> str:
    """Valida tipo de login e tamanho da matrícula, devolvendo só os dígitos."""
    matricula = only_digits(str(raw_matricula) if raw_matricula is not None else "")
    if login_type not in LOGIN_TYPES:
        raise FunctionError(400, "Invalid loginType")
    if len(matricula) != MATRICULA_LENGTHS[login_type]:
        raise FunctionError(400, "Invalid matricula")
    return matricula


def find_record(db: Session, login_type: str, matricula: str) -> Optional[Record]:
    model = Admin if login_type == LOGIN_TYPE_ADMIN else Client
    return db.query(model).filter(model.matricula == matricula).first()


def _ensure_role(db: Session, user_id, role: str) -> None:
    exists = (
        db.query(UserRole.id)
        .filter(UserRole.user_id == user_id, UserRole.role == role)
        .first()
    )
    if not exists:
        db.add(UserRole(user_id=user_id, role=role))


def _ensure_profile(db: Session, user: AuthUser, record: Record) -> None:
    profile = db.get(Profile, user.id)
    if profile is None:
        profile = Profile(id=user.id, email=user.email)
        db.add(profile)
    profile.full_name = profile.full_name or record.full_name
    profile.cpf = profile.cpf or record.cpf
    profile.matricula = record.matricula
    if isinstance(record, Client):
        profile.phone = profile.phone or record.phone
        profile.company_name = profile.company_name or record.company_name
        profile.birth_date = profile.birth_date or record.birth_date
        profile.plan = record.plan
        profile.is_active = record.can_sign_in
    else:
        profile.is_active = bool(record.is_active)


def provision_account(db: Session, login_type, raw_matricula) -> ProvisionResult:
    matricula = normalize_login_request(login_type, raw_matricula)

    record = find_record(db, login_type, matricula)
    if record is None:
        raise FunctionError(404, "Admin not found" if login_type == LOGIN_TYPE_ADMIN else "Client not found")
    if not record.can_sign_in:
        raise FunctionError(403, "Admin inactive" if login_type == LOGIN_TYPE_ADMIN else "Client inactive")

    email = (record.email or "").strip().lower()
    password = only_digits(record.cpf)
    if not email or not password:
        raise FunctionError(400, "Missing email/cpf")

    try:
        user = db.query(AuthUser).filter(AuthUser.email == email).first()
        created = user is None
        if created:
            user = AuthUser(
                email=email,
                password_hash=get_password_hash(password),
                full_name=record.full_name,
                user_metadata={"full_name": record.full_name},
                email_confirmed_at=utcnow(),
            )
            db.add(user)
            db.flush()

        role = record.role if login_type == LOGIN_TYPE_ADMIN else ROLE_CLIENT
        _ensure_role(db, user.id, role)
        _ensure_profile(db, user, record)
        record.user_id = user.id
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to provision %s %s", login_type, matricula)
        raise FunctionError(500, "Failed to provision user") from exc

    db.refresh(user)
    if created:
        logger.info("Provisioned %s account for matricula %s", login_type, matricula)
    return ProvisionResult(user=user, record=record, created=created)
