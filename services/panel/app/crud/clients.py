from typing import Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.auth import AuthUser, Profile
from app.models.client import ADMIN_MATRICULA_LENGTH, Admin, Client
from app.schemas.auth_schema import ProfileUpdate
from app.schemas.client_schema import AdminCreate, ClientUpdate
from app.services.matricula import generate_matricula
from . import system_logs


def list_clients(
    db: Session,
    status: Optional[str] = None,
    plan: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
):
    query = db.query(Client)
    if status:
        query = query.filter(Client.status == status)
    if plan:
        query = query.filter(Client.plan == plan)
    if is_active is not None:
        query = query.filter(Client.is_active == is_active)
    if search:
        like_pattern = f"%{search}%"
        query = query.filter(
            or_(
                Client.full_name.ilike(like_pattern),
                Client.email.ilike(like_pattern),
                Client.matricula.ilike(like_pattern),
                Client.company_name.ilike(like_pattern),
            )
        )
    return query.order_by(Client.created_at.desc()).all()


def get_client(db: Session, client_id: UUID) -> Optional[Client]:
    return db.query(Client).filter(Client.id == client_id).first()


def update_client(db: Session, client: Client, payload: ClientUpdate, actor_id: UUID) -> Client:
    update_data = payload.model_dump(exclude_unset=True)
    logged_values = payload.model_dump(mode="json", exclude_unset=True)
    if "email" in update_data and update_data["email"]:
        update_data["email"] = update_data["email"].strip().lower()

    changes = {}
    for field, value in update_data.items():
        if getattr(client, field) != value:
            changes[field] = logged_values[field]
        setattr(client, field, value)

    # o perfil espelha plano e situação do cliente
    if client.user_id:
        profile = db.get(Profile, client.user_id)
        if profile is not None:
            profile.plan = client.plan
            profile.is_active = client.can_sign_in

    if changes:
        system_logs.record(
            db,
            "client.updated",
            user_id=actor_id,
            details={"client_id": str(client.id), "changes": changes},
        )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(client)
    return client


def list_admins(db: Session):
    return db.query(Admin).order_by(Admin.created_at.desc()).all()


def create_admin(db: Session, payload: AdminCreate, actor_id: UUID) -> Admin:
    admin = Admin(
        matricula=generate_matricula(db, ADMIN_MATRICULA_LENGTH),
        email=payload.email,
        cpf=payload.cpf,
        full_name=payload.full_name,
        role=payload.role,
    )
    db.add(admin)
    db.flush()
    system_logs.record(
        db,
        "admin.created",
        user_id=actor_id,
        details={"admin_id": str(admin.id), "matricula": admin.matricula, "role": admin.role},
    )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    db.refresh(admin)
    return admin


def get_or_create_profile(db: Session, user: AuthUser) -> Profile:
    profile = db.get(Profile, user.id)
    if profile is None:
        profile = Profile(id=user.id, email=user.email, full_name=user.full_name)
        db.add(profile)
        db.commit()
        db.refresh(profile)
    return profile


def update_profile(db: Session, user: AuthUser, payload: ProfileUpdate) -> Profile:
    profile = get_or_create_profile(db, user)
    update_data = payload.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(profile, field, value)
    if "full_name" in update_data:
        user.full_name = update_data["full_name"]
    db.commit()
    db.refresh(profile)
    return profile
