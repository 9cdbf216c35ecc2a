from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from app.core.security import SECRET_KEY, JWT_ALGORITHM
from app.core.database import get_db
from app.models.auth import ADMIN_ROLES, ROLE_SUPER_ADMIN, AuthUser, UserRole

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


class TokenPayload(BaseModel):
    sub: UUID
    email: Optional[str] = None


@dataclass
class CurrentUser:
    user: AuthUser
    roles: List[str] = field(default_factory=list)

    @property
    def id(self) -> UUID:
        return self.user.id

    @property
    def email(self) -> str:
        return self.user.email

    @property
    def is_admin(self) -> bool:
        return any(role in ADMIN_ROLES for role in self.roles)

    @property
    def is_super_admin(self) -> bool:
        return ROLE_SUPER_ADMIN in self.roles

    def owns(self, user_id: Optional[UUID]) -> bool:
        return user_id is not None and str(user_id) == str(self.user.id)


def resolve_roles(db: Session, user_id: UUID) -> List[str]:
    rows = db.query(UserRole.role).filter(UserRole.user_id == user_id).all()
    return sorted(role for (role,) in rows)


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """
    Valida o JWT e carrega o usuário e seus papéis do banco.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciais inválidas",
        )

    user = db.query(AuthUser).filter(AuthUser.id == token_data.sub).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário não encontrado",
        )

    return CurrentUser(user=user, roles=resolve_roles(db, user.id))


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas administradores podem executar esta ação.",
        )
    return current_user


def require_super_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not current_user.is_super_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Apenas super administradores podem executar esta ação.",
        )
    return current_user
