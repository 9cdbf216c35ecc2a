from uuid import UUID
from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.auth_dependencies import CurrentUser, get_current_user, resolve_roles
from app.core.database import get_db, utcnow
from app.core.security import (
    PASSWORD_RESET_EXPIRE_MINUTES,
    criar_token_jwt,
    criar_token_reset_senha,
    get_password_hash,
    ler_token_reset_senha,
    reset_token_matches,
    verify_password,
)
from app.crud import system_logs
from app.models.auth import AuthUser, Profile
from app.models.client import Client
from app.schemas.auth_schema import (
    MatriculaLoginIn,
    MatriculaLoginOut,
    MatriculaLookupIn,
    MatriculaLookupOut,
    MeOut,
    PasswordChangeIn,
    PasswordResetIn,
    PasswordResetRequestIn,
    TokenOut,
)
from app.services.matricula_lookup import STATUS_ACTIVE, STATUS_NOT_FOUND, lookup_matricula
from app.services.provisioning import provision_account
from shared import FunctionError

router = APIRouter(prefix="/auth", tags=["Auth"])

DASHBOARD_ROUTES = {
    "admin": "/dashboard/admin",
    "client": "/dashboard/client",
}


def _client_ip(request: Request):
    return request.client.host if request.client else None


@router.post("/login", response_model=TokenOut)
def login(
    email: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    user = db.query(AuthUser).filter(AuthUser.email == email.strip().lower()).first()

    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=401, detail="Email ou senha inválidos")

    user.last_sign_in_at = utcnow()
    db.commit()

    token = criar_token_jwt(user_id=user.id, email=user.email)
    return {
        "access_token": token,
        "token_type": "bearer",
        "user_id": user.id,
        "roles": resolve_roles(db, user.id),
    }


@router.post("/matricula/lookup", response_model=MatriculaLookupOut)
def lookup(payload: MatriculaLookupIn, db: Session = Depends(get_db)):
    result = lookup_matricula(db, payload.loginType, payload.matricula)
    return {
        "status": result.status,
        "login_type": result.login_type,
        "matricula": result.matricula,
        "display_name": result.display_name,
        "message": result.message,
    }


@router.post("/login/matricula", response_model=MatriculaLoginOut)
def login_matricula(payload: MatriculaLoginIn, request: Request, db: Session = Depends(get_db)):
    result = lookup_matricula(db, payload.loginType, payload.matricula)
    if result.status == STATUS_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.message)
    if result.status != STATUS_ACTIVE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=result.message)

    # primeiro acesso cria a conta com a senha inicial = CPF
    try:
        provisioned = provision_account(db, payload.loginType, result.record.matricula)
    except FunctionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    user = provisioned.user
    if not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Matrícula ou senha inválidas")

    now = utcnow()
    user.last_sign_in_at = now
    if isinstance(provisioned.record, Client):
        provisioned.record.last_login_at = now
    system_logs.record(
        db,
        "auth.login",
        user_id=user.id,
        details={"login_type": payload.loginType, "matricula": provisioned.record.matricula},
        ip_address=_client_ip(request),
    )
    db.commit()

    return {
        "access_token": criar_token_jwt(user_id=user.id, email=user.email),
        "token_type": "bearer",
        "user_id": user.id,
        "roles": resolve_roles(db, user.id),
        "login_type": payload.loginType,
        "redirect_to": DASHBOARD_ROUTES[payload.loginType],
    }


@router.post("/password/reset-request", status_code=status.HTTP_202_ACCEPTED)
def request_password_reset(payload: PasswordResetRequestIn, request: Request, db: Session = Depends(get_db)):
    user = db.query(AuthUser).filter(AuthUser.email == payload.email.strip().lower()).first()

    # a resposta é a mesma exista ou não a conta
    publisher = getattr(request.app.state, "event_publisher", None)
    if user and publisher:
        publisher.publish(
            "auth.password_reset_requested",
            {
                "user_id": str(user.id),
                "email": user.email,
                "reset_token": criar_token_reset_senha(user.id, user.password_hash),
                "expires_in_minutes": PASSWORD_RESET_EXPIRE_MINUTES,
            },
        )

    return {"message": "Se o e-mail estiver cadastrado, você receberá as instruções de redefinição."}


@router.post("/password/reset")
def reset_password(payload: PasswordResetIn, db: Session = Depends(get_db)):
    token_data = ler_token_reset_senha(payload.token)
    invalid = HTTPException(status_code=400, detail="Token de redefinição inválido ou expirado")
    if not token_data:
        raise invalid

    try:
        user_id = UUID(token_data["sub"])
    except ValueError:
        raise invalid

    user = db.get(AuthUser, user_id)
    if not user or not reset_token_matches(token_data, user.password_hash):
        raise invalid

    user.password_hash = get_password_hash(payload.new_password)
    system_logs.record(db, "auth.password_reset", user_id=user.id)
    db.commit()
    return {"message": "Senha redefinida com sucesso."}


@router.post("/password/change")
def change_password(
    payload: PasswordChangeIn,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    user = current_user.user
    if not verify_password(payload.current_password, user.password_hash):
        raise HTTPException(status_code=400, detail="Senha atual incorreta")

    user.password_hash = get_password_hash(payload.new_password)
    db.commit()
    return {"message": "Senha alterada com sucesso."}


@router.get("/me", response_model=MeOut)
def get_me(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    user = current_user.user
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "roles": current_user.roles,
        "is_admin": current_user.is_admin,
        "last_sign_in_at": user.last_sign_in_at,
        "profile": db.get(Profile, user.id),
    }
