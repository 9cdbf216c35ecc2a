import os
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["bcrypt", "sha256_crypt"],
    deprecated="auto",
    bcrypt__rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
)

# lidas tanto em CI quanto em "prod"
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS512")
ACCESS_TOKEN_EXPIRE_HOURS = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "24"))
PASSWORD_RESET_EXPIRE_MINUTES = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "60"))

_RESET_PURPOSE = "password_reset"


def criar_token_jwt(user_id: UUID, email: str) -> str:
    # papéis não vão no token: são resolvidos em user_roles a cada requisição
    expire = datetime.now(timezone.utc) + timedelta(hours=ACCESS_TOKEN_EXPIRE_HOURS)
    to_encode = {
        "exp": expire,
        "sub": str(user_id),
        "email": email,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


def _password_fingerprint(password_hash: Optional[str]) -> str:
    return (password_hash or "")[-12:]


def criar_token_reset_senha(user_id: UUID, password_hash: Optional[str]) -> str:
    """Token de uso único: deixa de valer assim que a senha muda."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=PASSWORD_RESET_EXPIRE_MINUTES)
    to_encode = {
        "exp": expire,
        "sub": str(user_id),
        "purpose": _RESET_PURPOSE,
        "pwd": _password_fingerprint(password_hash),
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=JWT_ALGORITHM)


def ler_token_reset_senha(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        return None
    if payload.get("purpose") != _RESET_PURPOSE or not payload.get("sub"):
        return None
    return payload


def reset_token_matches(payload: dict, password_hash: Optional[str]) -> bool:
    return payload.get("pwd") == _password_fingerprint(password_hash)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)
