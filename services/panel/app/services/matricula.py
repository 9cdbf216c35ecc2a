import re
import secrets
from typing import Optional

from sqlalchemy.orm import Session

from app.models.client import AccountRequest, Admin, Client

_NON_DIGITS = re.compile(r"\D")
_MAX_ATTEMPTS = 50

CPF_LENGTH = 11


def only_digits(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", value or "")


def _matricula_in_use(db: Session, matricula: str) -> bool:
    for model in (AccountRequest, Client, Admin):
        if db.query(model.id).filter(model.matricula == matricula).first():
            return True
    return False


def generate_matricula(db: Session, length: int) -> str:
    """Sorteia uma matrícula numérica sem zero à esquerda e ainda não usada."""
    lower = 10 ** (length - 1)
    span = 9 * lower
    for _ in range(_MAX_ATTEMPTS):
        candidate = str(lower + secrets.randbelow(span))
        if not _matricula_in_use(db, candidate):
            return candidate
    raise RuntimeError(f"Não foi possível gerar matrícula de {length} dígitos")
