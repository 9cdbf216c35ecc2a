from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ProvisionUserIn(BaseModel):
    """Corpo aceito como veio; a validação gera as mensagens do contrato."""

    loginType: Optional[Any] = None
    matricula: Optional[Any] = None

    model_config = ConfigDict(extra="ignore")


class ProvisionUserOut(BaseModel):
    ok: bool = True
    email: str
