"""Funções chamadas direto pelo navegador, com contrato ``{ok...}`` / ``{error}``."""

import logging

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.function_schema import ProvisionUserIn, ProvisionUserOut
from app.services.provisioning import provision_account
from shared import FunctionError, edge_json_response, edge_preflight_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["Functions"])


@router.options("/provision-user", include_in_schema=False)
def provision_user_preflight():
    return edge_preflight_response()


@router.post("/provision-user", response_model=ProvisionUserOut)
async def provision_user(request: Request, db: Session = Depends(get_db)):
    try:
        body = await request.json()
        payload = ProvisionUserIn.model_validate(body)
    except (ValueError, ValidationError):
        raise FunctionError(400, "Invalid JSON body")

    result = provision_account(db, payload.loginType, payload.matricula)

    publisher = getattr(request.app.state, "event_publisher", None)
    if result.created and publisher:
        publisher.publish(
            "user.provisioned",
            {
                "user_id": str(result.user.id),
                "email": result.email,
                "login_type": payload.loginType,
                "matricula": result.record.matricula,
            },
        )

    return edge_json_response(ProvisionUserOut(email=result.email).model_dump())
