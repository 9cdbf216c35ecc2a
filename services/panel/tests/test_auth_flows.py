from unittest.mock import MagicMock

from fastapi import status

from app.main import app
from app.models.auth import UserRole
from app.models.client import AccountRequest, Client
from app.models.system_log import SystemLog


# =====================================================================
# Login por e-mail
# =====================================================================

def test_login_with_email_returns_token_and_roles(client, make_user):
    make_user("gestor@isa.com", password="senha-forte-123", roles=("admin", "super_admin"))

    resp = client.post("/auth/login", data={"email": "GESTOR@isa.com", "password": "senha-forte-123"})
    assert resp.status_code == status.HTTP_200_OK, resp.text

    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["roles"] == ["admin", "super_admin"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == status.HTTP_200_OK
    assert me.json()["email"] == "gestor@isa.com"
    assert me.json()["is_admin"] is True
    assert me.json()["last_sign_in_at"] is not None


def test_login_with_wrong_password(client, make_user):
    make_user("gestor@isa.com", password="senha-forte-123")

    resp = client.post("/auth/login", data={"email": "gestor@isa.com", "password": "errada"})
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert resp.json()["detail"] == "Email ou senha inválidos"


def test_roles_are_read_from_database_on_each_request(client, db_session, make_user, auth_headers):
    user = make_user("cliente@loja.com", roles=("client",))
    headers = auth_headers(user)

    assert client.get("/account-requests", headers=headers).status_code == status.HTTP_403_FORBIDDEN

    db_session.query(UserRole).filter(UserRole.user_id == user.id).update({"role": "admin"})
    db_session.commit()

    assert client.get("/account-requests", headers=headers).status_code == status.HTTP_200_OK


def test_invalid_token_is_rejected(client):
    resp = client.get("/auth/me", headers={"Authorization": "Bearer invalido"})
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert resp.json()["detail"] == "Credenciais inválidas"


# =====================================================================
# Consulta de matrícula
# =====================================================================

def _lookup(client, login_type, matricula):
    return client.post("/auth/matricula/lookup", json={"loginType": login_type, "matricula": matricula})


def _add_request(db_session, status_value, matricula="555555", cpf="44455566677", reason=None):
    db_session.add(
        AccountRequest(
            full_name="Carla Dias",
            email=f"carla.{matricula}@exemplo.com",
            cpf=cpf,
            matricula=matricula,
            status=status_value,
            rejection_reason=reason,
        )
    )
    db_session.commit()


def test_lookup_active_client_by_matricula_and_cpf(client, make_client_record):
    make_client_record(matricula="123456", cpf="12345678909")

    by_matricula = _lookup(client, "client", "123456").json()
    assert by_matricula["status"] == "active"
    assert by_matricula["display_name"] == "Maria Souza"

    by_cpf = _lookup(client, "client", "123.456.789-09").json()
    assert by_cpf["status"] == "active"
    assert by_cpf["matricula"] == "123456"


def test_lookup_inactive_client(client, make_client_record):
    make_client_record(status="cancelled")

    body = _lookup(client, "client", "123456").json()
    assert body["status"] == "inactive"
    assert body["message"] == "Conta inativa. Entre em contato com o suporte."


def test_lookup_pending_and_rejected_requests(client, db_session):
    _add_request(db_session, "pending", matricula="555555")
    _add_request(db_session, "rejected", matricula="666666", cpf="77788899900", reason="Documento ilegível")

    pending = _lookup(client, "client", "555555").json()
    assert pending["status"] == "pending"
    assert pending["message"] == "Sua solicitação de cadastro ainda está em análise."

    rejected = _lookup(client, "client", "666666").json()
    assert rejected["status"] == "rejected"
    assert rejected["message"] == "Sua solicitação de cadastro foi recusada. Motivo: Documento ilegível"


def test_lookup_approved_request_without_client_is_pending(client, db_session):
    _add_request(db_session, "approved")

    assert _lookup(client, "client", "555555").json()["status"] == "pending"


def test_lookup_not_found_and_invalid_length(client, make_admin_record):
    make_admin_record(matricula="1234567")

    assert _lookup(client, "admin", "1234567").json()["status"] == "active"
    missing = _lookup(client, "admin", "7654321").json()
    assert missing["status"] == "not_found"
    assert missing["message"] == "Matrícula não encontrada."

    resp = _lookup(client, "client", "12")
    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json()["detail"] == "Matrícula inválida"

    resp = _lookup(client, "visitor", "123456")
    assert resp.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


# =====================================================================
# Login por matrícula
# =====================================================================

def _login_matricula(client, login_type, matricula, password):
    return client.post(
        "/auth/login/matricula",
        json={"loginType": login_type, "matricula": matricula, "password": password},
    )


def test_first_login_by_matricula_provisions_account(client, db_session, make_client_record):
    record = make_client_record()

    resp = _login_matricula(client, "client", "123456", "12345678909")
    assert resp.status_code == status.HTTP_200_OK, resp.text

    body = resp.json()
    assert body["roles"] == ["client"]
    assert body["login_type"] == "client"
    assert body["redirect_to"] == "/dashboard/client"

    db_session.expire_all()
    stored = db_session.get(Client, record.id)
    assert stored.user_id is not None
    assert stored.last_login_at is not None
    assert db_session.query(SystemLog).filter(SystemLog.action == "auth.login").count() == 1


def test_admin_login_by_matricula_redirects_to_admin_dashboard(client, make_admin_record):
    make_admin_record(matricula="7654321", cpf="98765432100")

    resp = _login_matricula(client, "admin", "7654321", "98765432100")
    assert resp.status_code == status.HTTP_200_OK, resp.text
    assert resp.json()["redirect_to"] == "/dashboard/admin"
    assert resp.json()["roles"] == ["admin"]


def test_login_by_matricula_wrong_password(client, make_client_record):
    make_client_record()

    resp = _login_matricula(client, "client", "123456", "00000000000")
    assert resp.status_code == status.HTTP_401_UNAUTHORIZED
    assert resp.json()["detail"] == "Matrícula ou senha inválidas"


def test_login_by_matricula_blocked_states(client, db_session, make_client_record):
    make_client_record(status="suspended")
    _add_request(db_session, "pending")

    inactive = _login_matricula(client, "client", "123456", "12345678909")
    assert inactive.status_code == status.HTTP_403_FORBIDDEN

    pending = _login_matricula(client, "client", "555555", "44455566677")
    assert pending.status_code == status.HTTP_403_FORBIDDEN
    assert pending.json()["detail"] == "Sua solicitação de cadastro ainda está em análise."

    missing = _login_matricula(client, "client", "999999", "123")
    assert missing.status_code == status.HTTP_404_NOT_FOUND


# =====================================================================
# Senha
# =====================================================================

def test_password_reset_flow(client, make_user, monkeypatch):
    publisher = MagicMock()
    monkeypatch.setattr(app.state, "event_publisher", publisher)
    make_user("cliente@loja.com", password="senha-antiga-1")

    resp = client.post("/auth/password/reset-request", json={"email": "cliente@loja.com"})
    assert resp.status_code == status.HTTP_202_ACCEPTED

    event_type, payload = publisher.publish.call_args.args
    assert event_type == "auth.password_reset_requested"
    token = payload["reset_token"]

    resp = client.post("/auth/password/reset", json={"token": token, "new_password": "senha-nova-123"})
    assert resp.status_code == status.HTTP_200_OK

    login = client.post("/auth/login", data={"email": "cliente@loja.com", "password": "senha-nova-123"})
    assert login.status_code == status.HTTP_200_OK

    # o token deixa de valer depois de usado
    reused = client.post("/auth/password/reset", json={"token": token, "new_password": "outra-senha-456"})
    assert reused.status_code == status.HTTP_400_BAD_REQUEST
    assert reused.json()["detail"] == "Token de redefinição inválido ou expirado"


def test_password_reset_request_for_unknown_email_is_silent(client, monkeypatch):
    publisher = MagicMock()
    monkeypatch.setattr(app.state, "event_publisher", publisher)

    resp = client.post("/auth/password/reset-request", json={"email": "ninguem@exemplo.com"})
    assert resp.status_code == status.HTTP_202_ACCEPTED
    publisher.publish.assert_not_called()


def test_password_reset_rejects_access_token(client, client_user, auth_headers):
    access_token = auth_headers(client_user)["Authorization"].split(" ", 1)[1]

    resp = client.post("/auth/password/reset", json={"token": access_token, "new_password": "senha-nova-123"})
    assert resp.status_code == status.HTTP_400_BAD_REQUEST


def test_change_password(client, client_headers):
    wrong = client.post(
        "/auth/password/change",
        json={"current_password": "nao-e-essa", "new_password": "senha-nova-123"},
        headers=client_headers,
    )
    assert wrong.status_code == status.HTTP_400_BAD_REQUEST
    assert wrong.json()["detail"] == "Senha atual incorreta"

    ok = client.post(
        "/auth/password/change",
        json={"current_password": "senha-forte-123", "new_password": "senha-nova-123"},
        headers=client_headers,
    )
    assert ok.status_code == status.HTTP_200_OK

    login = client.post("/auth/login", data={"email": "cliente@loja.com", "password": "senha-nova-123"})
    assert login.status_code == status.HTTP_200_OK


def test_me_includes_profile(client, client_headers):
    body = client.get("/auth/me", headers=client_headers).json()
    assert body["roles"] == ["client"]
    assert body["is_admin"] is False
    assert body["profile"]["plan"] == "isa-2.5"
