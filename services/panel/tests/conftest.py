import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

SECRET_KEY = os.getenv("SECRET_KEY", "ci-test-secret-with-at-least-32-characters")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS512")

SERVICE_DIR = Path(__file__).resolve().parents[1]
ROOT_DIR = SERVICE_DIR.parent.parent

service_path = str(SERVICE_DIR)
shared_path = str(ROOT_DIR / "services")
for path in (service_path, shared_path):
    if path in sys.path:
        sys.path.remove(path)
    sys.path.insert(0, path)

for module_name in list(sys.modules):
    if module_name == "app" or module_name.startswith("app."):
        sys.modules.pop(module_name)

# Garante que o app e os testes usem o mesmo segredo/algoritmo
os.environ.setdefault("SECRET_KEY", SECRET_KEY)
os.environ.setdefault("JWT_ALGORITHM", ALGORITHM)
os.environ["BCRYPT_ROUNDS"] = "4"

os.environ.setdefault("PANEL_DATABASE_URL", f"sqlite:///{SERVICE_DIR / 'test_panel.db'}")
os.environ["REDIS_URL"] = ""  # sem publisher nem cache nos testes
os.environ.pop("ASSISTANT_SERVICE_URL", None)

from app.main import app  # noqa: E402
from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.core.security import criar_token_jwt, get_password_hash  # noqa: E402
from app.models.auth import AuthUser, Profile, UserRole  # noqa: E402
from app.models.client import Admin, Client  # noqa: E402


@pytest.fixture(autouse=True)
def prepare_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    """
    Cria uma conta de autenticação com os papéis informados
    (e opcionalmente um perfil com plano).
    """

    def _make_user(email, password="senha-forte-123", roles=("client",), full_name="Usuário Teste", plan=None):
        user = AuthUser(
            email=email,
            password_hash=get_password_hash(password),
            full_name=full_name,
            user_metadata={"full_name": full_name},
        )
        db_session.add(user)
        db_session.flush()
        for role in roles:
            db_session.add(UserRole(user_id=user.id, role=role))
        if plan is not None:
            db_session.add(Profile(id=user.id, email=email, full_name=full_name, plan=plan))
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = criar_token_jwt(user_id=user.id, email=user.email)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@isa.com", roles=("admin",), full_name="Admin ISA")


@pytest.fixture
def admin_headers(admin_user, auth_headers):
    return auth_headers(admin_user)


@pytest.fixture
def client_user(make_user):
    return make_user("cliente@loja.com", roles=("client",), full_name="Cliente Loja", plan="isa-2.5")


@pytest.fixture
def client_headers(client_user, auth_headers):
    return auth_headers(client_user)


@pytest.fixture
def make_client_record(db_session):
    def _make_client_record(
        matricula="123456",
        email="maria@loja.com",
        cpf="12345678909",
        full_name="Maria Souza",
        status="active",
        is_active=True,
        plan="isa-2.5",
    ):
        record = Client(
            matricula=matricula,
            email=email,
            cpf=cpf,
            full_name=full_name,
            phone="11987654321",
            company_name="Loja da Maria",
            plan=plan,
            status=status,
            is_active=is_active,
        )
        db_session.add(record)
        db_session.commit()
        db_session.refresh(record)
        return record

    return _make_client_record


@pytest.fixture
def make_admin_record(db_session):
    def _make_admin_record(
        matricula="1234567",
        email="gestor@isa.com",
        cpf="98765432100",
        full_name="Gestor ISA",
        role="admin",
        is_active=True,
    ):
        record = Admin(
            matricula=matricula,
            email=email,
            cpf=cpf,
            full_name=full_name,
            role=role,
            is_active=is_active,
        )
        db_session.add(record)
        db_session.commit()
        db_session.refresh(record)
        return record

    return _make_admin_record
