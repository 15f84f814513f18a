import os

# Must be set before the application settings are first imported
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("MULTI_TENANT_MODE", "folder_name")
os.environ["DB_LOG_ENABLED"] = "false"

from typing import Callable, Generator
import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient
from faker import Faker

from main import app
from models.base import Base
from models import Account, AccountRole, Membership, Site
from db.session import get_db
from core.auth import get_auth_provider
from core.settings import Settings

fake = Faker()

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={
        "check_same_thread": False,
    },
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a test database session."""
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database session override."""
    def override_get_db():
        try:
            yield db_session
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def mock_settings():
    """Settings with test values for code that takes settings explicitly."""
    return Settings(
        DATABASE_NAME="test_db",
        DATABASE_USER="test_user",
        DATABASE_PASSWORD="test_pass",
        DATABASE_HOST="localhost",
        DATABASE_PORT=5432,
        JWT_SECRET_KEY="test-secret-key",
        MULTI_TENANT_MODE="folder_name",
        DB_LOG_ENABLED=False,
    )


@pytest.fixture
def host_name_mode(monkeypatch):
    """Run the test with sites told apart by host name."""
    from core.settings import settings
    monkeypatch.setattr(settings, "MULTI_TENANT_MODE", "host_name")


@pytest.fixture
def make_site(db_session: Session) -> Callable[..., Site]:
    """Factory for sites stored in the test database."""
    counter = {"value": 0}

    def _make_site(**kwargs) -> Site:
        counter["value"] += 1
        kwargs.setdefault("alias_id", f"t{counter['value']}")
        kwargs.setdefault("site_name", fake.company())
        site = Site(**kwargs)
        db_session.add(site)
        db_session.commit()
        db_session.refresh(site)
        return site

    return _make_site


@pytest.fixture
def primary_site(make_site) -> Site:
    """The server admin site, which has no folder name."""
    return make_site(alias_id="s1", site_name="Server Admin", is_server_admin_site=True)


@pytest.fixture
def child_site(make_site, primary_site: Site) -> Site:
    return make_site(alias_id="s2", site_name=fake.company(), folder_name="child")


def _make_admin(db_session: Session, site: Site) -> Account:
    account = Account(
        email=fake.unique.email(),
        login_name=fake.user_name(),
        display_name=fake.name(),
        password_hash="not-a-real-hash",
        role=AccountRole.ADMIN,
        active=True,
    )
    db_session.add(account)
    db_session.add(Membership(account=account, site_id=site.id))
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture
def server_admin(db_session: Session, primary_site: Site) -> Account:
    """Administrator of the server admin site."""
    return _make_admin(db_session, primary_site)


@pytest.fixture
def child_site_admin(db_session: Session, child_site: Site) -> Account:
    """Administrator of the child site only."""
    return _make_admin(db_session, child_site)


def bearer_headers(account: Account, **extra) -> dict:
    token = get_auth_provider().create_access_token(str(account.id), account.email)
    return {"Authorization": f"Bearer {token}", **extra}


@pytest.fixture
def server_admin_headers(server_admin: Account) -> dict:
    return bearer_headers(server_admin)


@pytest.fixture
def child_admin_headers(child_site_admin: Account, child_site: Site) -> dict:
    """Requests addressed to the child site by its folder, as its admin."""
    return bearer_headers(child_site_admin, **{"X-Site-Folder": child_site.folder_name})


@pytest.fixture
def auth_headers_for() -> Callable[..., dict]:
    """Build bearer headers for any account, plus extra headers."""
    return bearer_headers
