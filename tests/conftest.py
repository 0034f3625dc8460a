"""Pytest configuration and fixtures for orgchart.

Tests run against a throwaway SQLite file (sqlite+aiosqlite) created per test,
so no external database is needed. Environment is set before app.main is
imported because create_app() reads settings at import time.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_TEST_DIR = Path(tempfile.mkdtemp(prefix="orgchart-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["STORAGE_ROOT"] = str(_TEST_DIR / "storage")
os.environ["MAIL_BACKEND"] = "log"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_AUTO_CREATE"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.api.v1.dependencies import get_email_sender, get_storage  # noqa: E402
from app.core.limiter import limiter, login_attempts  # noqa: E402
from app.domain.enums import UserRole  # noqa: E402
from app.domain.exceptions import EmailDeliveryException  # noqa: E402
from app.infrastructure.external.storage.local_storage import (  # noqa: E402
    LocalStorageService,
)
from app.infrastructure.persistence.database import (  # noqa: E402
    create_all,
    dispose_engine,
    drop_all,
    get_session_factory,
)
from app.infrastructure.persistence.models import Unit, User  # noqa: E402
from app.infrastructure.security.password import get_password_hash  # noqa: E402
from app.main import app  # noqa: E402
from app.shared.utils.datetime import utc_now  # noqa: E402

DEFAULT_PASSWORD = "Secret123!"
ADMIN_EMAIL = "admin@example.com"


@dataclass
class SentEmail:
    template: str
    recipient: str
    variables: dict[str, Any]


@dataclass
class RecordingEmailSender:
    """Email sender that keeps messages in memory; set fail to simulate an outage."""

    sent: list[SentEmail] = field(default_factory=list)
    fail: bool = False

    async def send(
        self, template: str, recipient: str, variables: dict[str, Any]
    ) -> None:
        if self.fail:
            raise EmailDeliveryException(recipient, "mail server unavailable")
        self.sent.append(SentEmail(template, recipient, dict(variables)))

    def last_otp(self) -> str:
        assert self.sent, "no email was sent"
        return str(self.sent[-1].variables["otp"])


@pytest.fixture(autouse=True)
def _reset_limits() -> None:
    """Fresh failed-login window and a disabled request limiter for every test."""
    login_attempts.reset()
    limiter.reset()
    limiter.enabled = False


@pytest.fixture
async def database():
    """Create all tables before the test and drop them (and the engine) after."""
    await create_all()
    yield
    await drop_all()
    await dispose_engine()


@pytest.fixture
def outbox():
    """In-memory mail backend installed as the app's email sender."""
    sender = RecordingEmailSender()
    app.dependency_overrides[get_email_sender] = lambda: sender
    yield sender
    app.dependency_overrides.pop(get_email_sender, None)


@pytest.fixture
def storage(tmp_path: Path):
    """Local storage rooted in the test's tmp dir, installed as the app's storage."""
    service = LocalStorageService(str(tmp_path / "storage"), base_url="/storage")
    app.dependency_overrides[get_storage] = lambda: service
    yield service
    app.dependency_overrides.pop(get_storage, None)


@pytest.fixture
async def client(database, outbox, storage) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session(database) -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test."""
    async with get_session_factory()() as session:
        yield session
        await session.rollback()


@pytest.fixture
def make_unit(database):
    """Factory: insert a unit and return it."""

    async def _make_unit(
        code: str,
        role: str = UserRole.UNIT.value,
        *,
        name: str | None = None,
        unit_type: str = "unit",
        parent: Unit | None = None,
        is_active: bool = True,
    ) -> Unit:
        async with get_session_factory()() as session, session.begin():
            unit = Unit(
                code=code,
                name=name or code.title(),
                type=unit_type,
                role=role,
                parent_unit_id=parent.id if parent else None,
                is_active=is_active,
            )
            session.add(unit)
            await session.flush()
            await session.refresh(unit)
        return unit

    return _make_unit


@pytest.fixture
def make_user(database):
    """Factory: insert a user with a hashed password and return it.

    Passing unit assigns the user there with the unit's role.
    """

    async def _make_user(
        email: str = "staff@example.com",
        password: str = DEFAULT_PASSWORD,
        *,
        name: str | None = None,
        username: str | None = None,
        role: str = UserRole.SDM.value,
        unit: Unit | None = None,
        is_active: bool = True,
        avatar: str | None = None,
    ) -> User:
        async with get_session_factory()() as session, session.begin():
            user = User(
                name=name or email.split("@")[0].title(),
                email=email,
                username=username,
                hashed_password=get_password_hash(password),
                role=unit.role if unit else role,
                unit_id=unit.id if unit else None,
                assigned_at=utc_now() if unit else None,
                is_active=is_active,
                avatar=avatar,
            )
            session.add(user)
            await session.flush()
            await session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def login(client: AsyncClient):
    """Log in through the API and return the bearer token."""

    async def _login(
        email: str,
        password: str = DEFAULT_PASSWORD,
        **extra: Any,
    ) -> str:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password, **extra},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["data"]["token"]

    return _login


@pytest.fixture
async def admin_headers(make_user, login) -> dict[str, str]:
    """Authorization headers of a logged-in admin."""
    await make_user(ADMIN_EMAIL, name="Administrator", role=UserRole.ADMIN.value)
    token = await login(ADMIN_EMAIL)
    return {"Authorization": f"Bearer {token}"}
