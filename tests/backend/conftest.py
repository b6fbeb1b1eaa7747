import os
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL

from aspas.core import db as db_module  # noqa: E402
from aspas.core.ratelimit import MemoryRateLimitStore  # noqa: E402
from aspas.core.security import hash_password  # noqa: E402
from aspas.main import app  # noqa: E402
from aspas.models.user import Role, User  # noqa: E402
from aspas.services.email import EmailResult, get_email_service  # noqa: E402

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


class FakeMailer:
    """Records every mail instead of calling Resend."""

    def __init__(self):
        self.sent: list[tuple] = []
        self.fail = False

    async def send_welcome(self, name: str, email: str) -> EmailResult:
        return self._record("welcome", email, name)

    async def send_password_recovery(self, name: str, email: str, reset_link: str) -> EmailResult:
        return self._record("recovery", email, reset_link)

    def _record(self, kind: str, email: str, payload: str) -> EmailResult:
        if self.fail:
            raise RuntimeError("mail provider down")
        self.sent.append((kind, email, payload))
        return EmailResult(True, "Email sent")

    def of_kind(self, kind: str) -> list[tuple]:
        return [m for m in self.sent if m[0] == kind]


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


@pytest_asyncio.fixture
async def db():
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def rate_limit_store():
    return MemoryRateLimitStore()


@pytest_asyncio.fixture
async def client(db, mailer, rate_limit_store):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB,
    a fresh login rate-limit store and a recording mailer.
    """
    app.state.rate_limit_store = rate_limit_store
    app.dependency_overrides[get_email_service] = lambda: mailer
    # Unhandled errors are rendered by the catch-all handler instead of bubbling up
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def create_user(db):
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(
        password: str = "UserPass!23",
        role: Role = Role.FREE,
        email: str | None = None,
    ) -> tuple[User, str]:
        suffix = uuid.uuid4().hex[:6]
        user = await User.create(
            username=f"user_{suffix}",
            name=f"User {suffix}",
            email=email or f"{suffix}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(email: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/auth/login",
            json={"email": email, "senha": password},
            # Spread logins over addresses so helpers never trip the per-IP limit
            headers={"X-Forwarded-For": f"10.0.{uuid.uuid4().int % 250}.{uuid.uuid4().int % 250}"},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def user_headers(create_user, auth_header_factory):
    """A regular user and its Authorization headers."""
    user, password = await create_user()
    return user, await auth_header_factory(user.email, password)
