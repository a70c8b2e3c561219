"""
Shared test fixtures.

Every test gets its own SQLite file under tmp_path and a cheap argon2
configuration so the suite stays fast.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.auth.jwt import TokenCodec
from app.auth.password import PasswordHasher
from app.core.config import Settings
from app.core.database import Database
from app.main import create_app

TEST_JWT_SECRET = "test-secret-key-for-testing-only"

ENTRY_PAGE_HTML = "<html><body>New entry</body></html>"


class FakeClock:
    """Manually advanced UTC clock for token expiry tests."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def fast_hasher() -> PasswordHasher:
    return PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def codec(clock: FakeClock) -> TokenCodec:
    return TokenCodec(TEST_JWT_SECRET, clock=clock)


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'journal_test.db'}"


@pytest.fixture
def settings(tmp_path, database_url: str) -> Settings:
    static_dir = tmp_path / "public"
    static_dir.mkdir()
    (static_dir / "entry2.html").write_text(ENTRY_PAGE_HTML, encoding="utf-8")
    (static_dir / "login2.html").write_text("<html><body>Login</body></html>", encoding="utf-8")
    return Settings(
        database_url=database_url,
        jwt_secret=TEST_JWT_SECRET,
        static_dir=static_dir,
    )


@pytest.fixture
def app(settings: Settings, fast_hasher: PasswordHasher):
    return create_app(settings, password_hasher=fast_hasher)


@pytest.fixture
def client(app):
    """TestClient with lifespan events (creates the tables)."""
    with TestClient(app, follow_redirects=False) as c:
        yield c


@pytest_asyncio.fixture
async def session(database_url: str):
    database = Database(database_url)
    await database.init()
    async with database.session_maker() as s:
        yield s
    await database.close()


def signup(client: TestClient, email: str = "a@x.com", username: str = "Alice", psw: str = "pw1"):
    return client.post("/signup", data={"username": username, "email": email, "psw": psw})


def login(client: TestClient, email: str = "a@x.com", psw: str = "pw1"):
    return client.post("/login", data={"uname": email, "psw": psw})
