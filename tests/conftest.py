import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-0123456789abcdef")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("TIMEZONE", "America/Chicago")

from dataclasses import dataclass, field  # noqa: E402
from datetime import datetime, timezone  # noqa: E402
from zoneinfo import ZoneInfo  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from mentorhub.auth.passwords import set_admin_password  # noqa: E402
from mentorhub.core.clock import Clock, get_clock  # noqa: E402
from mentorhub.core.db import Base, SessionLocal, engine  # noqa: E402
from mentorhub.main import app  # noqa: E402
from mentorhub.services.dispatcher import DispatchResult, get_dispatcher  # noqa: E402

CHICAGO = ZoneInfo("America/Chicago")
ADMIN_PASSWORD = "correct-horse-battery"
CRON_HEADERS = {"x-api-key": "test-cron-secret"}

# Wednesday 2026-10-21 09:15 in Chicago (CDT, UTC-5)
DEFAULT_NOW = datetime(2026, 10, 21, 14, 15, tzinfo=timezone.utc)


@dataclass(frozen=True)
class FrozenClock(Clock):
    at: datetime = DEFAULT_NOW

    def now(self) -> datetime:
        return self.at


class ClockControl:
    def __init__(self):
        self.clock = FrozenClock(tz=CHICAGO)

    def set(self, at: datetime) -> None:
        self.clock = FrozenClock(tz=CHICAGO, at=at)


@dataclass
class SentMessage:
    urls: list
    title: str
    body: str
    notify_type: str


@dataclass
class FakeDispatcher:
    ok: bool = True
    error: str = "Apprise returned 500: relay down"
    healthy: bool = True
    sent: list = field(default_factory=list)

    def notify(self, urls, title, body, notify_type="info"):
        self.sent.append(SentMessage(list(urls), title, body, notify_type))
        if not urls:
            return DispatchResult(ok=False, error="No notification URLs provided")
        if not self.ok:
            return DispatchResult(ok=False, error=self.error)
        return DispatchResult(ok=True)

    def is_healthy(self):
        return self.healthy


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    return ClockControl()


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture(autouse=True)
def _overrides(clock, dispatcher):
    app.dependency_overrides[get_clock] = lambda: clock.clock
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(db):
    set_admin_password(db, ADMIN_PASSWORD)
    with TestClient(app) as c:
        r = c.post("/admin/login", json={"password": ADMIN_PASSWORD})
        assert r.status_code == 200, r.text
        yield c
