import os
import tempfile
import threading
import time

# doit précéder tout import backend.* (engine créé à l'import)
_TEST_DIR = tempfile.mkdtemp(prefix="bloodbank-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TEST_DIR, "test.db")
os.environ["EMAIL_BACKEND"] = "none"
os.environ["NOTIFY_WAIT_SECONDS"] = "2"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from backend.app.api.deps import get_notifier
from backend.app.db.base import Base
from backend.app.db.models import models_v1  # noqa: F401
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.services.mailers import EmailSender
from backend.services.notifications import NotificationDispatcher


class RecordingSender(EmailSender):
    """Fake transport: records every message, configurable outcome."""

    def __init__(self, ok: bool = True, error: Exception | None = None, delay: float = 0.0):
        self.ok = ok
        self.error = error
        self.delay = delay
        self.sent: list[tuple[str, str, str]] = []
        self.started = threading.Event()
        self._lock = threading.Lock()

    def send(self, to_address: str, subject: str, html_body: str) -> bool:
        self.started.set()
        with self._lock:
            self.sent.append((to_address, subject, html_body))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.ok

    @property
    def recipients(self) -> list[str]:
        with self._lock:
            return [to for to, _, _ in self.sent]


def wait_for(predicate, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture(autouse=True)
def fresh_schema():
    """Schéma recréé à chaque test : ids SQLite repartent de 1."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function")
def db_session() -> Session:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def notifier(sender):
    dispatcher = NotificationDispatcher(sender, max_pending=20, workers=1)
    dispatcher.start()
    try:
        yield dispatcher
    finally:
        dispatcher.stop()


@pytest.fixture
def client(notifier):
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
