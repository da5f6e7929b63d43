import os

# database.py refuses to import without a DB_URL
os.environ.setdefault("DB_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ownerportal.database import Base, get_db
from ownerportal.main import app
from ownerportal.models import Owner, Property
from ownerportal.services import owner_statement


@pytest.fixture(autouse=True)
def statement_env(monkeypatch):
    monkeypatch.setenv("STATEMENT_CURRENCY", "EUR")
    monkeypatch.setenv("STATEMENT_LOCALE", "en-GB")
    monkeypatch.delenv("WKHTMLTOPDF_PATH", raising=False)
    monkeypatch.delenv("HOSTKIT_TIMEOUT_SECONDS", raising=False)


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def owned_property(db):
    owner = Owner(name="Maria Silva", email="maria@example.com")
    prop = Property(
        id=392776,
        name="Piece of Heaven",
        is_admin_owned=False,
        owner=owner,
        hostkit_id="HK-1001",
        invoice_series=["HEAVEN2025"],
    )
    db.add_all([owner, prop])
    db.commit()
    return prop


@pytest.fixture
def admin_property(db):
    prop = Property(id=392781, name="Lote 7 3-A", is_admin_owned=True, hostkit_id="HK-1007")
    db.add(prop)
    db.commit()
    return prop


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def invoice_feed(monkeypatch):
    """Replace the Hostkit call; set `.invoices` or `.error` in the test."""

    class Feed:
        invoices = []
        error = None
        calls = []

        def __call__(self, prop, start, end):
            self.calls.append((prop.id, start, end))
            if self.error is not None:
                raise self.error
            return list(self.invoices)

    feed = Feed()
    feed.calls = []
    monkeypatch.setattr(owner_statement, "fetch_invoices", feed)
    return feed

