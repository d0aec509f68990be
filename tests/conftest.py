# tests/conftest.py
import os
import tempfile

# point the app at a throwaway SQLite file before anything imports app.db
_tmpdir = tempfile.mkdtemp(prefix="pass-exchange-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmpdir, "test.db")
os.environ["BCRYPT_ROUNDS"] = "4"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app import crud
from app.db import Base, engine, SessionLocal
from app.main import app as fastapi_app
from app.security import hash_password

BASE_TIME = datetime(2025, 10, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(tables):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(tables):
    with TestClient(fastapi_app) as c:
        yield c


@pytest.fixture
def seller(db):
    return crud.create_user(db, "seller@example.com", hash_password("secret"), "9999900000")


@pytest.fixture
def make_listing(db, seller):
    def _make(event_name="Diwali Bash", minutes=0, **overrides):
        seller_id = overrides.pop("seller_id", seller.id)
        data = {
            "event_name": event_name,
            "city": "Ahmedabad",
            "pass_type": "Couple",
            "price": 1500,
            "seller_phone_number": "9999900000",
            "available_dates": ["2025-10-20"],
            "tags": [],
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        data.update(overrides)
        return crud.create_listing(db, seller_id, data)
    return _make
