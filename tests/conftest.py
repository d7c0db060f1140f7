# tests/conftest.py
"""Shared fixtures: a fresh in-memory database per test, users, vehicles."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime
from sqlalchemy.orm import sessionmaker

from fleetcheck.config import settings
from fleetcheck.database import build_engine, create_tables
from fleetcheck.models.vehicle import Vehicle
from fleetcheck.services.user_admin_service import create_user

TEST_PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = build_engine()   # private in-memory SQLite, foreign keys on
    create_tables(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def storage_dir(tmp_path, monkeypatch):
    path = tmp_path / "storage"
    monkeypatch.setattr(settings, "STORAGE_DIR", str(path))
    return path


@pytest.fixture
def supervisor(db):
    return create_user(db, "carla", TEST_PASSWORD, "Carla Mendes", role="supervisor")


@pytest.fixture
def driver(db):
    return create_user(db, "joao", TEST_PASSWORD, "João Silva", role="driver")


@pytest.fixture
def other_driver(db):
    return create_user(db, "maria", TEST_PASSWORD, "Maria Souza", role="driver")


@pytest.fixture
def make_vehicle(db):
    def _make(plate="ABC-1234", status="active", current_driver=None, brand="Toyota", model="Corolla",
              mileage=15000):
        vehicle = Vehicle(brand=brand, model=model, year=2022, plate=plate, mileage=mileage,
                          status=status, current_driver=current_driver, created_at=datetime.utcnow())
        db.add(vehicle)
        db.commit()
        return vehicle
    return _make


@pytest.fixture
def vehicle(make_vehicle):
    return make_vehicle()
