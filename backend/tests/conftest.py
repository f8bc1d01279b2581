"""
Pytest configuration and fixtures
"""
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Settings are cached on first use, so the test environment goes in before any import
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["TIMEZONE"] = "UTC"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import carstatus.models  # noqa: F401
from carstatus.core.database import Base, get_db, setup_db_metrics
from carstatus.models.teslamate import (Car, Charge, ChargingProcess,
                                        GlobalSettings, Position, State)
from carstatus.utils.datetime_utils import utc_now


def naive_utc_now() -> datetime:
    """Current UTC time the way TeslaMate stores it (no tzinfo)"""
    return utc_now().replace(tzinfo=None)


class TeslaMateSeeder:
    """Inserts TeslaMate rows for tests"""

    def __init__(self, db: Session):
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        self.db.commit()
        return obj

    def car(self, car_id: int = 1, **fields) -> Car:
        return self._add(Car(id=car_id, **fields))

    def position(self, car_id: int = 1, date: Optional[datetime] = None, **fields) -> Position:
        fields.setdefault("latitude", 52.52)
        fields.setdefault("longitude", 13.405)
        return self._add(Position(car_id=car_id, date=date or naive_utc_now(), **fields))

    def state(self, car_id: int = 1, state: str = "online", start_date: Optional[datetime] = None,
              **fields) -> State:
        return self._add(State(car_id=car_id, state=state, start_date=start_date or naive_utc_now(),
                               **fields))

    def charging_process(self, car_id: int = 1, start_date: Optional[datetime] = None,
                         end_date: Optional[datetime] = None, **fields) -> ChargingProcess:
        return self._add(ChargingProcess(
            car_id=car_id,
            start_date=start_date or naive_utc_now() - timedelta(minutes=30),
            end_date=end_date,
            **fields,
        ))

    def charge(self, charging_process_id: int, date: Optional[datetime] = None, **fields) -> Charge:
        return self._add(Charge(charging_process_id=charging_process_id, date=date or naive_utc_now(),
                                **fields))

    def settings(self, unit_of_length: Optional[str] = "km", unit_of_temperature: Optional[str] = "C",
                 unit_of_pressure: Optional[str] = "bar") -> GlobalSettings:
        return self._add(GlobalSettings(
            id=1,
            unit_of_length=unit_of_length,
            unit_of_temperature=unit_of_temperature,
            unit_of_pressure=unit_of_pressure,
        ))


@pytest.fixture(scope="session")
def engine():
    """In-memory SQLite shared by all sessions of the test run"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    setup_db_metrics(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db(engine) -> Session:
    """Create a database session with a fresh TeslaMate schema"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def teslamate(db) -> TeslaMateSeeder:
    return TeslaMateSeeder(db)


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from fastapi.testclient import TestClient
    from main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def now() -> datetime:
    """Naive UTC reference time for seeded rows"""
    return naive_utc_now()
