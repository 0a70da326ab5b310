from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from gymdesk import models  # noqa: F401
from gymdesk.crud import trainee as trainee_crud
from gymdesk.crud import trainer as trainer_crud
from gymdesk.database import get_session
from gymdesk.main import app
from gymdesk.schemas.trainee import TraineeCreate
from gymdesk.schemas.trainer import TrainerCreate
from gymdesk.services.live import live_queries
from gymdesk.services.notifications import expiry_notifier


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    expiry_notifier.stop()
    live_queries.clear()


@pytest.fixture(name="client")
def client_fixture(session):
    app.dependency_overrides[get_session] = lambda: session
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_trainer(session):
    counter = iter(range(1000))

    def factory(**overrides):
        data = {
            "name": "Ravi Kumar",
            "phone_number": f"98765{next(counter):05d}",
        }
        data.update(overrides)
        return trainer_crud.create_trainer(session, TrainerCreate(**data))

    return factory


@pytest.fixture
def make_trainee(session):
    counter = iter(range(1000))

    def factory(now=None, **overrides):
        data = {
            "name": "Anita Sharma",
            "phone_number": f"91234{next(counter):05d}",
            "membership_duration": 1,
        }
        data.update(overrides)
        return trainee_crud.create_trainee(session, TraineeCreate(**data), now=now)

    return factory


@pytest.fixture
def fixed_now():
    return datetime(2025, 3, 10, 9, 30)
