from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.application.ports.appointments_repo import AppointmentData
from app.db import models  # noqa: F401
from app.infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository


@pytest.fixture
def session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


def data(**overrides):
    values = dict(
        tutor_name="Ana",
        pet_name="Rex",
        phone="11987654321",
        description="Banho e tosa",
        schedule_at=datetime(2026, 10, 18, 10, 0),
    )
    values.update(overrides)
    return AppointmentData(**values)


def test_naive_schedule_round_trips(session):
    repo = SqlAppointmentsRepository(session)
    created = repo.create(data())
    assert created.id == 1
    assert created.schedule_at == datetime(2026, 10, 18, 10, 0)
    assert created.schedule_at.tzinfo is None
    assert created.created_at.tzinfo is None

    fetched = repo.get_by_id(created.id)
    assert fetched.schedule_at == datetime(2026, 10, 18, 10, 0)


def test_find_conflict_with_naive_instant(session):
    repo = SqlAppointmentsRepository(session)
    created = repo.create(data())
    assert repo.find_conflict(datetime(2026, 10, 18, 10, 0)) is True
    assert repo.find_conflict(datetime(2026, 10, 18, 10, 30)) is False
    assert repo.find_conflict(datetime(2026, 10, 18, 10, 0), exclude_id=created.id) is False


def test_update_and_list_between(session):
    repo = SqlAppointmentsRepository(session)
    first = repo.create(data(schedule_at=datetime(2026, 10, 18, 15, 0)))
    repo.create(data(schedule_at=datetime(2026, 10, 18, 9, 30)))
    repo.create(data(schedule_at=datetime(2026, 10, 19, 9, 0)))

    updated = repo.update(first.id, data(description="Tosa", schedule_at=datetime(2026, 10, 18, 11, 0)))
    assert updated.description == "Tosa"
    assert repo.update(999, data()) is None

    day = repo.list_between(datetime(2026, 10, 18), datetime(2026, 10, 19))
    assert [a.schedule_at.hour for a in day] == [9, 11]


def test_failed_commit_is_rolled_back(session):
    repo = SqlAppointmentsRepository(session)
    with pytest.raises(IntegrityError):
        repo.create(data(tutor_name=None))

    # the session stays usable after the rollback
    created = repo.create(data())
    assert created.id is not None
    assert len(repo.list_between(datetime(2026, 10, 18), datetime(2026, 10, 19))) == 1
