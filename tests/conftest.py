"""
Pytest fixtures for the rollup engine.
Uses a temporary SQLite database with one job and two users (office and crew)
so tests can exercise role checks on financial-row writes.
"""
from datetime import datetime
from pathlib import Path

import pytest

from config import Settings
from database_manager import DatabaseManager
from models import ROLE_CREW, ROLE_OFFICE
from records import TimeEntryRecord


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """A temporary SQLite database path (same path for all managers in a test)."""
    return tmp_path / "test_rollup.db"


@pytest.fixture
def settings(db_path: Path) -> Settings:
    return Settings(db_path=db_path)


@pytest.fixture
def db_setup(db_path: Path, settings: Settings) -> DatabaseManager:
    """Manager with no acting user (creates tables and seed data)."""
    dm = DatabaseManager(db_path=db_path, settings=settings)
    dm.init_db()
    return dm


@pytest.fixture
def seeded(db_setup: DatabaseManager):
    """Create a job, an office user and a crew user. Returns (job_id, office_id, crew_id)."""
    job = db_setup.add_job("Smith Residence", estimated_hours=100)
    office = db_setup.add_user("olivia", role=ROLE_OFFICE)
    crew = db_setup.add_user("carlos", role=ROLE_CREW)
    return job.id, office.id, crew.id


@pytest.fixture
def job_id(seeded) -> int:
    return seeded[0]


@pytest.fixture
def db_office(db_path: Path, settings: Settings, seeded) -> DatabaseManager:
    """Manager acting as the office user."""
    _, office_id, _ = seeded
    return DatabaseManager(db_path=db_path, current_user_id=office_id, current_role=ROLE_OFFICE, settings=settings)


@pytest.fixture
def db_crew(db_path: Path, settings: Settings, seeded) -> DatabaseManager:
    """Manager acting as the crew user."""
    _, _, crew_id = seeded
    return DatabaseManager(db_path=db_path, current_user_id=crew_id, current_role=ROLE_CREW, settings=settings)


def make_entry(
    start: datetime,
    hours: float,
    *,
    component_id=None,
    user_id=1,
    crew_count=1,
    worker_names=(),
    entry_id=None,
    job_id=1,
) -> TimeEntryRecord:
    """Plain record for engine tests that do not need a database."""
    return TimeEntryRecord(
        id=entry_id,
        job_id=job_id,
        component_id=component_id,
        user_id=user_id,
        start_time=start,
        end_time=None,
        total_hours=hours,
        crew_count=crew_count,
        worker_names=tuple(worker_names),
    )
