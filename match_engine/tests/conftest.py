"""
Shared fixtures for match engine tests.
"""

from datetime import date, datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from db import Base
import match_engine.models  # noqa: F401  registers tables on Base.metadata
from match_engine.logic.contracts import (
    AvailabilityWindow,
    ProjectListing,
    ProjectOutcomes,
    SponsorRecord,
    StudentProfile,
)
from match_engine.logic.engine import MatchEngine
from match_engine.logic.signal_extractors import ScoringContext


AS_OF = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_student(**overrides) -> StudentProfile:
    data = {
        "student_id": "stu-1",
        "skills": ["Python", "SQL"],
        "availability": [AvailabilityWindow(start_date=date(2025, 6, 1), end_date=date(2025, 8, 31))],
        "weekly_hours": 15,
        "outcomes": ProjectOutcomes(completed=2, dropped=0),
        "category_history": ["Data Science"],
        "institution": "Holy Cross",
        "updated_at": datetime(2025, 5, 1, tzinfo=timezone.utc),
    }
    data.update(overrides)
    return StudentProfile(**data)


def make_listing(**overrides) -> ProjectListing:
    data = {
        "listing_id": "lst-1",
        "title": "Data pipeline intern",
        "required_skills": ["python", "sql"],
        "category": "Data Science",
        "hours_per_week": 15,
        "start_date": date(2025, 6, 15),
        "end_date": date(2025, 7, 15),
        "published_at": datetime(2025, 5, 30, tzinfo=timezone.utc),
        "sponsor": SponsorRecord(organization_id="corp-1", institution="Holy Cross"),
    }
    data.update(overrides)
    return ProjectListing(**data)


@pytest.fixture
def context():
    return ScoringContext(as_of=AS_OF)


@pytest.fixture
def engine():
    return MatchEngine(max_workers=2)


@pytest.fixture
def db_session():
    """In-memory SQLite session with every match engine table created."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    Session = sessionmaker(bind=test_engine, autoflush=False, autocommit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)
        test_engine.dispose()
