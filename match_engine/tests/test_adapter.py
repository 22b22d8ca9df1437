"""
Tests for the SQLAlchemy read adapter and the runner, against in-memory SQLite.
"""

from datetime import date, timedelta

import pytest

from conftest import AS_OF
from match_engine.logic.adapter import (
    fetch_listing_pool,
    fetch_student_pool,
    load_listing,
    load_sponsor_records,
    load_student,
)
from match_engine.logic.engine import MatchEngine
from match_engine.logic.errors import InvalidArgument, SubjectNotFound
from match_engine.logic.runner import run_attractiveness, run_recommendations
from match_engine.models import (
    CorporateRating,
    Listing,
    ProjectApplication,
    Skill,
    StudentAvailability,
    User,
    UserSkill,
)

NOW = AS_OF.replace(tzinfo=None)


@pytest.fixture
def seeded(db_session):
    db = db_session
    db.add_all([
        User(id="stu-1", role="student", institution="Holy Cross", weekly_hours=15,
             academic_level="junior", updated_at=NOW - timedelta(days=3)),
        User(id="stu-2", role="student", institution="State U"),
        User(id="stu-3", role="student"),
        User(id="corp-1", role="corporate", company_name="Acme", institution="holy cross"),
        Skill(id=1, name="Python"),
        Skill(id=2, name="SQL"),
    ])
    db.flush()
    db.add_all([
        UserSkill(user_id="stu-1", skill_id=1),
        UserSkill(user_id="stu-1", skill_id=2),
        StudentAvailability(user_id="stu-1", start_date=date(2025, 6, 1), end_date=date(2025, 8, 31)),
        StudentAvailability(user_id="stu-1", start_date=date(2024, 1, 1), end_date=date(2024, 2, 1),
                            is_active=False),

        Listing(id="lst-done", author_id="corp-1", title="Past project", category="Data Science",
                skills_required=["python"], status="closed", published_at=NOW - timedelta(days=200)),
        Listing(id="lst-open", author_id="corp-1", title="Data pipeline", category="Data Science",
                skills_required=["Python", "SQL"], status="published", hours_per_week=15,
                start_date=date(2025, 6, 15), end_date=date(2025, 7, 15),
                published_at=NOW - timedelta(days=2), is_paid=True, compensation="$25/hr"),
        Listing(id="lst-undated", author_id="corp-1", title="Brand refresh",
                skills_required="figma, illustrator", status="published", published_at=None),
        Listing(id="lst-draft", author_id="corp-1", title="Draft", status="draft"),
        Listing(id="lst-expired", author_id="corp-1", title="Expired", status="published",
                published_at=NOW - timedelta(days=60), expires_at=NOW - timedelta(days=1)),
        Listing(id="lst-applied", author_id="corp-1", title="Applied", status="published",
                published_at=NOW - timedelta(days=5)),
    ])
    db.flush()
    db.add_all([
        ProjectApplication(student_id="stu-1", listing_id="lst-done", status="completed",
                           created_at=NOW - timedelta(days=150)),
        ProjectApplication(student_id="stu-1", listing_id="lst-applied", status="pending"),
        ProjectApplication(student_id="stu-1", listing_id="lst-expired", status="withdrawn"),
        ProjectApplication(student_id="stu-2", listing_id="lst-open", status="accepted"),
        CorporateRating(corporate_user_id="corp-1", student_id="stu-1", rating=5.0),
        CorporateRating(corporate_user_id="corp-1", student_id="stu-2", rating=4.0),
    ])
    db.commit()
    return db


def test_load_student_snapshot(seeded):
    student = load_student(seeded, "stu-1")

    assert student.skills == ["Python", "SQL"]
    assert len(student.availability) == 1
    assert student.availability[0].start_date == date(2025, 6, 1)
    assert student.weekly_hours == 15
    assert student.outcomes.completed == 1
    assert student.outcomes.pending == 1
    assert student.outcomes.dropped == 1
    assert student.category_history == ["Data Science"]
    assert student.institution == "Holy Cross"


def test_load_student_not_found(seeded):
    with pytest.raises(SubjectNotFound):
        load_student(seeded, "nobody")
    with pytest.raises(SubjectNotFound):
        load_student(seeded, "corp-1")


def test_load_listing_snapshot(seeded):
    listing = load_listing(seeded, "lst-open")

    assert listing.required_skills == ["Python", "SQL"]
    assert listing.applicant_count == 1
    assert listing.sponsor.organization_id == "corp-1"
    assert listing.sponsor.institution == "holy cross"

    undated = load_listing(seeded, "lst-undated")
    assert [s.strip() for s in undated.required_skills] == ["figma", "illustrator"]


def test_load_listing_not_found(seeded):
    with pytest.raises(SubjectNotFound):
        load_listing(seeded, "missing")


def test_sponsor_record(seeded):
    record = load_sponsor_records(seeded, ["corp-1"])["corp-1"]

    assert record.listing_count == 6
    assert record.rating_count == 2
    assert record.avg_rating == pytest.approx(4.5)
    # lst-done completed + lst-open accepted
    assert record.completion_rate == pytest.approx(0.5)


def test_listing_pool_excludes_ineligible(seeded):
    pool = fetch_listing_pool(seeded, "stu-1", AS_OF)
    # newest first, unpublished dates last
    assert [l.listing_id for l in pool] == ["lst-open", "lst-undated"]


def test_listing_pool_respects_limit(seeded):
    assert len(fetch_listing_pool(seeded, "stu-1", AS_OF, limit=1)) == 1


def test_student_pool_excludes_applicants(seeded):
    pool = fetch_student_pool(seeded, "lst-open")
    assert [s.student_id for s in pool] == ["stu-1", "stu-3"]


def test_run_recommendations_for_student(seeded):
    page = run_recommendations(
        seeded, MatchEngine(max_workers=2), "stu-1", "student", limit=10, as_of=AS_OF,
    )

    assert page.total == 2
    assert [r.candidate_id for r in page.recommendations] == ["lst-open", "lst-undated"]
    top = page.recommendations[0]
    assert top.matched_skills == ["python", "sql"]
    assert top.missing_skills == []


def test_run_recommendations_for_listing(seeded):
    page = run_recommendations(
        seeded, MatchEngine(max_workers=2), "lst-open", "listing", limit=10, as_of=AS_OF,
    )
    assert page.total == 2
    assert page.recommendations[0].candidate_id == "stu-1"


def test_run_recommendations_validates_before_reading(seeded):
    with pytest.raises(InvalidArgument):
        run_recommendations(seeded, MatchEngine(), "nobody", "student", limit=0)


def test_run_recommendations_unknown_subject(seeded):
    with pytest.raises(SubjectNotFound):
        run_recommendations(seeded, MatchEngine(), "nobody", "student", limit=5, as_of=AS_OF)


def test_run_attractiveness(seeded):
    result = run_attractiveness(seeded, "lst-open")
    assert result.listing_id == "lst-open"
    assert 0.0 <= result.score <= 100.0
