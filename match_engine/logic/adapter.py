"""
Data Adapter for the Match Engine

Reads users, listings, applications and ratings from the relational store and
converts rows into StudentProfile / ProjectListing snapshots.

This is a pure READ + TRANSFORM layer:
- NO scoring logic
- NO ranking
- NO DB writes
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..models import (
    User,
    Skill,
    UserSkill,
    StudentAvailability,
    Listing,
    ProjectApplication,
    CorporateRating,
)
from .constants import SubjectType, DEFAULT_POOL_LIMIT
from .contracts import (
    AvailabilityWindow,
    ProjectListing,
    ProjectOutcomes,
    SponsorRecord,
    StudentProfile,
)
from .errors import SubjectNotFound

logger = logging.getLogger(__name__)


# Application status -> outcome bucket
STATUS_TO_OUTCOME = {
    "completed": "completed",
    "accepted": "active",
    "pending": "pending",
    "withdrawn": "dropped",
    "dropped": "dropped",
}

# Statuses that count as real placements for category history and sponsor stats
PLACED_STATUSES = ("accepted", "completed")

PUBLISHED = "published"
STUDENT_ROLE = "student"


# =============================================================================
# SUBJECTS
# =============================================================================

def load_student(db: Session, student_id: str) -> StudentProfile:
    """
    Load one student snapshot.

    Raises:
        SubjectNotFound: no student with that id
    """
    user = db.query(User).filter(User.id == student_id, User.role == STUDENT_ROLE).first()
    if user is None:
        raise SubjectNotFound(SubjectType.STUDENT.value, student_id)
    return _build_students(db, [user])[0]


def load_listing(db: Session, listing_id: str) -> ProjectListing:
    """
    Load one listing snapshot, whatever its status.

    Raises:
        SubjectNotFound: no listing with that id
    """
    listing = db.query(Listing).filter(Listing.id == listing_id).first()
    if listing is None:
        raise SubjectNotFound(SubjectType.LISTING.value, listing_id)
    return _build_listings(db, [listing])[0]


def load_subject(db: Session, subject_id: str, subject_type: SubjectType):
    if subject_type == SubjectType.STUDENT:
        return load_student(db, subject_id)
    return load_listing(db, subject_id)


# =============================================================================
# CANDIDATE POOLS
# =============================================================================

def fetch_listing_pool(
    db: Session,
    student_id: str,
    as_of: datetime,
    limit: int = DEFAULT_POOL_LIMIT
) -> List[ProjectListing]:
    """
    Eligible listings for a student: published, not expired at `as_of`, and
    not already applied to. Newest first, at most `limit`.
    """
    applied = select(ProjectApplication.listing_id).where(
        ProjectApplication.student_id == student_id
    )

    rows = (
        db.query(Listing)
        .filter(Listing.status == PUBLISHED)
        .filter(or_(Listing.expires_at.is_(None), Listing.expires_at > _naive(as_of)))
        .filter(~Listing.id.in_(applied))
        .order_by(Listing.published_at.is_(None), Listing.published_at.desc(), Listing.id)
        .limit(limit)
        .all()
    )

    logger.info(f"📦 Eligible listings for student {student_id}: {len(rows)}")
    return _build_listings(db, rows)


def fetch_student_pool(
    db: Session,
    listing_id: str,
    limit: int = DEFAULT_POOL_LIMIT
) -> List[StudentProfile]:
    """Students who have not applied to the listing yet, at most `limit`."""
    applied = select(ProjectApplication.student_id).where(
        ProjectApplication.listing_id == listing_id
    )

    rows = (
        db.query(User)
        .filter(User.role == STUDENT_ROLE)
        .filter(~User.id.in_(applied))
        .order_by(User.id)
        .limit(limit)
        .all()
    )

    logger.info(f"📦 Eligible students for listing {listing_id}: {len(rows)}")
    return _build_students(db, rows)


# =============================================================================
# ROW -> SNAPSHOT
# =============================================================================

def _build_students(db: Session, users: List[User]) -> List[StudentProfile]:
    """Batch-load skills, availability and history for a set of students."""
    ids = [u.id for u in users]
    if not ids:
        return []

    skills: Dict[str, List[str]] = defaultdict(list)
    for user_id, name in (
        db.query(UserSkill.user_id, Skill.name)
        .join(Skill, Skill.id == UserSkill.skill_id)
        .filter(UserSkill.user_id.in_(ids))
        .order_by(UserSkill.user_id, UserSkill.id)
    ):
        skills[user_id].append(name)

    windows: Dict[str, List[AvailabilityWindow]] = defaultdict(list)
    for row in (
        db.query(StudentAvailability)
        .filter(StudentAvailability.user_id.in_(ids), StudentAvailability.is_active.is_(True))
        .order_by(StudentAvailability.user_id, StudentAvailability.start_date)
    ):
        windows[row.user_id].append(
            AvailabilityWindow(start_date=row.start_date, end_date=row.end_date)
        )

    outcomes: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for student_id, status, count in (
        db.query(ProjectApplication.student_id, ProjectApplication.status, func.count(ProjectApplication.id))
        .filter(ProjectApplication.student_id.in_(ids))
        .group_by(ProjectApplication.student_id, ProjectApplication.status)
    ):
        bucket = STATUS_TO_OUTCOME.get(status)
        if bucket:
            outcomes[student_id][bucket] += count

    categories: Dict[str, List[str]] = defaultdict(list)
    for student_id, category in (
        db.query(ProjectApplication.student_id, Listing.category)
        .join(Listing, Listing.id == ProjectApplication.listing_id)
        .filter(
            ProjectApplication.student_id.in_(ids),
            ProjectApplication.status.in_(PLACED_STATUSES),
            Listing.category.isnot(None),
        )
        .order_by(ProjectApplication.student_id, ProjectApplication.created_at)
    ):
        if category not in categories[student_id]:
            categories[student_id].append(category)

    return [
        StudentProfile(
            student_id=u.id,
            skills=skills.get(u.id, []),
            availability=windows.get(u.id, []),
            weekly_hours=u.weekly_hours,
            academic_level=u.academic_level,
            graduation_year=u.graduation_year,
            gpa=u.gpa,
            outcomes=ProjectOutcomes(**outcomes.get(u.id, {})),
            category_history=categories.get(u.id, []),
            institution=u.institution,
            updated_at=u.updated_at,
        )
        for u in users
    ]


def _build_listings(db: Session, listings: List[Listing]) -> List[ProjectListing]:
    """Batch-load applicant counts and sponsor records for a set of listings."""
    if not listings:
        return []

    listing_ids = [listing.id for listing in listings]
    applicants = dict(
        db.query(ProjectApplication.listing_id, func.count(ProjectApplication.id))
        .filter(ProjectApplication.listing_id.in_(listing_ids))
        .group_by(ProjectApplication.listing_id)
        .all()
    )

    sponsors = load_sponsor_records(db, {listing.author_id for listing in listings if listing.author_id})

    return [
        ProjectListing(
            listing_id=listing.id,
            title=listing.title or "",
            description=listing.description or "",
            required_skills=_as_list(listing.skills_required),
            category=listing.category,
            compensation=listing.compensation,
            is_paid=bool(listing.is_paid),
            remote_allowed=bool(listing.remote_allowed),
            hours_per_week=listing.hours_per_week,
            start_date=listing.start_date,
            end_date=listing.end_date,
            published_at=listing.published_at,
            applicant_count=applicants.get(listing.id, 0),
            max_applicants=listing.max_students,
            sponsor=sponsors.get(listing.author_id, SponsorRecord(organization_id=listing.author_id)),
        )
        for listing in listings
    ]


def load_sponsor_records(db: Session, author_ids: Iterable[str]) -> Dict[str, SponsorRecord]:
    """
    Sponsor track record per listing author: institution, listing count,
    average rating and completion rate (completed / accepted-or-completed).
    """
    ids = list(author_ids)
    if not ids:
        return {}

    institutions = dict(db.query(User.id, User.institution).filter(User.id.in_(ids)).all())

    listing_counts = dict(
        db.query(Listing.author_id, func.count(Listing.id))
        .filter(Listing.author_id.in_(ids))
        .group_by(Listing.author_id)
        .all()
    )

    ratings = {
        author_id: (avg, count)
        for author_id, avg, count in (
            db.query(CorporateRating.corporate_user_id, func.avg(CorporateRating.rating), func.count(CorporateRating.id))
            .filter(CorporateRating.corporate_user_id.in_(ids))
            .group_by(CorporateRating.corporate_user_id)
        )
    }

    placed: Dict[str, int] = defaultdict(int)
    completed: Dict[str, int] = defaultdict(int)
    for author_id, status, count in (
        db.query(Listing.author_id, ProjectApplication.status, func.count(ProjectApplication.id))
        .join(ProjectApplication, ProjectApplication.listing_id == Listing.id)
        .filter(Listing.author_id.in_(ids), ProjectApplication.status.in_(PLACED_STATUSES))
        .group_by(Listing.author_id, ProjectApplication.status)
    ):
        placed[author_id] += count
        if status == "completed":
            completed[author_id] += count

    records = {}
    for author_id in ids:
        avg_rating, rating_count = ratings.get(author_id, (None, 0))
        records[author_id] = SponsorRecord(
            organization_id=author_id,
            institution=institutions.get(author_id),
            completion_rate=completed[author_id] / placed[author_id] if placed[author_id] else None,
            avg_rating=float(avg_rating) if avg_rating is not None else None,
            rating_count=rating_count,
            listing_count=listing_counts.get(author_id, 0),
        )
    return records


# =============================================================================
# HELPERS
# =============================================================================

def _as_list(value) -> List[str]:
    """skills_required may be stored as a JSON list or a comma-separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part for part in value.split(",") if part.strip()]
    return [str(v) for v in value]


def _naive(moment: datetime) -> datetime:
    """Timestamps are stored as naive UTC."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(timezone.utc).replace(tzinfo=None)
