from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Float, Boolean, Date, DateTime, JSON, ForeignKey

from .base import Base


class Listing(Base):
    __tablename__ = "listings"

    id = Column(String(64), primary_key=True)
    author_id = Column(String(64), ForeignKey("users.id"), index=True)
    title = Column(String(255), nullable=False, default="")
    description = Column(Text)
    category = Column(String(128))
    skills_required = Column(JSON)

    hours_per_week = Column(Float)
    start_date = Column(Date)
    end_date = Column(Date)
    remote_allowed = Column(Boolean, default=False, nullable=False)
    compensation = Column(String(255))
    is_paid = Column(Boolean, default=False, nullable=False)

    # draft / published / closed
    status = Column(String(32), default="draft", nullable=False, index=True)
    published_at = Column(DateTime(timezone=False))
    expires_at = Column(DateTime(timezone=False))
    max_students = Column(Integer, default=1)
    students_accepted = Column(Integer, default=0)


class ProjectApplication(Base):
    __tablename__ = "project_applications"

    id = Column(Integer, primary_key=True)
    student_id = Column(String(64), ForeignKey("users.id"), index=True, nullable=False)
    listing_id = Column(String(64), ForeignKey("listings.id"), index=True, nullable=False)
    # pending / accepted / completed / withdrawn / declined
    status = Column(String(32), default="pending", nullable=False)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)


class CorporateRating(Base):
    __tablename__ = "corporate_ratings"

    id = Column(Integer, primary_key=True)
    corporate_user_id = Column(String(64), ForeignKey("users.id"), index=True, nullable=False)
    student_id = Column(String(64), ForeignKey("users.id"))
    rating = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
