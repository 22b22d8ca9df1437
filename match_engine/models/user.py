from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, Boolean, Date, DateTime, ForeignKey

from .base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)
    role = Column(String(32), nullable=False, default="student")
    full_name = Column(String(255))
    company_name = Column(String(255))
    institution = Column(String(255))

    # Student-only fields
    gpa = Column(Float)
    academic_level = Column(String(32))
    graduation_year = Column(Integer)
    weekly_hours = Column(Float)

    created_at = Column(DateTime(timezone=False), default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=False), default=datetime.utcnow, onupdate=datetime.utcnow)


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True)
    name = Column(String(128), unique=True, nullable=False)
    category = Column(String(64))


class UserSkill(Base):
    __tablename__ = "user_skills"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), index=True, nullable=False)
    skill_id = Column(Integer, ForeignKey("skills.id"), nullable=False)
    proficiency_level = Column(Integer, default=3)


class StudentAvailability(Base):
    __tablename__ = "student_availability"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), ForeignKey("users.id"), index=True, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
