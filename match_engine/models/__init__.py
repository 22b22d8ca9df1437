# Export all match engine models for easy imports
from .base import Base
from .user import User, Skill, UserSkill, StudentAvailability
from .listing import Listing, ProjectApplication, CorporateRating

__all__ = [
    "Base",
    "User",
    "Skill",
    "UserSkill",
    "StudentAvailability",
    "Listing",
    "ProjectApplication",
    "CorporateRating",
]
