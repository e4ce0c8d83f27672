"""Application-wide constants."""
from enum import Enum


class TocSection(str, Enum):
    """Theory of Change sections, keyed by their stored field names."""
    BIG_PICTURE_GOAL = "bigPictureGoal"
    PROJECT_AIM = "projectAim"
    OBJECTIVES = "objectives"
    BENEFICIARIES = "beneficiaries"
    ACTIVITIES = "activities"
    OUTCOMES = "outcomes"
    EXTERNAL_FACTORS = "externalFactors"
    EVIDENCE_LINKS = "evidenceLinks"

    @classmethod
    def names(cls) -> list[str]:
        return [section.value for section in cls]


# Project status values
class ProjectStatus:
    """Project status constants."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    ALL = (DRAFT, PUBLISHED, ACTIVE, COMPLETED, CANCELLED)


PROJECT_TYPE = "project"
MAX_PROJECT_TITLE_LENGTH = 200

# Color pair fields for each ToC section
COLOR_FIELDS = ("shape", "text")

# Password reset configuration
RESET_TOKEN_BYTES = 4  # 8 hex characters
RESET_TOKEN_TTL_MINUTES = 15
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72  # bcrypt input limit

RESET_REQUEST_ACCEPTED_MESSAGE = "If this email exists, you will receive a reset code"
RESET_SUCCESS_MESSAGE = "Password reset successful"
INVALID_RESET_TOKEN_MESSAGE = "Invalid or expired reset code"
