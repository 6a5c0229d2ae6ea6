"""
Fixed value sets shared by the ORM tables and the API schemas.
"""

from enum import Enum


class UserRole(str, Enum):
    student = "student"
    agent = "agent"
    university = "university"
    admin = "admin"


class ApplicationStatus(str, Enum):
    draft = "draft"
    submitted = "submitted"
    under_review = "under_review"
    interview_scheduled = "interview_scheduled"
    offer_received = "offer_received"
    rejected = "rejected"
    enrolled = "enrolled"
    visa_approved = "visa_approved"
    visa_rejected = "visa_rejected"


class DocumentType(str, Enum):
    passport = "passport"
    academic_transcripts = "academic_transcripts"
    ielts_toefl = "ielts_toefl"
    statement_of_purpose = "statement_of_purpose"
    recommendation_letter = "recommendation_letter"
    cv_resume = "cv_resume"
    financial_documents = "financial_documents"
    other = "other"


class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class CommissionStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    cancelled = "cancelled"


def sql_in_list(enum_cls) -> str:
    """Render enum values for a CHECK constraint: 'a', 'b', 'c'."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
