"""
Models module - SQLAlchemy tables for the portal.

Difference from schemas:
- Models: rows in the relational store
- Schemas: API contract (what client sends/receives)
"""

from portal.models.entities import (
    Base,
    User,
    StudentProfile,
    AgentProfile,
    UniversityProfile,
    UniversityProgram,
    Application,
    Document,
    Task,
    Commission,
    utcnow,
)
from portal.models.enums import (
    UserRole,
    ApplicationStatus,
    DocumentType,
    TaskPriority,
    CommissionStatus,
)

__all__ = [
    "Base",
    "User",
    "StudentProfile",
    "AgentProfile",
    "UniversityProfile",
    "UniversityProgram",
    "Application",
    "Document",
    "Task",
    "Commission",
    "utcnow",
    "UserRole",
    "ApplicationStatus",
    "DocumentType",
    "TaskPriority",
    "CommissionStatus",
]
