"""
Storage Service - typed create/read/update operations over the portal tables.

Conventions:
- Every operation opens its own session (get_db_session); nothing spans entities.
- Single-record lookups return None when the row does not exist.
- List lookups return [] when nothing matches.
- update_* methods apply only the given fields, stamp updated_at,
  and return None when the target row is missing.

Nothing is ever deleted.
"""

import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from portal.db.database import get_db_session
from portal.models import (
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

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


# Every application read comes back joined to its student, university and program
_APPLICATION_RELATIONS = (
    selectinload(Application.student),
    selectinload(Application.university),
    selectinload(Application.program),
)


def _clean(values: Dict[str, Any]) -> Dict[str, Any]:
    """Unwrap str enums so the ORM stores plain values."""
    cleaned = {}
    for key, value in values.items():
        if hasattr(value, "value") and isinstance(value, str):
            value = value.value
        cleaned[key] = value
    return cleaned


class StorageService:
    """
    Persistence gateway for every portal entity.

    Routes go through this class instead of building queries themselves;
    the statistics and search services run their own read-only queries.
    """

    # ------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------

    def _create(self, model: Type[ModelT], values: Dict[str, Any]) -> ModelT:
        with get_db_session() as db:
            row = model(**_clean(values))
            db.add(row)
            db.flush()
            db.refresh(row)
        logger.info("Created %s id=%s", model.__tablename__, row.id)
        return row

    def _update_where(self, model: Type[ModelT], criteria, values: Dict[str, Any]) -> Optional[ModelT]:
        with get_db_session() as db:
            row = db.execute(select(model).where(criteria)).scalars().first()
            if row is None:
                return None
            for key, value in _clean(values).items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            db.flush()
            db.refresh(row)
        logger.info("Updated %s id=%s fields=%s", model.__tablename__, row.id, sorted(values))
        return row

    def _get_where(self, model: Type[ModelT], criteria) -> Optional[ModelT]:
        with get_db_session() as db:
            return db.execute(select(model).where(criteria)).scalars().first()

    # ------------------------------------------------------------
    # Users
    # ------------------------------------------------------------

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get_where(User, User.id == user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._get_where(User, User.email == email)

    def create_user(self, values: Dict[str, Any]) -> User:
        return self._create(User, values)

    def update_user(self, user_id: int, values: Dict[str, Any]) -> Optional[User]:
        return self._update_where(User, User.id == user_id, values)

    def update_user_role(self, user_id: int, role: str) -> Optional[User]:
        """Set the caller's role. Same role as before is a no-op (no write)."""
        user = self.get_user(user_id)
        if user is None or user.role == role:
            return user
        return self.update_user(user_id, {"role": role})

    # ------------------------------------------------------------
    # Role profiles
    # ------------------------------------------------------------

    def get_student_profile(self, user_id: int) -> Optional[StudentProfile]:
        return self._get_where(StudentProfile, StudentProfile.user_id == user_id)

    def create_student_profile(self, values: Dict[str, Any]) -> StudentProfile:
        return self._create(StudentProfile, values)

    def update_student_profile(self, user_id: int, values: Dict[str, Any]) -> Optional[StudentProfile]:
        return self._update_where(StudentProfile, StudentProfile.user_id == user_id, values)

    def get_agent_profile(self, user_id: int) -> Optional[AgentProfile]:
        return self._get_where(AgentProfile, AgentProfile.user_id == user_id)

    def create_agent_profile(self, values: Dict[str, Any]) -> AgentProfile:
        return self._create(AgentProfile, values)

    def update_agent_profile(self, user_id: int, values: Dict[str, Any]) -> Optional[AgentProfile]:
        return self._update_where(AgentProfile, AgentProfile.user_id == user_id, values)

    def get_university_profile(self, user_id: int) -> Optional[UniversityProfile]:
        return self._get_where(UniversityProfile, UniversityProfile.user_id == user_id)

    def create_university_profile(self, values: Dict[str, Any]) -> UniversityProfile:
        return self._create(UniversityProfile, values)

    def update_university_profile(self, user_id: int, values: Dict[str, Any]) -> Optional[UniversityProfile]:
        return self._update_where(UniversityProfile, UniversityProfile.user_id == user_id, values)

    # ------------------------------------------------------------
    # Universities and programs
    # ------------------------------------------------------------

    def get_university(self, university_id: int) -> Optional[UniversityProfile]:
        return self._get_where(UniversityProfile, UniversityProfile.id == university_id)

    def get_all_universities(self) -> List[UniversityProfile]:
        with get_db_session() as db:
            return list(db.execute(
                select(UniversityProfile)
                .where(UniversityProfile.is_active.is_(True))
                .order_by(UniversityProfile.id)
            ).scalars())

    def get_program(self, program_id: int) -> Optional[UniversityProgram]:
        return self._get_where(UniversityProgram, UniversityProgram.id == program_id)

    def get_university_programs(self, university_id: int) -> List[UniversityProgram]:
        with get_db_session() as db:
            return list(db.execute(
                select(UniversityProgram)
                .where(
                    UniversityProgram.university_id == university_id,
                    UniversityProgram.is_active.is_(True),
                )
                .order_by(UniversityProgram.id)
            ).scalars())

    def create_university_program(self, values: Dict[str, Any]) -> UniversityProgram:
        return self._create(UniversityProgram, values)

    # ------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------

    def get_application(self, application_id: int) -> Optional[Application]:
        with get_db_session() as db:
            return db.execute(
                select(Application)
                .options(*_APPLICATION_RELATIONS)
                .where(Application.id == application_id)
            ).scalars().first()

    def get_user_applications(self, student_id: int) -> List[Application]:
        """A student's applications with university and program, newest first."""
        with get_db_session() as db:
            return list(db.execute(
                select(Application)
                .options(*_APPLICATION_RELATIONS)
                .where(Application.student_id == student_id)
                .order_by(Application.created_at.desc(), Application.id.desc())
            ).scalars())

    def get_agent_applications(self, agent_id: int) -> List[Application]:
        """Applications assigned to an agent, most recently touched first."""
        with get_db_session() as db:
            return list(db.execute(
                select(Application)
                .options(*_APPLICATION_RELATIONS)
                .where(Application.agent_id == agent_id)
                .order_by(Application.updated_at.desc(), Application.id.desc())
            ).scalars())

    def get_university_applications(self, university_id: int) -> List[Application]:
        """Incoming applications for a university with student and program, newest first."""
        with get_db_session() as db:
            return list(db.execute(
                select(Application)
                .options(*_APPLICATION_RELATIONS)
                .where(Application.university_id == university_id)
                .order_by(Application.created_at.desc(), Application.id.desc())
            ).scalars())

    def create_application(self, values: Dict[str, Any]) -> Application:
        return self._create(Application, values)

    def update_application(self, application_id: int, values: Dict[str, Any]) -> Optional[Application]:
        return self._update_where(Application, Application.id == application_id, values)

    # ------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------

    def get_user_documents(self, user_id: int) -> List[Document]:
        with get_db_session() as db:
            return list(db.execute(
                select(Document)
                .where(Document.user_id == user_id)
                .order_by(Document.created_at.desc(), Document.id.desc())
            ).scalars())

    def get_application_documents(self, application_id: int) -> List[Document]:
        with get_db_session() as db:
            return list(db.execute(
                select(Document)
                .where(Document.application_id == application_id)
                .order_by(Document.created_at.desc(), Document.id.desc())
            ).scalars())

    def create_document(self, values: Dict[str, Any]) -> Document:
        return self._create(Document, values)

    def update_document(self, document_id: int, values: Dict[str, Any]) -> Optional[Document]:
        return self._update_where(Document, Document.id == document_id, values)

    # ------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------

    def get_user_tasks(self, user_id: int) -> List[Task]:
        with get_db_session() as db:
            return list(db.execute(
                select(Task)
                .where(Task.user_id == user_id)
                .order_by(Task.due_date.desc().nulls_last(), Task.id.desc())
            ).scalars())

    def create_task(self, values: Dict[str, Any]) -> Task:
        return self._create(Task, values)

    def update_task(self, task_id: int, values: Dict[str, Any]) -> Optional[Task]:
        return self._update_where(Task, Task.id == task_id, values)

    # ------------------------------------------------------------
    # Commissions
    # ------------------------------------------------------------

    def get_agent_commissions(self, agent_id: int) -> List[Commission]:
        with get_db_session() as db:
            return list(db.execute(
                select(Commission)
                .where(Commission.agent_id == agent_id)
                .order_by(Commission.created_at.desc(), Commission.id.desc())
            ).scalars())

    def create_commission(self, values: Dict[str, Any]) -> Commission:
        return self._create(Commission, values)

    def update_commission(self, commission_id: int, values: Dict[str, Any]) -> Optional[Commission]:
        return self._update_where(Commission, Commission.id == commission_id, values)


# ============================================================
# Singleton instance
# ============================================================

_storage: Optional[StorageService] = None


def get_storage() -> StorageService:
    global _storage
    if _storage is None:
        _storage = StorageService()
    return _storage
