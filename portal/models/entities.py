from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from portal.models.enums import (
    ApplicationStatus,
    CommissionStatus,
    DocumentType,
    TaskPriority,
    UserRole,
    sql_in_list,
)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), unique=True, nullable=True)
    password_hash: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.student.value)

    student_profile: Mapped[Optional["StudentProfile"]] = relationship(back_populates="user", uselist=False)
    agent_profile: Mapped[Optional["AgentProfile"]] = relationship(back_populates="user", uselist=False)
    university_profile: Mapped[Optional["UniversityProfile"]] = relationship(back_populates="user", uselist=False)

    __table_args__ = (
        CheckConstraint(f"role in ({sql_in_list(UserRole)})", name="ck_users_role"),
    )


class StudentProfile(TimestampMixin, Base):
    __tablename__ = "student_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    date_of_birth: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    nationality: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    gpa: Mapped[Optional[Decimal]] = mapped_column(Numeric(3, 2), nullable=True)
    ielts_score: Mapped[Optional[Decimal]] = mapped_column(Numeric(3, 1), nullable=True)
    toefl_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    preferred_countries: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    preferred_fields: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    budget_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    budget_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    user: Mapped[User] = relationship(back_populates="student_profile")


class AgentProfile(TimestampMixin, Base):
    __tablename__ = "agent_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    license_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    specializations: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    commission_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped[User] = relationship(back_populates="agent_profile")


class UniversityProfile(TimestampMixin, Base):
    __tablename__ = "university_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)
    university_name: Mapped[str] = mapped_column(String(255), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    ranking: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped[User] = relationship(back_populates="university_profile")
    programs: Mapped[List["UniversityProgram"]] = relationship(back_populates="university")

    __table_args__ = (
        Index("ix_university_profiles_country", "country"),
        Index("ix_university_profiles_active", "is_active"),
    )


class UniversityProgram(TimestampMixin, Base):
    __tablename__ = "university_programs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    university_id: Mapped[int] = mapped_column(ForeignKey("university_profiles.id"), nullable=False)
    program_name: Mapped[str] = mapped_column(String(255), nullable=False)
    degree: Mapped[str] = mapped_column(String(50), nullable=False)  # Bachelor | Master | PhD
    field: Mapped[str] = mapped_column(String(120), nullable=False)
    duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)  # months
    tuition_fee: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    requirements: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    application_deadline: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    scholarship_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    scholarship_amount: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    university: Mapped[UniversityProfile] = relationship(back_populates="programs")

    __table_args__ = (
        Index("ix_university_programs_university", "university_id"),
        Index("ix_university_programs_field", "field"),
    )


class Application(TimestampMixin, Base):
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    agent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    university_id: Mapped[int] = mapped_column(ForeignKey("university_profiles.id"), nullable=False)
    program_id: Mapped[int] = mapped_column(ForeignKey("university_programs.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default=ApplicationStatus.draft.value)
    submitted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    interview_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    offer_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    enrollment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    student: Mapped[User] = relationship(foreign_keys=[student_id])
    agent: Mapped[Optional[User]] = relationship(foreign_keys=[agent_id])
    university: Mapped[UniversityProfile] = relationship()
    program: Mapped[UniversityProgram] = relationship()

    __table_args__ = (
        CheckConstraint(f"status in ({sql_in_list(ApplicationStatus)})", name="ck_applications_status"),
        Index("ix_applications_student", "student_id"),
        Index("ix_applications_agent", "agent_id"),
        Index("ix_applications_university", "university_id"),
        Index("ix_applications_status", "status"),
    )


class Document(TimestampMixin, Base):
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    application_id: Mapped[Optional[int]] = mapped_column(ForeignKey("applications.id"), nullable=True)
    document_type: Mapped[str] = mapped_column(String(40), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_url: Mapped[str] = mapped_column(String(500), nullable=False)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    mime_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verified_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    verified_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    expiry_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint(f"document_type in ({sql_in_list(DocumentType)})", name="ck_documents_type"),
        Index("ix_documents_user", "user_id"),
        Index("ix_documents_application", "application_id"),
    )


class Task(TimestampMixin, Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    application_id: Mapped[Optional[int]] = mapped_column(ForeignKey("applications.id"), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default=TaskPriority.medium.value)

    __table_args__ = (
        CheckConstraint(f"priority in ({sql_in_list(TaskPriority)})", name="ck_tasks_priority"),
        Index("ix_tasks_user", "user_id"),
    )


class Commission(TimestampMixin, Base):
    __tablename__ = "commissions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    agent_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    application_id: Mapped[int] = mapped_column(ForeignKey("applications.id"), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(10), nullable=False, default="USD")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=CommissionStatus.pending.value)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint(f"status in ({sql_in_list(CommissionStatus)})", name="ck_commissions_status"),
        Index("ix_commissions_agent", "agent_id"),
        Index("ix_commissions_created", "created_at"),
    )
