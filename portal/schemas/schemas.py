"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
JSON bodies use camelCase keys; snake_case names are accepted on input too.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime

from portal.models.enums import (
    UserRole, ApplicationStatus, DocumentType, TaskPriority, CommissionStatus
)


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def not_null(*fields: str):
    """
    Partial updates may omit these fields but not send them as null;
    the columns behind them are NOT NULL.
    """
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    return field_validator(*fields, mode="before")(_reject_null)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role: UserRole = UserRole.student

class LoginRequest(CamelModel):
    email: EmailStr
    password: str

class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: str

class RoleUpdateRequest(CamelModel):
    # Checked in the route so an unknown role gets the "Invalid role" message
    role: str

class UserResponse(CamelModel):
    id: int
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: str
    created_at: datetime
    updated_at: datetime

class CurrentUserResponse(UserResponse):
    profile: Optional[dict] = None


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class StudentProfileUpdate(CamelModel):
    date_of_birth: Optional[datetime] = None
    nationality: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    gpa: Optional[float] = Field(None, ge=0, le=9.99)
    ielts_score: Optional[float] = Field(None, ge=0, le=9)
    toefl_score: Optional[int] = Field(None, ge=0, le=120)
    preferred_countries: Optional[List[str]] = None
    preferred_fields: Optional[List[str]] = None
    budget_min: Optional[int] = Field(None, ge=0)
    budget_max: Optional[int] = Field(None, ge=0)

    reject_nulls = not_null("preferred_countries", "preferred_fields")

class StudentProfileCreate(StudentProfileUpdate):
    preferred_countries: List[str] = []
    preferred_fields: List[str] = []

class StudentProfileResponse(CamelModel):
    id: int
    user_id: int
    date_of_birth: Optional[datetime] = None
    nationality: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    gpa: Optional[float] = None
    ielts_score: Optional[float] = None
    toefl_score: Optional[int] = None
    preferred_countries: List[str] = []
    preferred_fields: List[str] = []
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class AgentProfileUpdate(CamelModel):
    company_name: Optional[str] = Field(None, max_length=255)
    license_number: Optional[str] = Field(None, max_length=100)
    phone_number: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    specializations: Optional[List[str]] = None
    commission_rate: Optional[float] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None

    reject_nulls = not_null("specializations", "is_active")

class AgentProfileCreate(AgentProfileUpdate):
    specializations: List[str] = []
    is_active: bool = True

class AgentProfileResponse(CamelModel):
    id: int
    user_id: int
    company_name: Optional[str] = None
    license_number: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    specializations: List[str] = []
    commission_rate: Optional[float] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UniversityProfileUpdate(CamelModel):
    university_name: Optional[str] = Field(None, min_length=2, max_length=255)
    country: Optional[str] = Field(None, min_length=2, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = None
    website: Optional[str] = Field(None, max_length=500)
    ranking: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    logo_url: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

    reject_nulls = not_null("university_name", "country", "is_active")

class UniversityProfileCreate(UniversityProfileUpdate):
    university_name: str = Field(..., min_length=2, max_length=255)
    country: str = Field(..., min_length=2, max_length=100)
    is_active: bool = True

class UniversityResponse(CamelModel):
    id: int
    user_id: int
    university_name: str
    country: str
    city: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    ranking: Optional[int] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ============================================================
# PROGRAM SCHEMAS
# ============================================================

class ProgramCreate(CamelModel):
    program_name: str = Field(..., min_length=2, max_length=255)
    degree: str = Field(..., min_length=2, max_length=50)
    field: str = Field(..., min_length=2, max_length=120)
    duration: Optional[int] = Field(None, ge=1)
    tuition_fee: Optional[int] = Field(None, ge=0)
    currency: str = Field("USD", min_length=3, max_length=10)
    requirements: Optional[str] = None
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None
    scholarship_available: bool = False
    scholarship_amount: Optional[int] = Field(None, ge=0)
    is_active: bool = True

class ProgramResponse(CamelModel):
    id: int
    university_id: int
    program_name: str
    degree: str
    field: str
    duration: Optional[int] = None
    tuition_fee: Optional[int] = None
    currency: str
    requirements: Optional[str] = None
    application_deadline: Optional[datetime] = None
    start_date: Optional[datetime] = None
    scholarship_available: bool
    scholarship_amount: Optional[int] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

class UniversitySearchResult(UniversityResponse):
    programs: List[ProgramResponse] = []


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(CamelModel):
    university_id: int
    program_id: int
    agent_id: Optional[int] = None
    status: ApplicationStatus = ApplicationStatus.draft
    submitted_at: Optional[datetime] = None
    notes: Optional[str] = None

class ApplicationUpdate(CamelModel):
    agent_id: Optional[int] = None
    university_id: Optional[int] = None
    program_id: Optional[int] = None
    status: Optional[ApplicationStatus] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    interview_date: Optional[datetime] = None
    offer_date: Optional[datetime] = None
    enrollment_date: Optional[datetime] = None
    notes: Optional[str] = None

    reject_nulls = not_null("university_id", "program_id", "status")

class ApplicationResponse(CamelModel):
    id: int
    student_id: int
    agent_id: Optional[int] = None
    university_id: int
    program_id: int
    status: str
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    interview_date: Optional[datetime] = None
    offer_date: Optional[datetime] = None
    enrollment_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class ApplicationDetailResponse(ApplicationResponse):
    """Application joined to whichever relations the caller's view loads."""
    student: Optional[UserResponse] = None
    university: Optional[UniversityResponse] = None
    program: Optional[ProgramResponse] = None


# ============================================================
# DOCUMENT SCHEMAS
# ============================================================

class DocumentCreate(CamelModel):
    application_id: Optional[int] = None
    document_type: DocumentType
    file_name: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1, max_length=500)
    file_size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = Field(None, max_length=100)
    expiry_date: Optional[datetime] = None

class DocumentUpdate(CamelModel):
    application_id: Optional[int] = None
    document_type: Optional[DocumentType] = None
    file_name: Optional[str] = Field(None, min_length=1, max_length=255)
    file_url: Optional[str] = Field(None, min_length=1, max_length=500)
    is_verified: Optional[bool] = None
    expiry_date: Optional[datetime] = None

    reject_nulls = not_null("document_type", "file_name", "file_url", "is_verified")

class DocumentResponse(CamelModel):
    id: int
    user_id: int
    application_id: Optional[int] = None
    document_type: str
    file_name: str
    file_url: str
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    is_verified: bool
    verified_by: Optional[int] = None
    verified_at: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# ============================================================
# TASK SCHEMAS
# ============================================================

class TaskCreate(CamelModel):
    application_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    priority: TaskPriority = TaskPriority.medium

class TaskUpdate(CamelModel):
    application_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    is_completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None

    reject_nulls = not_null("title", "is_completed", "priority")

class TaskResponse(CamelModel):
    id: int
    user_id: int
    application_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    is_completed: bool
    completed_at: Optional[datetime] = None
    priority: str
    created_at: datetime
    updated_at: datetime


# ============================================================
# COMMISSION SCHEMAS
# ============================================================

class CommissionCreate(CamelModel):
    application_id: int
    amount: float = Field(..., gt=0)
    currency: str = Field("USD", min_length=3, max_length=10)
    status: CommissionStatus = CommissionStatus.pending

class CommissionUpdate(CamelModel):
    amount: Optional[float] = Field(None, gt=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=10)
    status: Optional[CommissionStatus] = None

    reject_nulls = not_null("amount", "currency", "status")

class CommissionResponse(CamelModel):
    id: int
    agent_id: int
    application_id: int
    amount: float
    currency: str
    status: str
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


# ============================================================
# STATISTICS SCHEMAS
# ============================================================

class StudentStats(CamelModel):
    total_applications: int
    offer_letters: int
    pending_reviews: int
    visa_status: str

class AgentStats(CamelModel):
    active_leads: int
    success_rate: int
    monthly_commission: float
    ranking: int

class UniversityStats(CamelModel):
    new_applications: int
    offers_sent: int
    enrolled_students: int
    acceptance_rate: int

class AdminStats(CamelModel):
    total_users: int
    universities: int
    active_applications: int
    monthly_revenue: float


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
    success: bool = True

class ErrorResponse(CamelModel):
    message: str
