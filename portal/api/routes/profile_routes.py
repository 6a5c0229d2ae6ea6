"""
Profile Routes

POST /profiles/student - Create student profile
PUT /profiles/student - Update student profile (created on first write)
POST /profiles/agent - Create agent profile
PUT /profiles/agent - Update agent profile (created on first write)
POST /profiles/university - Create university profile
PUT /profiles/university - Update university profile (created on first write)
"""

from fastapi import APIRouter, HTTPException, Depends

from portal.core.auth import get_current_user
from portal.services.storage_service import get_storage
from portal.schemas.schemas import (
    StudentProfileCreate, StudentProfileUpdate, StudentProfileResponse,
    AgentProfileCreate, AgentProfileUpdate, AgentProfileResponse,
    UniversityProfileCreate, UniversityProfileUpdate, UniversityResponse
)

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def _ensure_absent(existing, kind: str):
    if existing is not None:
        raise HTTPException(status_code=409, detail=f"{kind} profile already exists. Use PUT to update.")


# ============================================================
# STUDENT
# ============================================================

@router.post("/student", response_model=StudentProfileResponse, status_code=201)
def create_student_profile(data: StudentProfileCreate, user: dict = Depends(get_current_user)):
    storage = get_storage()
    _ensure_absent(storage.get_student_profile(user["user_id"]), "Student")
    return storage.create_student_profile({**data.model_dump(), "user_id": user["user_id"]})


@router.put("/student", response_model=StudentProfileResponse)
def update_student_profile(data: StudentProfileUpdate, user: dict = Depends(get_current_user)):
    """Update only the provided fields."""
    storage = get_storage()
    values = data.model_dump(exclude_unset=True)
    profile = storage.update_student_profile(user["user_id"], values)
    if profile is None:
        profile = storage.create_student_profile({**values, "user_id": user["user_id"]})
    return profile


# ============================================================
# AGENT
# ============================================================

@router.post("/agent", response_model=AgentProfileResponse, status_code=201)
def create_agent_profile(data: AgentProfileCreate, user: dict = Depends(get_current_user)):
    storage = get_storage()
    _ensure_absent(storage.get_agent_profile(user["user_id"]), "Agent")
    return storage.create_agent_profile({**data.model_dump(), "user_id": user["user_id"]})


@router.put("/agent", response_model=AgentProfileResponse)
def update_agent_profile(data: AgentProfileUpdate, user: dict = Depends(get_current_user)):
    """Update only the provided fields."""
    storage = get_storage()
    values = data.model_dump(exclude_unset=True)
    profile = storage.update_agent_profile(user["user_id"], values)
    if profile is None:
        profile = storage.create_agent_profile({**values, "user_id": user["user_id"]})
    return profile


# ============================================================
# UNIVERSITY
# ============================================================

@router.post("/university", response_model=UniversityResponse, status_code=201)
def create_university_profile(data: UniversityProfileCreate, user: dict = Depends(get_current_user)):
    storage = get_storage()
    _ensure_absent(storage.get_university_profile(user["user_id"]), "University")
    return storage.create_university_profile({**data.model_dump(), "user_id": user["user_id"]})


@router.put("/university", response_model=UniversityResponse)
def update_university_profile(data: UniversityProfileUpdate, user: dict = Depends(get_current_user)):
    """
    Update only the provided fields.

    The first write creates the profile, so it must carry universityName and country.
    """
    storage = get_storage()
    values = data.model_dump(exclude_unset=True)
    profile = storage.update_university_profile(user["user_id"], values)
    if profile is None:
        if not values.get("university_name") or not values.get("country"):
            raise HTTPException(status_code=400, detail="universityName and country are required")
        profile = storage.create_university_profile({**values, "user_id": user["user_id"]})
    return profile
