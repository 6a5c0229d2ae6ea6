"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get session token
GET /auth/user - Current user with role profile
POST /auth/user/role - Change own role
POST /switch-role - Change own role (same effect as /auth/user/role)
"""

import logging

from fastapi import APIRouter, HTTPException, Depends

from portal.core.auth import hash_password, verify_password, create_access_token, get_current_user
from portal.models import UserRole
from portal.services.storage_service import get_storage
from portal.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, CurrentUserResponse,
    RoleUpdateRequest, MessageResponse, StudentProfileResponse, AgentProfileResponse,
    UniversityResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Authentication"])

VALID_ROLES = {role.value for role in UserRole}


@router.post("/auth/register", response_model=MessageResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new user account.

    After registration, login to get a session token, then create a profile.
    """
    storage = get_storage()
    if storage.get_user_by_email(request.email):
        raise HTTPException(status_code=409, detail="Email already registered")

    storage.create_user({
        "email": request.email,
        "password_hash": hash_password(request.password),
        "first_name": request.first_name,
        "last_name": request.last_name,
        "role": request.role,
    })

    return MessageResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/auth/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Login and receive a session token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = get_storage().get_user_by_email(request.email)

    if not user or not user.password_hash or not verify_password(request.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": str(user.id)})
    return TokenResponse(access_token=token, user_id=user.id, role=user.role)


@router.get("/auth/user", response_model=CurrentUserResponse)
def get_auth_user(current: dict = Depends(get_current_user)):
    """Current user plus the profile that matches their role (null when absent)."""
    storage = get_storage()
    user = storage.get_user(current["user_id"])
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    profile = None
    if user.role == UserRole.student.value:
        row = storage.get_student_profile(user.id)
        profile = StudentProfileResponse.model_validate(row) if row else None
    elif user.role == UserRole.agent.value:
        row = storage.get_agent_profile(user.id)
        profile = AgentProfileResponse.model_validate(row) if row else None
    elif user.role == UserRole.university.value:
        row = storage.get_university_profile(user.id)
        profile = UniversityResponse.model_validate(row) if row else None

    response = CurrentUserResponse.model_validate(user)
    response.profile = profile.model_dump(by_alias=True, mode="json") if profile else None
    return response


def _switch_role(user_id: int, role: str):
    if role not in VALID_ROLES:
        raise HTTPException(status_code=400, detail="Invalid role")

    user = get_storage().update_user_role(user_id, role)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    logger.info("User %s role is now %s", user_id, role)
    return user


@router.post("/auth/user/role", response_model=UserResponse)
def update_role(request: RoleUpdateRequest, current: dict = Depends(get_current_user)):
    """Change the caller's role. Setting the current role again changes nothing."""
    return _switch_role(current["user_id"], request.role)


@router.post("/switch-role", response_model=UserResponse)
def switch_role(request: RoleUpdateRequest, current: dict = Depends(get_current_user)):
    """Dashboard role switcher; same behaviour as POST /auth/user/role."""
    return _switch_role(current["user_id"], request.role)
