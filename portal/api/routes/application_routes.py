"""
Application Routes

GET /applications - Applications visible to the caller's role
POST /applications - Create application (caller is the student)
GET /applications/{application_id} - Application with student, university and program
PUT /applications/{application_id} - Update application (any status may follow any other)
GET /applications/{application_id}/documents - Documents attached to an application

Updates are not restricted to the application's owner: any signed-in caller
may update any application id.
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List, Optional

from portal.core.auth import get_current_user
from portal.models import UserRole
from portal.services.storage_service import get_storage
from portal.schemas.schemas import (
    ApplicationCreate, ApplicationUpdate, ApplicationResponse, ApplicationDetailResponse,
    DocumentResponse
)

router = APIRouter(prefix="/applications", tags=["Applications"])


def _check_references(
    university_id: Optional[int], program_id: Optional[int], agent_id: Optional[int] = None
):
    """404 for unknown university/program/agent, 400 if the program is not the university's."""
    storage = get_storage()
    program = None
    if program_id is not None:
        program = storage.get_program(program_id)
        if not program:
            raise HTTPException(status_code=404, detail="Program not found")
    if university_id is not None:
        if not storage.get_university(university_id):
            raise HTTPException(status_code=404, detail="University not found")
        if program and program.university_id != university_id:
            raise HTTPException(status_code=400, detail="Program does not belong to this university")
    if agent_id is not None and not storage.get_user(agent_id):
        raise HTTPException(status_code=404, detail="Agent not found")


@router.get("", response_model=List[ApplicationDetailResponse])
def list_applications(user: dict = Depends(get_current_user)):
    """
    Students see their own applications, agents the ones assigned to them,
    universities their incoming ones. Other roles get an empty list.
    """
    storage = get_storage()
    role = user["role"]

    if role == UserRole.student.value:
        return storage.get_user_applications(user["user_id"])
    if role == UserRole.agent.value:
        return storage.get_agent_applications(user["user_id"])
    if role == UserRole.university.value:
        profile = storage.get_university_profile(user["user_id"])
        if profile:
            return storage.get_university_applications(profile.id)
    return []


@router.post("", response_model=ApplicationResponse, status_code=201)
def create_application(data: ApplicationCreate, user: dict = Depends(get_current_user)):
    _check_references(data.university_id, data.program_id, data.agent_id)
    return get_storage().create_application({**data.model_dump(), "student_id": user["user_id"]})


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
def get_application(application_id: int, user: dict = Depends(get_current_user)):
    application = get_storage().get_application(application_id)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.put("/{application_id}", response_model=ApplicationResponse)
def update_application(application_id: int, data: ApplicationUpdate, user: dict = Depends(get_current_user)):
    """Partial update. Status is not checked against the previous status."""
    storage = get_storage()
    values = data.model_dump(exclude_unset=True)

    if "university_id" in values or "program_id" in values:
        current = storage.get_application(application_id)
        if not current:
            raise HTTPException(status_code=404, detail="Application not found")
        _check_references(
            values.get("university_id", current.university_id),
            values.get("program_id", current.program_id),
        )
    if values.get("agent_id") is not None:
        _check_references(None, None, values["agent_id"])

    application = storage.update_application(application_id, values)
    if not application:
        raise HTTPException(status_code=404, detail="Application not found")
    return application


@router.get("/{application_id}/documents", response_model=List[DocumentResponse])
def list_application_documents(application_id: int, user: dict = Depends(get_current_user)):
    return get_storage().get_application_documents(application_id)
