"""
Statistics Routes

GET /stats - Dashboard numbers for the caller's role
"""

from fastapi import APIRouter, Depends

from portal.core.auth import get_current_user
from portal.models import UserRole
from portal.services.storage_service import get_storage
from portal.services.stats_service import get_stats_service

router = APIRouter(tags=["Statistics"])


@router.get("/stats")
def get_stats(user: dict = Depends(get_current_user)):
    """
    Shape depends on role:
    - student: totalApplications, offerLetters, pendingReviews, visaStatus
    - agent: activeLeads, successRate, monthlyCommission, ranking
    - university: newApplications, offersSent, enrolledStudents, acceptanceRate
    - admin: totalUsers, universities, activeApplications, monthlyRevenue

    A university account without a profile gets {}.
    """
    stats = get_stats_service()
    role = user["role"]

    result = None
    if role == UserRole.student.value:
        result = stats.get_student_stats(user["user_id"])
    elif role == UserRole.agent.value:
        result = stats.get_agent_stats(user["user_id"])
    elif role == UserRole.university.value:
        profile = get_storage().get_university_profile(user["user_id"])
        if profile:
            result = stats.get_university_stats(profile.id)
    elif role == UserRole.admin.value:
        result = stats.get_admin_stats()

    return result.model_dump(by_alias=True) if result is not None else {}
