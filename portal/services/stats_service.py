"""
Statistics Service - per-role dashboard aggregates.

Every number is a COUNT or SUM computed by the database; this module only
turns counts into percentages.

Shapes:
- student:    totalApplications, offerLetters, pendingReviews, visaStatus
- agent:      activeLeads, successRate, monthlyCommission, ranking
- university: newApplications, offersSent, enrolledStudents, acceptanceRate
- admin:      totalUsers, universities, activeApplications, monthlyRevenue
"""

import math
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select

from portal.db.database import get_db_session
from portal.models import (
    Application,
    ApplicationStatus,
    Commission,
    UniversityProfile,
    User,
    utcnow,
)
from portal.schemas.schemas import AdminStats, AgentStats, StudentStats, UniversityStats

# Applications in these states are no longer "active leads"
CLOSED_STATUSES = (ApplicationStatus.enrolled.value, ApplicationStatus.rejected.value)
SUCCESS_STATUSES = (ApplicationStatus.offer_received.value, ApplicationStatus.enrolled.value)
VISA_STATUSES = (
    ApplicationStatus.visa_approved.value,
    ApplicationStatus.visa_rejected.value,
    ApplicationStatus.enrolled.value,
)

# Agent ranking is not computed yet; dashboards show a fixed placeholder
AGENT_RANKING_PLACEHOLDER = 3


def percentage(part: int, whole: int) -> int:
    """100 * part / whole rounded half up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return int(math.floor(part * 100.0 / whole + 0.5))


def month_start(now: Optional[datetime] = None) -> datetime:
    """First instant of the current calendar month (naive UTC)."""
    now = now or utcnow()
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def visa_label(status: Optional[str]) -> str:
    if status == ApplicationStatus.visa_approved.value:
        return "Approved"
    if status == ApplicationStatus.visa_rejected.value:
        return "Rejected"
    return "In Progress"


class StatsService:
    """Aggregate counters for the four dashboards."""

    def _count_applications(self, db, *criteria) -> int:
        return db.execute(
            select(func.count(Application.id)).where(*criteria)
        ).scalar_one()

    def _commission_total(self, db, *criteria) -> float:
        total = db.execute(
            select(func.coalesce(func.sum(Commission.amount), 0)).where(*criteria)
        ).scalar_one()
        return float(total or 0)

    def get_student_stats(self, user_id: int) -> StudentStats:
        with get_db_session() as db:
            owned = Application.student_id == user_id
            total = self._count_applications(db, owned)
            offers = self._count_applications(
                db, owned, Application.status == ApplicationStatus.offer_received.value
            )
            pending = self._count_applications(
                db, owned, Application.status == ApplicationStatus.under_review.value
            )
            latest_visa_status = db.execute(
                select(Application.status)
                .where(owned, Application.status.in_(VISA_STATUSES))
                .order_by(Application.updated_at.desc(), Application.id.desc())
                .limit(1)
            ).scalar_one_or_none()

        return StudentStats(
            total_applications=total,
            offer_letters=offers,
            pending_reviews=pending,
            visa_status=visa_label(latest_visa_status),
        )

    def get_agent_stats(self, user_id: int, now: Optional[datetime] = None) -> AgentStats:
        with get_db_session() as db:
            assigned = Application.agent_id == user_id
            active = self._count_applications(db, assigned, Application.status.not_in(CLOSED_STATUSES))
            total = self._count_applications(db, assigned)
            successful = self._count_applications(db, assigned, Application.status.in_(SUCCESS_STATUSES))
            monthly = self._commission_total(
                db,
                Commission.agent_id == user_id,
                Commission.created_at >= month_start(now),
            )

        return AgentStats(
            active_leads=active,
            success_rate=percentage(successful, total),
            monthly_commission=monthly,
            ranking=AGENT_RANKING_PLACEHOLDER,
        )

    def get_university_stats(self, university_id: int) -> UniversityStats:
        with get_db_session() as db:
            incoming = Application.university_id == university_id
            submitted = self._count_applications(
                db, incoming, Application.status == ApplicationStatus.submitted.value
            )
            offers = self._count_applications(
                db, incoming, Application.status == ApplicationStatus.offer_received.value
            )
            enrolled = self._count_applications(
                db, incoming, Application.status == ApplicationStatus.enrolled.value
            )
            total = self._count_applications(db, incoming)

        return UniversityStats(
            new_applications=submitted,
            offers_sent=offers,
            enrolled_students=enrolled,
            acceptance_rate=percentage(offers, total),
        )

    def get_admin_stats(self, now: Optional[datetime] = None) -> AdminStats:
        with get_db_session() as db:
            total_users = db.execute(select(func.count(User.id))).scalar_one()
            universities = db.execute(
                select(func.count(UniversityProfile.id)).where(UniversityProfile.is_active.is_(True))
            ).scalar_one()
            active = self._count_applications(db, Application.status.not_in(CLOSED_STATUSES))
            revenue = self._commission_total(db, Commission.created_at >= month_start(now))

        return AdminStats(
            total_users=total_users,
            universities=universities,
            active_applications=active,
            monthly_revenue=revenue,
        )


_stats_service: Optional[StatsService] = None


def get_stats_service() -> StatsService:
    global _stats_service
    if _stats_service is None:
        _stats_service = StatsService()
    return _stats_service
