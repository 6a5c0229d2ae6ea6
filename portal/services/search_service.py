"""
University Search Service

Filters (all optional, combined with AND):
- country:    exact match on the university
- field:      exact match on the program
- budget_min: program tuition_fee >= budget_min
- budget_max: program tuition_fee <= budget_max

Only active universities and active programs are considered. The program
filters narrow each university's `programs` list; they never drop the
university itself, so a search for a field nobody teaches still lists every
matching-country university with an empty program list.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import select

from portal.db.database import get_db_session
from portal.models import UniversityProfile, UniversityProgram

logger = logging.getLogger(__name__)


@dataclass
class SearchFilters:
    country: Optional[str] = None
    field: Optional[str] = None
    budget_min: Optional[int] = None
    budget_max: Optional[int] = None


@dataclass
class UniversityMatch:
    university: UniversityProfile
    programs: List[UniversityProgram]


class UniversitySearchService:

    def _program_criteria(self, filters: SearchFilters) -> list:
        criteria = [UniversityProgram.is_active.is_(True)]
        if filters.field:
            criteria.append(UniversityProgram.field == filters.field)
        # A zero bound is treated as "no bound"
        if filters.budget_min:
            criteria.append(UniversityProgram.tuition_fee >= filters.budget_min)
        if filters.budget_max:
            criteria.append(UniversityProgram.tuition_fee <= filters.budget_max)
        return criteria

    def search(self, filters: SearchFilters) -> List[UniversityMatch]:
        university_criteria = [UniversityProfile.is_active.is_(True)]
        if filters.country:
            university_criteria.append(UniversityProfile.country == filters.country)

        with get_db_session() as db:
            universities = list(db.execute(
                select(UniversityProfile)
                .where(*university_criteria)
                .order_by(UniversityProfile.id)
            ).scalars())

            programs_by_university = {u.id: [] for u in universities}
            if universities:
                programs = db.execute(
                    select(UniversityProgram)
                    .where(
                        UniversityProgram.university_id.in_(list(programs_by_university)),
                        *self._program_criteria(filters),
                    )
                    .order_by(UniversityProgram.id)
                ).scalars()
                for program in programs:
                    programs_by_university[program.university_id].append(program)

        logger.debug("University search %s matched %d universities", filters, len(universities))
        return [
            UniversityMatch(university=u, programs=programs_by_university[u.id])
            for u in universities
        ]


_search_service: Optional[UniversitySearchService] = None


def get_search_service() -> UniversitySearchService:
    global _search_service
    if _search_service is None:
        _search_service = UniversitySearchService()
    return _search_service
