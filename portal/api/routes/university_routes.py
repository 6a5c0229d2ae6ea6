"""
University & Program Routes

GET /universities - List active universities
GET /universities/search - Filter by country, field and tuition budget
GET /universities/{university_id}/programs - Active programs of a university
POST /universities/{university_id}/programs - Add a program
GET /programs/{university_id} - Active programs of a university
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional

from portal.core.auth import get_current_user
from portal.services.storage_service import get_storage
from portal.services.search_service import get_search_service, SearchFilters
from portal.schemas.schemas import (
    UniversityResponse, UniversitySearchResult, ProgramCreate, ProgramResponse
)

router = APIRouter(tags=["Universities"])


@router.get("/universities", response_model=List[UniversityResponse])
def list_universities():
    """All active universities."""
    return get_storage().get_all_universities()


@router.get("/universities/search", response_model=List[UniversitySearchResult])
def search_universities(
    country: Optional[str] = Query(None),
    field: Optional[str] = Query(None, description="Exact program field, e.g. Law"),
    budget_min: Optional[int] = Query(None, alias="budgetMin", ge=0),
    budget_max: Optional[int] = Query(None, alias="budgetMax", ge=0),
):
    """
    Active universities, each with the active programs matching the filters.

    Universities are kept even when none of their programs match.
    """
    matches = get_search_service().search(SearchFilters(
        country=country, field=field, budget_min=budget_min, budget_max=budget_max
    ))
    return [
        UniversitySearchResult(
            **UniversityResponse.model_validate(match.university).model_dump(),
            programs=[ProgramResponse.model_validate(p) for p in match.programs],
        )
        for match in matches
    ]


@router.get("/universities/{university_id}/programs", response_model=List[ProgramResponse])
def list_university_programs(university_id: int):
    return get_storage().get_university_programs(university_id)


@router.post("/universities/{university_id}/programs", response_model=ProgramResponse, status_code=201)
def create_program(university_id: int, program: ProgramCreate, user: dict = Depends(get_current_user)):
    """Add a program to a university."""
    storage = get_storage()
    if not storage.get_university(university_id):
        raise HTTPException(status_code=404, detail="University not found")
    return storage.create_university_program({**program.model_dump(), "university_id": university_id})


@router.get("/programs/{university_id}", response_model=List[ProgramResponse])
def list_programs(university_id: int):
    return get_storage().get_university_programs(university_id)
