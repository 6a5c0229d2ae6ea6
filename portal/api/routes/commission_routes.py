"""
Commission Routes (agents)

GET /commissions - Caller's commissions, newest first
POST /commissions - Record a commission for an application
PUT /commissions/{commission_id} - Update amount / status
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from portal.core.auth import get_current_user
from portal.models import CommissionStatus, utcnow
from portal.services.storage_service import get_storage
from portal.schemas.schemas import CommissionCreate, CommissionUpdate, CommissionResponse

router = APIRouter(prefix="/commissions", tags=["Commissions"])


@router.get("", response_model=List[CommissionResponse])
def list_commissions(user: dict = Depends(get_current_user)):
    return get_storage().get_agent_commissions(user["user_id"])


@router.post("", response_model=CommissionResponse, status_code=201)
def create_commission(data: CommissionCreate, user: dict = Depends(get_current_user)):
    storage = get_storage()
    if not storage.get_application(data.application_id):
        raise HTTPException(status_code=404, detail="Application not found")

    values = {**data.model_dump(), "agent_id": user["user_id"]}
    if data.status == CommissionStatus.paid:
        values["paid_at"] = utcnow()
    return storage.create_commission(values)


@router.put("/{commission_id}", response_model=CommissionResponse)
def update_commission(commission_id: int, data: CommissionUpdate, user: dict = Depends(get_current_user)):
    values = data.model_dump(exclude_unset=True)
    if values.get("status") is not None:
        values["paid_at"] = utcnow() if values["status"] == CommissionStatus.paid else None

    commission = get_storage().update_commission(commission_id, values)
    if not commission:
        raise HTTPException(status_code=404, detail="Commission not found")
    return commission
