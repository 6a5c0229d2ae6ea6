"""
Document Routes

GET /documents - Caller's documents, newest first
POST /documents - Register an uploaded document (starts unverified)
PUT /documents/{document_id} - Update document metadata / verification
"""

from fastapi import APIRouter, HTTPException, Depends
from typing import List

from portal.core.auth import get_current_user
from portal.models import utcnow
from portal.services.storage_service import get_storage
from portal.schemas.schemas import DocumentCreate, DocumentUpdate, DocumentResponse

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get("", response_model=List[DocumentResponse])
def list_documents(user: dict = Depends(get_current_user)):
    return get_storage().get_user_documents(user["user_id"])


@router.post("", response_model=DocumentResponse, status_code=201)
def create_document(data: DocumentCreate, user: dict = Depends(get_current_user)):
    storage = get_storage()
    if data.application_id is not None and not storage.get_application(data.application_id):
        raise HTTPException(status_code=404, detail="Application not found")
    return storage.create_document({**data.model_dump(), "user_id": user["user_id"]})


@router.put("/{document_id}", response_model=DocumentResponse)
def update_document(document_id: int, data: DocumentUpdate, user: dict = Depends(get_current_user)):
    """Setting isVerified records who verified the document and when."""
    values = data.model_dump(exclude_unset=True)
    if "is_verified" in values:
        verified = bool(values["is_verified"])
        values["is_verified"] = verified
        values["verified_by"] = user["user_id"] if verified else None
        values["verified_at"] = utcnow() if verified else None

    document = get_storage().update_document(document_id, values)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return document
