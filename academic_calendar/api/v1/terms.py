"""
Term registry endpoints
"""
from typing import List
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from academic_calendar.core.deps import get_db
from academic_calendar.schemas.term import (
    TermOut,
    TermAdd,
    TermAddResult,
    TermBulkUpsert,
    TermBulkUpsertResult,
    TermUpdate,
    TermUpdateResult,
    PresetTermsRequest,
    PresetTermsResult,
)
from academic_calendar.services.term_service import (
    list_terms,
    add_term,
    bulk_upsert_terms,
    upsert_preset_terms,
    update_term,
    remove_term,
)

router = APIRouter()


@router.get("/{calendar_id}/terms", response_model=List[TermOut])
async def list_terms_endpoint(
    calendar_id: int,
    db: Session = Depends(get_db)
):
    """List a calendar's terms sorted by order, then name"""
    return list_terms(db, calendar_id)


@router.post("/{calendar_id}/terms", response_model=TermAddResult, status_code=201)
async def add_term_endpoint(
    calendar_id: int,
    term_data: TermAdd,
    response: Response,
    db: Session = Depends(get_db)
):
    """Add a term, or reuse the existing term with the same trimmed name"""
    term, added = add_term(db, calendar_id, term_data.name)
    if not added:
        response.status_code = status.HTTP_200_OK
    return {"added": added, "term": term}


@router.post("/{calendar_id}/terms/bulk", response_model=TermBulkUpsertResult)
async def bulk_upsert_terms_endpoint(
    calendar_id: int,
    bulk_data: TermBulkUpsert,
    db: Session = Depends(get_db)
):
    """Insert missing terms by name; existing terms are never deleted"""
    return {"added": bulk_upsert_terms(db, calendar_id, bulk_data.names)}


@router.post("/{calendar_id}/terms/presets", response_model=PresetTermsResult)
async def upsert_preset_terms_endpoint(
    calendar_id: int,
    preset_data: PresetTermsRequest,
    db: Session = Depends(get_db)
):
    """Apply a preset term list (name, short name, holiday flag)"""
    return upsert_preset_terms(
        db,
        calendar_id,
        [preset.model_dump() for preset in preset_data.terms]
    )


@router.patch("/{calendar_id}/terms/{term_id}", response_model=TermUpdateResult)
async def update_term_endpoint(
    calendar_id: int,
    term_id: int,
    term_data: TermUpdate,
    db: Session = Depends(get_db)
):
    """
    Patch a term

    Fields omitted from the body are untouched; fields sent as null are cleared.
    """
    return {"updated": update_term(db, calendar_id, term_id, term_data.model_dump(exclude_unset=True))}


@router.delete("/{calendar_id}/terms/{term_id}")
async def remove_term_endpoint(
    calendar_id: int,
    term_id: int,
    db: Session = Depends(get_db)
):
    """Delete a term; days linked to it become unclassified"""
    return {"deleted": remove_term(db, calendar_id, term_id)}
