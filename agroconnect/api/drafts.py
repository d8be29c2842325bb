from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Body, Depends, Query, status
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from agroconnect.auth.security import AuthenticatedUser, get_current_user
from agroconnect.core.exceptions import BackendFailure, NotFoundError, ValidationError, validation_error_from
from agroconnect.db.session import get_db
from agroconnect.models.base import utcnow
from agroconnect.models.draft import ProductDraft
from agroconnect.schemas.draft import (
    DraftDetailResponse,
    DraftListResponse,
    DraftOut,
    DraftPayload,
    DraftResponse,
)
from agroconnect.schemas.image import SuccessResponse

router = APIRouter()


def _parse_draft(payload: Dict[str, Any]) -> DraftPayload:
    try:
        return DraftPayload.model_validate(payload)
    except PydanticValidationError as exc:
        raise validation_error_from("Invalid draft data", exc)


def get_owned_draft(db: Session, draft_id: int, farmer_id: str) -> ProductDraft:
    draft = (
        db.query(ProductDraft)
        .filter(ProductDraft.id == draft_id, ProductDraft.farmer_id == farmer_id)
        .first()
    )
    if draft is None:
        raise NotFoundError("Draft not found")
    return draft


@router.post(
    "",
    response_model=DraftResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a new draft",
    description="Persist a partially completed product listing for the current farmer.",
)
def create_draft(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Create a draft. Only **cropType** is required; any other listing field
    may be supplied and is validated when present.
    """
    draft_data = _parse_draft(payload)

    db_draft = ProductDraft(farmer_id=current_user.id, **draft_data.model_dump())
    try:
        db.add(db_draft)
        db.commit()
        db.refresh(db_draft)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Draft insert failed for farmer {current_user.id}")
        raise BackendFailure("Failed to save draft")

    logger.info(f"Draft {db_draft.id} saved for farmer {current_user.id}")
    return {"success": True, "draft": db_draft}


@router.get(
    "",
    response_model=Union[DraftDetailResponse, DraftListResponse],
    summary="Get one draft or list drafts",
    description="With `id`, return that draft if it belongs to the caller. Without it, list the caller's drafts, most recently updated first.",
)
def read_drafts(
    id: Optional[int] = Query(None, description="Draft ID"),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    if id is not None:
        draft = get_owned_draft(db, id, current_user.id)
        return DraftDetailResponse(draft=DraftOut.model_validate(draft))

    try:
        drafts = (
            db.query(ProductDraft)
            .filter(ProductDraft.farmer_id == current_user.id)
            .order_by(ProductDraft.updated_at.desc(), ProductDraft.id.desc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception(f"Draft listing failed for farmer {current_user.id}")
        raise BackendFailure("Failed to fetch drafts")

    return DraftListResponse(drafts=[DraftOut.model_validate(draft) for draft in drafts])


@router.put(
    "",
    response_model=DraftResponse,
    summary="Update a draft",
    description="Update a draft owned by the caller. The body carries the draft `id` alongside the fields.",
)
def update_draft(
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    fields = dict(payload)
    draft_id = fields.pop("id", None)
    if draft_id in (None, ""):
        raise ValidationError("Draft ID is required")
    try:
        draft_id = int(draft_id)
    except (TypeError, ValueError):
        raise ValidationError("Invalid draft data", [{"field": "id", "message": "Draft ID must be an integer"}])

    draft_data = _parse_draft(fields)
    db_draft = get_owned_draft(db, draft_id, current_user.id)

    for field, value in draft_data.model_dump(exclude_unset=True).items():
        setattr(db_draft, field, value)
    # an unchanged resave still counts as the latest edit
    db_draft.updated_at = utcnow()

    try:
        db.commit()
        db.refresh(db_draft)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Draft {draft_id} update failed for farmer {current_user.id}")
        raise BackendFailure("Failed to update draft")

    return {"success": True, "draft": db_draft}


@router.delete(
    "",
    response_model=SuccessResponse,
    summary="Delete a draft",
    description="Delete a draft owned by the caller. Unknown or foreign drafts yield 404.",
)
def delete_draft(
    id: Optional[int] = Query(None, description="Draft ID"),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    if id is None:
        raise ValidationError("Draft ID is required")

    try:
        deleted = (
            db.query(ProductDraft)
            .filter(ProductDraft.id == id, ProductDraft.farmer_id == current_user.id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Draft {id} delete failed for farmer {current_user.id}")
        raise BackendFailure("Failed to delete draft")

    if not deleted:
        raise NotFoundError("Draft not found")

    logger.info(f"Draft {id} deleted by farmer {current_user.id}")
    return {"success": True}
