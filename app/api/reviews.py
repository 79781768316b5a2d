"""
Bike Parts API — Reviews: public reads, authored writes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from app.api.deps import get_reviews
from app.core.exceptions import InvalidIdentifierError, NotFoundError
from app.core.identifiers import parse_limit, parse_object_id
from app.core.security import Identity, get_current_identity
from app.services.documents import DocumentRepository
from app.services.rbac import AuthorizationGuard

router = APIRouter(prefix="/reviews", tags=["reviews"])

AUTHOR_FIELD = "addedBy"


async def _insert_review(
    fields: Dict[str, Any], identity: Identity, reviews: DocumentRepository
) -> Dict[str, Any]:
    claimed = fields.get(AUTHOR_FIELD)
    if claimed is not None:
        AuthorizationGuard.require_owner(identity, claimed)
    return await reviews.insert({**fields, AUTHOR_FIELD: identity.email})


@router.post("")
async def create_review(
    fields: Optional[Dict[str, Any]] = Body(None),
    identity: Identity = Depends(get_current_identity),
    reviews: DocumentRepository = Depends(get_reviews),
) -> Dict[str, Any]:
    return await _insert_review(fields or {}, identity, reviews)


@router.post("/{added_by}")
async def create_review_as(
    added_by: str,
    fields: Optional[Dict[str, Any]] = Body(None),
    identity: Identity = Depends(get_current_identity),
    reviews: DocumentRepository = Depends(get_reviews),
) -> Dict[str, Any]:
    AuthorizationGuard.require_owner(identity, added_by)
    return await _insert_review(fields or {}, identity, reviews)


@router.get("")
async def list_reviews(
    limitTo: Optional[str] = Query(None),
    reviews: DocumentRepository = Depends(get_reviews),
) -> List[Dict[str, Any]]:
    return await reviews.list(limit=parse_limit(limitTo))


@router.get("/{review_id}")
async def get_review(
    review_id: str,
    reviews: DocumentRepository = Depends(get_reviews),
) -> Dict[str, Any]:
    oid = parse_object_id(review_id)
    if oid is None:
        raise InvalidIdentifierError(review_id, "review")
    review = await reviews.get(oid)
    if review is None:
        raise NotFoundError("review", review_id)
    return review
