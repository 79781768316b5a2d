"""
Bike Parts API — Orders, scoped to the user who placed them.

``/orders/{key}`` serves two lookups: an email lists that owner's orders, any
other value is treated as an order id.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from fastapi import APIRouter, Body, Depends, Query

from app.api.deps import get_orders, require_admin
from app.core.exceptions import InvalidIdentifierError, NotFoundError
from app.core.identifiers import looks_like_email, parse_limit, parse_object_id
from app.core.security import Identity, get_current_identity
from app.services.documents import DocumentRepository
from app.services.rbac import AuthorizationGuard

router = APIRouter(prefix="/orders", tags=["orders"])

OWNER_FIELD = "addedBy"


async def _owned_order(
    raw_id: str, identity: Identity, orders: DocumentRepository
) -> Tuple[ObjectId, Dict[str, Any]]:
    """Resolve ``raw_id`` to an order the caller owns; raise 400/403 otherwise."""
    oid = parse_object_id(raw_id)
    if oid is None:
        raise InvalidIdentifierError(raw_id, "order")
    order = await orders.get(oid)
    if order is None:
        raise NotFoundError("order", raw_id)
    AuthorizationGuard.require_owner(identity, order.get(OWNER_FIELD))
    return oid, order


@router.post("")
async def create_order(
    fields: Optional[Dict[str, Any]] = Body(None),
    identity: Identity = Depends(get_current_identity),
    orders: DocumentRepository = Depends(get_orders),
) -> Dict[str, Any]:
    # The owner always comes from the token, never the body
    return await orders.insert({**(fields or {}), OWNER_FIELD: identity.email})


@router.get("", dependencies=[Depends(require_admin)])
async def list_orders(
    limitTo: Optional[str] = Query(None),
    orders: DocumentRepository = Depends(get_orders),
) -> List[Dict[str, Any]]:
    return await orders.list(limit=parse_limit(limitTo))


@router.get("/{key}")
async def get_orders_by_key(
    key: str,
    limitTo: Optional[str] = Query(None),
    identity: Identity = Depends(get_current_identity),
    orders: DocumentRepository = Depends(get_orders),
):
    if looks_like_email(key):
        AuthorizationGuard.require_owner(identity, key)
        return await orders.list({OWNER_FIELD: key}, limit=parse_limit(limitTo))

    _, order = await _owned_order(key, identity, orders)
    return order


@router.put("/{order_id}")
async def update_order(
    order_id: str,
    fields: Optional[Dict[str, Any]] = Body(None),
    identity: Identity = Depends(get_current_identity),
    orders: DocumentRepository = Depends(get_orders),
) -> Dict[str, Any]:
    oid, _ = await _owned_order(order_id, identity, orders)
    changes = {k: v for k, v in (fields or {}).items() if k != OWNER_FIELD}
    return await orders.update(oid, changes)


@router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    identity: Identity = Depends(get_current_identity),
    orders: DocumentRepository = Depends(get_orders),
) -> Dict[str, Any]:
    oid, _ = await _owned_order(order_id, identity, orders)
    return await orders.delete(oid)
