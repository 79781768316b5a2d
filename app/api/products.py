"""
Bike Parts API — Products: public catalog reads, admin-only writes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import APIRouter, Body, Depends, Query

from app.api.deps import get_products, require_admin
from app.core.exceptions import InvalidIdentifierError, NotFoundError
from app.core.identifiers import parse_limit, parse_object_id
from app.services.documents import DocumentRepository

router = APIRouter(prefix="/products", tags=["products"])


def _product_id(raw: str) -> ObjectId:
    oid = parse_object_id(raw)
    if oid is None:
        raise InvalidIdentifierError(raw, "product")
    return oid


@router.post("", dependencies=[Depends(require_admin)])
async def create_product(
    fields: Optional[Dict[str, Any]] = Body(None),
    products: DocumentRepository = Depends(get_products),
) -> Dict[str, Any]:
    return await products.insert(fields or {})


@router.get("")
async def list_products(
    limitTo: Optional[str] = Query(None),
    products: DocumentRepository = Depends(get_products),
) -> List[Dict[str, Any]]:
    return await products.list(limit=parse_limit(limitTo))


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    products: DocumentRepository = Depends(get_products),
) -> Dict[str, Any]:
    product = await products.get(_product_id(product_id))
    if product is None:
        raise NotFoundError("product", product_id)
    return product


@router.put("/{product_id}", dependencies=[Depends(require_admin)])
async def update_product(
    product_id: str,
    fields: Optional[Dict[str, Any]] = Body(None),
    products: DocumentRepository = Depends(get_products),
) -> Dict[str, Any]:
    return await products.update(_product_id(product_id), fields or {})


@router.delete("/{product_id}", dependencies=[Depends(require_admin)])
async def delete_product(
    product_id: str,
    products: DocumentRepository = Depends(get_products),
) -> Dict[str, Any]:
    return await products.delete(_product_id(product_id))
