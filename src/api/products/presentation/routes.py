"""Placeholder product routes demonstrating role-gated access.

Nothing is stored; each route acknowledges the call.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from identity.dependencies.authentication import require_roles
from identity.domain.aggregates import User
from identity.domain.value_objects import Role
from products.presentation.models import (
    ProductAcknowledgement,
    ProductCreatedResponse,
    ProductRequest,
)

router = APIRouter(
    prefix="/products",
    tags=["products"],
)

require_user = require_roles(Role.USER)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    request: ProductRequest,
    principal: Annotated[User, Depends(require_user)],
) -> ProductCreatedResponse:
    return ProductCreatedResponse(
        message="Product created successfully", user_id=principal.id.value
    )


@router.get("", dependencies=[Depends(require_user)])
async def list_products() -> ProductAcknowledgement:
    return ProductAcknowledgement(message="This action returns all products")


@router.get("/{product_id}", dependencies=[Depends(require_user)])
async def get_product(product_id: str) -> ProductAcknowledgement:
    return ProductAcknowledgement(message=f"This action returns a #{product_id} product")


@router.patch("/{product_id}", dependencies=[Depends(require_user)])
async def update_product(
    product_id: str, request: ProductRequest
) -> ProductAcknowledgement:
    return ProductAcknowledgement(message=f"This action updates a #{product_id} product")


@router.delete("/{product_id}", dependencies=[Depends(require_user)])
async def delete_product(product_id: str) -> ProductAcknowledgement:
    return ProductAcknowledgement(message=f"This action removes a #{product_id} product")
