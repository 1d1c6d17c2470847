"""Identity presentation layer.

Routes are grouped by concern (accounts and sessions, API keys, federated
users). Each handler declares its own authentication or role dependency.
"""

from __future__ import annotations

from fastapi import APIRouter

from identity.presentation import api_keys, auth, federated_users

router = APIRouter(
    prefix="/auth",
)

router.include_router(auth.router)
router.include_router(api_keys.router)
router.include_router(federated_users.router)

__all__ = ["router"]
