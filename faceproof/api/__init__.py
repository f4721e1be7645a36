"""API v1 router initialization."""
from fastapi import APIRouter

from .identity import router as identity_router

# Create v1 router
router = APIRouter()

router.include_router(
    identity_router,
    prefix="/identity",
    tags=["identity"]
)
