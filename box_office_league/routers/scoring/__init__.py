"""Scoring router bundle."""

from fastapi import APIRouter, Depends

from ...dependencies import verify_api_key
from . import awards, compute, ownership, seasons

router = APIRouter(prefix="/api", tags=["scoring"], dependencies=[Depends(verify_api_key)])
router.include_router(compute.router)
router.include_router(seasons.router)
router.include_router(ownership.router)
router.include_router(awards.router)

__all__ = ["router"]
