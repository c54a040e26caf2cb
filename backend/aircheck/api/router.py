"""
Top-level API router that aggregates all sub-routers.
"""

from fastapi import APIRouter

from aircheck.api.blower_door import router as blower_door_router
from aircheck.api.ventilation import router as ventilation_router
from aircheck.api.duct_leakage import router as duct_leakage_router
from aircheck.api.code_limits import router as code_limits_router

router = APIRouter()
router.include_router(blower_door_router)
router.include_router(ventilation_router)
router.include_router(duct_leakage_router)
router.include_router(code_limits_router)
