"""
API routes for the active code-limit tables.
"""

import os
from functools import lru_cache

from fastapi import APIRouter

from aircheck.engine.code_limits import DEFAULT_CODE_LIMITS, CodeLimitTable
from aircheck.models.code_limits import CodeLimitsOutput

router = APIRouter(prefix="/api/v1", tags=["code-limits"])

CODE_LIMITS_ENV = "AIRCHECK_CODE_LIMITS"


@lru_cache(maxsize=1)
def get_code_limits() -> CodeLimitTable:
    """
    Code limits for the running app: the JSON file named by
    AIRCHECK_CODE_LIMITS if set, otherwise the built-in tables.
    Loaded once per process.
    """
    path = os.environ.get(CODE_LIMITS_ENV)
    if path:
        return CodeLimitTable.from_json(path)
    return DEFAULT_CODE_LIMITS


@router.get("/code-limits", response_model=CodeLimitsOutput)
async def code_limits() -> CodeLimitsOutput:
    """Return the ACH50 and duct leakage limit tables in use."""
    return get_code_limits().to_output()
