"""
API routes for duct leakage evaluation.
"""

from fastapi import APIRouter, Depends, HTTPException

from aircheck.api.code_limits import get_code_limits
from aircheck.engine.code_limits import CodeLimitTable
from aircheck.engine.duct_leakage import evaluate_duct_leakage
from aircheck.engine.errors import ConfigurationMissingError
from aircheck.models.duct_leakage import DuctLeakageResult, DuctLeakageTest

router = APIRouter(prefix="/api/v1", tags=["duct-leakage"])


@router.post("/duct-leakage/evaluate", response_model=DuctLeakageResult)
async def duct_leakage_evaluate(
    data: DuctLeakageTest,
    limits: CodeLimitTable = Depends(get_code_limits),
) -> DuctLeakageResult:
    """
    Compute total and to-outside leakage and report each verdict
    independently against the code year's limits.
    """
    try:
        return evaluate_duct_leakage(data, limits)
    except ConfigurationMissingError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
