"""
API routes for ASHRAE 62.2 ventilation evaluation.
"""

from fastapi import APIRouter, HTTPException

from aircheck.engine.ventilation import evaluate_ventilation
from aircheck.models.ventilation import VentilationResult, VentilationTest

router = APIRouter(prefix="/api/v1", tags=["ventilation"])


@router.post("/ventilation/evaluate", response_model=VentilationResult)
async def ventilation_evaluate(data: VentilationTest) -> VentilationResult:
    """
    Check kitchen and bathroom exhaust against their minimums and total
    ventilation against the ASHRAE 62.2 whole-house requirement.
    """
    try:
        return evaluate_ventilation(data)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
