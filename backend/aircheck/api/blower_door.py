"""
API routes for blower-door envelope leakage evaluation.
"""

from fastapi import APIRouter, Depends, HTTPException

from aircheck.api.code_limits import get_code_limits
from aircheck.engine.code_limits import CodeLimitTable
from aircheck.engine.envelope import evaluate_blower_door
from aircheck.engine.errors import ConfigurationMissingError
from aircheck.models.blower_door import BlowerDoorResult, BlowerDoorTest

router = APIRouter(prefix="/api/v1", tags=["blower-door"])


@router.post("/blower-door/evaluate", response_model=BlowerDoorResult)
async def blower_door_evaluate(
    data: BlowerDoorTest,
    limits: CodeLimitTable = Depends(get_code_limits),
) -> BlowerDoorResult:
    """
    Fit the multipoint readings, correct CFM50 for weather and altitude,
    and compare ACH50 against the code limit for the test's code year.
    """
    try:
        return evaluate_blower_door(data, limits)
    except ConfigurationMissingError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Calculation error: {str(e)}")
