"""
Envelope leakage evaluation (ACH50).

Pipeline: multipoint regression → weather/altitude correction →
    ACH50 = (corrected CFM50 × 60) / house volume
compared against the code limit for the test's code year and climate zone.
"""

import logging
from typing import Optional

from aircheck.config import CALIBRATION_INTERVAL_DAYS
from aircheck.engine.code_limits import DEFAULT_CODE_LIMITS, CodeLimitTable
from aircheck.engine.errors import require_non_negative, require_positive
from aircheck.engine.regression import effective_leakage_area, fit_power_law
from aircheck.engine.weather import apply_corrections, correction_factors
from aircheck.models.blower_door import (
    BlowerDoorResult,
    BlowerDoorTest,
    ComplianceStatus,
)

logger = logging.getLogger(__name__)


def calculate_ach50(cfm50: float, house_volume: float) -> float:
    """ACH50 = (CFM50 × 60) / volume, rounded to 2 decimals."""
    require_positive("house_volume", house_volume)
    require_non_negative("cfm50", cfm50)
    return round((cfm50 * 60.0) / house_volume, 2)


def _calibration_warning(test: BlowerDoorTest) -> Optional[str]:
    if test.calibration_date is None or test.test_date is None:
        return None
    age = (test.test_date - test.calibration_date).days
    if age > CALIBRATION_INTERVAL_DAYS:
        return (
            f"Equipment calibration is {age} days old at test time "
            f"(limit {CALIBRATION_INTERVAL_DAYS} days)"
        )
    return None


def evaluate_blower_door(
    test: BlowerDoorTest,
    limits: CodeLimitTable = DEFAULT_CODE_LIMITS,
) -> BlowerDoorResult:
    """
    Evaluate a blower-door test end to end.

    Raises:
        InputValidationError: invalid house or weather inputs.
        InsufficientDataError: no usable multipoint reading.
        ConfigurationMissingError: no ACH50 limit for the code year / zone.
    """
    # Validate house inputs before any computation
    require_positive("house_volume", test.house_volume)
    if test.surface_area is not None:
        require_positive("surface_area", test.surface_area)

    # Resolve the limit first so a missing configuration never yields a result
    limit = limits.ach50_limit(test.code_year, test.climate_zone)

    fit = fit_power_law(test.readings)
    factors = correction_factors(test.weather)
    corrected = apply_corrections(fit.cfm50, factors)

    ach50 = calculate_ach50(corrected, test.house_volume)
    status = ComplianceStatus.PASS if ach50 <= limit.ach50 else ComplianceStatus.FAIL

    per_surface = None
    if test.surface_area is not None:
        per_surface = round(corrected / test.surface_area, 4)

    warnings = list(fit.warnings) + list(factors.warnings)
    calibration = _calibration_warning(test)
    if calibration:
        warnings.append(calibration)

    logger.debug(
        "Blower door: cfm50=%.2f corrected=%.2f ach50=%.2f limit=%.2f (%s)",
        fit.cfm50, corrected, ach50, limit.ach50, status.value,
    )

    return BlowerDoorResult(
        flow_coefficient=fit.flow_coefficient,
        flow_exponent=fit.flow_exponent,
        correlation=fit.correlation,
        valid_point_count=fit.valid_point_count,
        reduced_confidence=fit.reduced_confidence,
        exponent_in_range=fit.exponent_in_range,
        cfm50=fit.cfm50,
        weather_correction_factor=factors.weather,
        altitude_correction_factor=factors.altitude,
        weather_corrected_cfm50=corrected,
        ach50=ach50,
        ach50_limit=limit.ach50,
        margin=round(limit.ach50 - ach50, 2),
        compliance_status=status,
        code_year=limit.code_year,
        climate_zone=test.climate_zone,
        ela=effective_leakage_area(fit.flow_coefficient, fit.flow_exponent),
        cfm50_per_surface_area=per_surface,
        warnings=tuple(warnings),
    )
