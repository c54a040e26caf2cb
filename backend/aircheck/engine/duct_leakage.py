"""
Duct leakage evaluation.

Provides:
  - Pressure normalization: CFM25 = CFM × (25 / P)^0.6
  - Leakage as a percentage of system airflow and per 100 ft² of floor area
  - Independent total (TDL) and to-outside (DLO) verdicts against the code
    year's limits, on the basis named by the limit table
  - Averaging of repeated readings, flagging readings far off the median
  - Pressure-pan grading of individual registers
"""

import logging
from typing import Optional

from aircheck.config import (
    CFM25_OUTLIER_DEVIATION,
    CFM25_OUTLIER_MIN_READINGS,
    DLO_HOUSE_PRESSURE_PA,
    DLO_HOUSE_PRESSURE_TOLERANCE_PA,
    DUCT_FLOW_EXPONENT,
    DUCT_TEST_PRESSURE_PA,
    LimitBasis,
    PRESSURE_PAN_MARGINAL_PA,
    PRESSURE_PAN_PASS_PA,
)
from aircheck.engine.code_limits import DEFAULT_CODE_LIMITS, CodeLimitTable
from aircheck.engine.errors import (
    InputValidationError,
    require_finite,
    require_non_negative,
    require_positive,
)
from aircheck.models.duct_leakage import (
    CFM25Average,
    DuctLeakageResult,
    DuctLeakageTest,
    PressurePanGrade,
    PressurePanReading,
    PressurePanResult,
)

logger = logging.getLogger(__name__)


def convert_pressure(cfm: float, from_pressure: float, to_pressure: float) -> float:
    """Convert leakage airflow between test pressures with the duct exponent."""
    require_non_negative("cfm", cfm)
    require_positive("from_pressure", from_pressure)
    require_positive("to_pressure", to_pressure)
    return cfm * (to_pressure / from_pressure) ** DUCT_FLOW_EXPONENT


def percent_of_flow(cfm25: float, system_airflow: float) -> float:
    """Leakage as a percentage of system airflow, 2 decimals."""
    require_positive("system_airflow", system_airflow)
    require_non_negative("cfm25", cfm25)
    return round((cfm25 / system_airflow) * 100.0, 2)


def per_100_sqft(cfm25: float, conditioned_area: float) -> float:
    """Leakage in CFM25 per 100 ft² of conditioned floor area, 2 decimals."""
    require_positive("conditioned_area", conditioned_area)
    require_non_negative("cfm25", cfm25)
    return round((cfm25 / conditioned_area) * 100.0, 2)


def grade_pressure_pan(reading: PressurePanReading) -> PressurePanResult:
    value = abs(require_finite("pressure pan reading", reading.reading))
    if value <= PRESSURE_PAN_PASS_PA:
        grade = PressurePanGrade.PASS
    elif value <= PRESSURE_PAN_MARGINAL_PA:
        grade = PressurePanGrade.MARGINAL
    else:
        grade = PressurePanGrade.FAIL
    return PressurePanResult(
        location=reading.location,
        register_type=reading.register_type,
        reading=reading.reading,
        grade=grade,
    )


def average_cfm25(readings: list[float]) -> CFM25Average:
    """
    Average repeated leakage readings.

    With at least three readings, any reading more than 20 % away from the
    median (the upper middle value for an even count) is reported as an
    outlier. Outliers are still included in the average.
    """
    if not readings:
        raise InputValidationError("Cannot average an empty list of CFM25 readings")
    for value in readings:
        require_non_negative("CFM25 reading", value)

    average = sum(readings) / len(readings)

    outliers = []
    if len(readings) >= CFM25_OUTLIER_MIN_READINGS:
        median = sorted(readings)[len(readings) // 2]
        for value in readings:
            if median == 0:
                off = value != 0
            else:
                off = abs(value - median) / median > CFM25_OUTLIER_DEVIATION
            if off:
                outliers.append(value)

    return CFM25Average(
        average=round(average, 2),
        reading_count=len(readings),
        outliers=tuple(outliers),
    )


def _measured(
    name: str,
    value: Optional[float],
    readings: list[float],
) -> tuple[Optional[float], Optional[CFM25Average]]:
    """Resolve one test's leakage from a single value or averaged readings."""
    if value is not None and readings:
        raise InputValidationError(
            f"Give either {name} or {name}_readings, not both"
        )
    if readings:
        averaged = average_cfm25(readings)
        return averaged.average, averaged
    return value, None


def _normalized(name: str, cfm: Optional[float], pressure: float) -> Optional[float]:
    if cfm is None:
        return None
    require_non_negative(name, cfm)
    pressure = abs(require_finite(f"{name} test pressure", pressure))
    if pressure == DUCT_TEST_PRESSURE_PA:
        return cfm
    return round(convert_pressure(cfm, pressure, DUCT_TEST_PRESSURE_PA), 2)


def evaluate_duct_leakage(
    test: DuctLeakageTest,
    limits: CodeLimitTable = DEFAULT_CODE_LIMITS,
) -> DuctLeakageResult:
    """
    Evaluate total and to-outside duct leakage for one system.

    Raises:
        InputValidationError: invalid airflow/area or inconsistent readings.
        ConfigurationMissingError: no duct limit for the code year.
    """
    require_positive("system_airflow", test.system_airflow)
    if test.conditioned_area is not None:
        require_positive("conditioned_area", test.conditioned_area)

    total_cfm, total_average = _measured("cfm25_total", test.cfm25_total, test.cfm25_total_readings)
    outside_cfm, outside_average = _measured(
        "cfm25_outside", test.cfm25_outside, test.cfm25_outside_readings
    )
    if total_cfm is None and outside_cfm is None:
        raise InputValidationError(
            "At least one of cfm25_total or cfm25_outside (or their readings) is required"
        )

    limit = limits.duct_limit(test.code_year)
    if limit.basis == LimitBasis.PER_100_SQFT and test.conditioned_area is None:
        raise InputValidationError(
            f"Code year {test.code_year} limits leakage per 100 ft²; "
            "conditioned_area is required"
        )

    total = _normalized("cfm25_total", total_cfm, test.total_test_pressure)
    outside = _normalized("cfm25_outside", outside_cfm, test.outside_test_pressure)

    if total is not None and outside is not None and outside > total:
        raise InputValidationError(
            f"Leakage to outside ({outside:g} CFM25) cannot exceed total "
            f"leakage ({total:g} CFM25); check measurements"
        )

    warnings = []
    for label, averaged in (("Total", total_average), ("To-outside", outside_average)):
        if averaged is not None and averaged.has_outliers:
            values = ", ".join(f"{v:g}" for v in averaged.outliers)
            warnings.append(
                f"{label} leakage readings {values} CFM differ from the median by more "
                f"than {CFM25_OUTLIER_DEVIATION:.0%}; consider retesting"
            )

    if outside is not None and test.outside_house_pressure is not None:
        house = require_finite("outside_house_pressure", test.outside_house_pressure)
        if abs(house - DLO_HOUSE_PRESSURE_PA) > DLO_HOUSE_PRESSURE_TOLERANCE_PA:
            warnings.append(
                f"House pressure {house:g} Pa during the leakage-to-outside test "
                f"should be {DLO_HOUSE_PRESSURE_PA:g} ± {DLO_HOUSE_PRESSURE_TOLERANCE_PA:g} Pa"
            )

    def metrics(cfm25):
        if cfm25 is None:
            return None, None
        pct = percent_of_flow(cfm25, test.system_airflow)
        area = per_100_sqft(cfm25, test.conditioned_area) if test.conditioned_area else None
        return pct, area

    total_pct, total_area = metrics(total)
    outside_pct, outside_area = metrics(outside)

    def compare(pct, area, threshold) -> tuple[Optional[bool], Optional[float]]:
        value = pct if limit.basis == LimitBasis.PERCENT_OF_FLOW else area
        if value is None:
            return None, None
        return value <= threshold, round(threshold - value, 2)

    meets_tdl, tdl_margin = compare(total_pct, total_area, limit.tdl)
    meets_dlo, dlo_margin = compare(outside_pct, outside_area, limit.dlo)

    logger.debug(
        "Duct leakage (%s): total=%s outside=%s tdl=%s dlo=%s",
        limit.basis.value, total, outside, meets_tdl, meets_dlo,
    )

    return DuctLeakageResult(
        cfm25_total=total,
        cfm25_outside=outside,
        total_percent_of_flow=total_pct,
        outside_percent_of_flow=outside_pct,
        total_per_100_sqft=total_area,
        outside_per_100_sqft=outside_area,
        tdl_limit=limit.tdl,
        dlo_limit=limit.dlo,
        limit_basis=limit.basis,
        meets_code_tdl=meets_tdl,
        meets_code_dlo=meets_dlo,
        tdl_margin=tdl_margin,
        dlo_margin=dlo_margin,
        total_average=total_average,
        outside_average=outside_average,
        pressure_pan=tuple(grade_pressure_pan(r) for r in test.pressure_pan_readings),
        code_year=limit.code_year,
        warnings=tuple(warnings),
    )
