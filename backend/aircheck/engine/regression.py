"""
Blower-door multipoint regression.

Fits the envelope power law
    CFM = C × ΔP^n
by least squares on ln(CFM) vs ln(ΔP), following ASTM E779 / RESNET 380.

A reading is excluded when its house pressure magnitude is below
MIN_HOUSE_PRESSURE_PA or its airflow is not positive. With fewer than two
distinct valid pressures no fit is possible; the single-point path
extrapolates the measured flow to 50 Pa with the default exponent and marks
the result as reduced confidence.
"""

import logging
import math

import numpy as np
from scipy.stats import linregress

from aircheck.config import (
    BLOWER_DOOR_RING_CALIBRATION,
    DEFAULT_FLOW_EXPONENT,
    ELA_AIR_DENSITY_KG_M3,
    ELA_DISCHARGE_COEFFICIENT,
    ELA_REFERENCE_PRESSURE_PA,
    FLOW_EXPONENT_RANGE,
    M3S_PER_CFM,
    MIN_CORRELATION,
    MIN_HOUSE_PRESSURE_PA,
    OUTLIER_DEVIATION,
    REFERENCE_PRESSURE_PA,
    SQIN_PER_M2,
)
from aircheck.engine.errors import InsufficientDataError, require_finite
from aircheck.models.blower_door import MultipointReading, RegressionOutput

logger = logging.getLogger(__name__)


def fan_flow(fan_pressure: float, ring: str) -> float:
    """
    Convert fan pressure to airflow with the fan's calibration curve for the
    selected flow ring. Non-positive fan pressure means no measurable flow.
    """
    require_finite("fan_pressure", fan_pressure)
    if fan_pressure <= 0:
        return 0.0
    cal = BLOWER_DOOR_RING_CALIBRATION[ring]
    return cal["C"] * fan_pressure ** cal["n"]


def reading_flow(reading: MultipointReading) -> float:
    """Measured airflow for a reading, from the fan curve if CFM was not entered."""
    if reading.cfm is not None:
        return require_finite("cfm", reading.cfm)
    return fan_flow(reading.fan_pressure, reading.ring_configuration.value)


def valid_points(readings: list[MultipointReading]) -> list[tuple[float, float]]:
    """Return (|ΔP|, CFM) for every reading usable in the fit, in entry order."""
    points = []
    for idx, reading in enumerate(readings):
        pressure = abs(require_finite("house_pressure", reading.house_pressure))
        cfm = reading_flow(reading)
        if pressure < MIN_HOUSE_PRESSURE_PA or cfm <= 0:
            logger.debug(
                "Excluding reading %d (house_pressure=%s, cfm=%s)",
                idx, reading.house_pressure, cfm,
            )
            continue
        points.append((pressure, cfm))
    return points


def fit_power_law(readings: list[MultipointReading]) -> RegressionOutput:
    """
    Fit CFM = C × ΔP^n to the valid readings and extrapolate to CFM50.

    Raises InsufficientDataError when no reading is usable.
    """
    points = valid_points(readings)
    if not points:
        raise InsufficientDataError(
            "No valid blower-door readings: at least one reading needs a house "
            f"pressure of {MIN_HOUSE_PRESSURE_PA:g} Pa or more and positive airflow"
        )

    pressures = np.array([p for p, _ in points])
    flows = np.array([q for _, q in points])

    if np.unique(pressures).size < 2:
        return _single_point(float(pressures[0]), float(flows.mean()), len(points))

    x = np.log(pressures)
    y = np.log(flows)
    fit = linregress(x, y)

    n = float(fit.slope)
    C = math.exp(float(fit.intercept))
    r = float(fit.rvalue)
    cfm50 = C * REFERENCE_PRESSURE_PA ** n

    warnings = []
    low, high = FLOW_EXPONENT_RANGE
    exponent_in_range = low <= round(n, 4) <= high
    if not exponent_in_range:
        logger.warning("Flow exponent %.3f outside expected range %s–%s", n, low, high)
        warnings.append(
            f"Flow exponent {n:.3f} is outside the expected {low}–{high} range; "
            "check readings for errors"
        )
    if r < MIN_CORRELATION:
        warnings.append(
            f"Correlation {r:.4f} is below the recommended {MIN_CORRELATION}"
        )

    predicted = C * pressures ** n
    deviation = np.abs(flows - predicted) / predicted
    for pressure, dev in zip(pressures, deviation):
        if dev > OUTLIER_DEVIATION:
            warnings.append(
                f"Reading at {pressure:g} Pa deviates {dev * 100:.0f}% from the fitted curve"
            )

    return RegressionOutput(
        flow_coefficient=round(C, 4),
        flow_exponent=round(n, 4),
        correlation=round(r, 4),
        valid_point_count=len(points),
        cfm50=round(cfm50, 2),
        reduced_confidence=False,
        exponent_in_range=exponent_in_range,
        warnings=tuple(warnings),
    )


def _single_point(pressure: float, cfm: float, count: int) -> RegressionOutput:
    """Extrapolate one measured pressure to 50 Pa with the default exponent."""
    n = DEFAULT_FLOW_EXPONENT
    C = cfm / pressure ** n
    cfm50 = cfm * (REFERENCE_PRESSURE_PA / pressure) ** n

    return RegressionOutput(
        flow_coefficient=round(C, 4),
        flow_exponent=n,
        correlation=None,
        valid_point_count=count,
        cfm50=round(cfm50, 2),
        reduced_confidence=True,
        exponent_in_range=True,
        warnings=(
            f"Single-point test at {pressure:g} Pa: no regression fit, "
            f"flow exponent assumed {n}",
        ),
    )


def effective_leakage_area(flow_coefficient: float, flow_exponent: float) -> float:
    """
    Effective leakage area (in²) at 4 Pa, LBL method:
        ELA = Q4 × sqrt(ρ / (2 × ΔP)) / Cd
    """
    q4_cfm = flow_coefficient * ELA_REFERENCE_PRESSURE_PA ** flow_exponent
    q4 = q4_cfm * M3S_PER_CFM
    area_m2 = q4 * math.sqrt(ELA_AIR_DENSITY_KG_M3 / (2.0 * ELA_REFERENCE_PRESSURE_PA))
    area_m2 /= ELA_DISCHARGE_COEFFICIENT
    return round(area_m2 * SQIN_PER_M2, 2)
