"""
Weather and altitude corrections for blower-door airflow.

Weather factor (density correction at test time):
    Fw = sqrt(ρ_outdoor / ρ_indoor) × sqrt(Pb / 29.92)
Both densities are moist-air densities at the station barometric pressure.
For dry air the density ratio reduces to T_indoor / T_outdoor (absolute).

Altitude factor (standard atmosphere):
    Fa = sqrt(P_std(altitude) / P_std(0))

The corrected flow is cfm50 × Fw × Fa. Both factors are rounded to four
decimals and reported separately so an inspector can audit each one.
"""

import math
from typing import Optional

import psychrolib

from aircheck.config import (
    BAROMETRIC_RANGE_INHG,
    MAX_WIND_SPEED_MPH,
    PSI_PER_INHG,
    STANDARD_BAROMETRIC_INHG,
    TEMPERATURE_RANGE_F,
)
from aircheck.engine.errors import (
    InputValidationError,
    require_finite,
    require_non_negative,
)
from aircheck.models.blower_door import CorrectionFactors, WeatherConditions


def set_ip_units() -> None:
    """Configure psychrolib for inch-pound units."""
    psychrolib.SetUnitSystem(psychrolib.IP)


def _check_temperature(name: str, value: float) -> float:
    require_finite(name, value)
    low, high = TEMPERATURE_RANGE_F
    if not low <= value <= high:
        raise InputValidationError(
            f"{name} {value} °F is outside the realistic range ({low:g} to {high:g} °F)"
        )
    return value


def _check_humidity(name: str, value: Optional[float]) -> float:
    if value is None:
        return 0.0
    require_finite(name, value)
    if not 0.0 <= value <= 100.0:
        raise InputValidationError(f"{name} must be between 0 and 100 %RH")
    return value


def air_density(Tdb: float, rh_pct: float, pressure_psi: float) -> float:
    """Moist-air density (lb/ft³) from dry-bulb °F, %RH and pressure (psia)."""
    set_ip_units()
    W = psychrolib.GetHumRatioFromRelHum(Tdb, rh_pct / 100.0, pressure_psi)
    return psychrolib.GetMoistAirDensity(Tdb, W, pressure_psi)


def weather_correction_factor(weather: WeatherConditions) -> float:
    """Density correction from indoor/outdoor conditions and barometric pressure."""
    indoor = _check_temperature("indoor_temp", weather.indoor_temp)
    outdoor = _check_temperature("outdoor_temp", weather.outdoor_temp)
    rh_in = _check_humidity("indoor_humidity", weather.indoor_humidity)
    rh_out = _check_humidity("outdoor_humidity", weather.outdoor_humidity)

    baro = require_finite("barometric_pressure", weather.barometric_pressure)
    low, high = BAROMETRIC_RANGE_INHG
    if not low <= baro <= high:
        raise InputValidationError(
            f"Barometric pressure out of realistic range ({low:g}-{high:g} inHg)"
        )

    pressure_psi = baro * PSI_PER_INHG
    rho_in = air_density(indoor, rh_in, pressure_psi)
    rho_out = air_density(outdoor, rh_out, pressure_psi)

    factor = math.sqrt(rho_out / rho_in) * math.sqrt(baro / STANDARD_BAROMETRIC_INHG)
    return round(factor, 4)


def altitude_correction_factor(altitude_ft: float) -> float:
    """Standard-atmosphere density ratio at elevation (1.0 at sea level)."""
    require_non_negative("altitude", altitude_ft)
    if altitude_ft == 0:
        return 1.0
    set_ip_units()
    ratio = psychrolib.GetStandardAtmPressure(altitude_ft) / psychrolib.GetStandardAtmPressure(0.0)
    return round(math.sqrt(ratio), 4)


def correction_factors(weather: WeatherConditions) -> CorrectionFactors:
    """Compute both correction factors plus any field-condition warnings."""
    warnings = []
    if weather.wind_speed is not None:
        wind = require_non_negative("wind_speed", weather.wind_speed)
        if wind > MAX_WIND_SPEED_MPH:
            warnings.append(
                f"Wind speed {wind:g} mph exceeds {MAX_WIND_SPEED_MPH:g} mph; "
                "readings may be unreliable"
            )

    return CorrectionFactors(
        weather=weather_correction_factor(weather),
        altitude=altitude_correction_factor(weather.altitude),
        warnings=tuple(warnings),
    )


def apply_corrections(cfm50: float, factors: CorrectionFactors) -> float:
    """Extrapolate measured CFM50 to reference conditions."""
    return round(cfm50 * factors.weather * factors.altitude, 2)
