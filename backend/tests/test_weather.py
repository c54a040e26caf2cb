"""
Tests for weather and altitude corrections.
"""

import math

import pytest

from aircheck.engine.errors import InputValidationError
from aircheck.engine.weather import (
    altitude_correction_factor,
    apply_corrections,
    correction_factors,
    weather_correction_factor,
)
from aircheck.models.blower_door import CorrectionFactors, WeatherConditions


def approx(value: float, rel_tol: float = 0.001, abs_tol: float = 0.001):
    return pytest.approx(value, rel=rel_tol, abs=abs_tol)


def _rankine_factor(indoor: float, outdoor: float, baro: float) -> float:
    """Dry-air form: sqrt(T_in / T_out) × sqrt(Pb / 29.92)."""
    return math.sqrt((indoor + 459.67) / (outdoor + 459.67)) * math.sqrt(baro / 29.92)


class TestWeatherFactor:
    def test_standard_conditions_no_correction(self):
        weather = WeatherConditions(indoor_temp=70, outdoor_temp=70, barometric_pressure=29.92)
        assert weather_correction_factor(weather) == 1.0

    def test_cold_outdoor_increases_flow(self):
        """Cold outdoor air is denser: factor > 1."""
        weather = WeatherConditions(indoor_temp=70, outdoor_temp=0, barometric_pressure=30.2)
        factor = weather_correction_factor(weather)
        assert 1.0 < factor < 1.15

    def test_hot_outdoor_decreases_flow(self):
        weather = WeatherConditions(indoor_temp=70, outdoor_temp=95, barometric_pressure=29.5)
        factor = weather_correction_factor(weather)
        assert 0.85 < factor < 1.0

    def test_low_barometric_pressure(self):
        """√(25.0 / 29.92) ≈ 0.914."""
        weather = WeatherConditions(indoor_temp=70, outdoor_temp=70, barometric_pressure=25.0)
        assert weather_correction_factor(weather) == approx(math.sqrt(25.0 / 29.92))

    def test_high_barometric_pressure(self):
        weather = WeatherConditions(indoor_temp=70, outdoor_temp=70, barometric_pressure=31.0)
        assert weather_correction_factor(weather) == approx(1.018)

    def test_dry_air_matches_absolute_temperature_ratio(self):
        weather = WeatherConditions(indoor_temp=68, outdoor_temp=-20, barometric_pressure=30.5)
        assert weather_correction_factor(weather) == approx(_rankine_factor(68, -20, 30.5))

    def test_humid_outdoor_air_is_lighter(self):
        dry = WeatherConditions(indoor_temp=72, outdoor_temp=90)
        humid = WeatherConditions(indoor_temp=72, outdoor_temp=90, outdoor_humidity=80)
        assert weather_correction_factor(humid) < weather_correction_factor(dry)

    def test_rounded_to_four_decimals(self):
        weather = WeatherConditions(indoor_temp=71, outdoor_temp=13, barometric_pressure=29.71)
        factor = weather_correction_factor(weather)
        assert factor == round(factor, 4)


class TestWeatherValidation:
    def test_barometric_too_low(self):
        weather = WeatherConditions(outdoor_temp=50, barometric_pressure=15.0)
        with pytest.raises(InputValidationError, match="Barometric"):
            weather_correction_factor(weather)

    def test_barometric_too_high(self):
        weather = WeatherConditions(outdoor_temp=50, barometric_pressure=35.0)
        with pytest.raises(InputValidationError):
            weather_correction_factor(weather)

    def test_unrealistic_temperature(self):
        weather = WeatherConditions(outdoor_temp=-500)
        with pytest.raises(InputValidationError, match="outdoor_temp"):
            weather_correction_factor(weather)

    def test_non_finite_temperature(self):
        weather = WeatherConditions(outdoor_temp=math.nan)
        with pytest.raises(InputValidationError, match="finite"):
            weather_correction_factor(weather)

    def test_humidity_out_of_range(self):
        weather = WeatherConditions(outdoor_temp=50, indoor_humidity=120)
        with pytest.raises(InputValidationError, match="indoor_humidity"):
            weather_correction_factor(weather)


class TestAltitudeFactor:
    def test_sea_level(self):
        assert altitude_correction_factor(0.0) == 1.0

    def test_denver(self):
        """Standard atmosphere at 5000 ft: P/P0 ≈ 0.832 → factor ≈ 0.912."""
        assert altitude_correction_factor(5000.0) == approx(0.912, abs_tol=0.002)

    def test_decreases_with_altitude(self):
        assert altitude_correction_factor(8000.0) < altitude_correction_factor(2000.0) < 1.0

    def test_negative_altitude_rejected(self):
        with pytest.raises(InputValidationError, match="negative"):
            altitude_correction_factor(-100.0)


class TestCorrectionFactors:
    def test_both_factors_reported(self):
        weather = WeatherConditions(outdoor_temp=30, altitude=900)
        factors = correction_factors(weather)
        assert factors.weather > 1.0
        assert factors.altitude < 1.0

    def test_high_wind_warning(self):
        weather = WeatherConditions(outdoor_temp=50, wind_speed=18)
        factors = correction_factors(weather)
        assert any("Wind speed" in w for w in factors.warnings)

    def test_calm_wind_no_warning(self):
        weather = WeatherConditions(outdoor_temp=50, wind_speed=3)
        assert correction_factors(weather).warnings == ()

    def test_apply_corrections(self):
        factors = CorrectionFactors(weather=1.05, altitude=0.98)
        assert apply_corrections(1000.0, factors) == approx(1029.0)
