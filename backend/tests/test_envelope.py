"""
Tests for the envelope leakage (ACH50) evaluator.

Covers the ACH50 formula, code-limit selection by year and climate zone,
the full blower-door pipeline, validation, and determinism.
"""

import math
from datetime import date

import pytest

from aircheck.engine.code_limits import CodeLimitTable
from aircheck.engine.envelope import calculate_ach50, evaluate_blower_door
from aircheck.engine.errors import (
    ConfigurationMissingError,
    InputValidationError,
    InsufficientDataError,
)
from aircheck.models.blower_door import (
    BlowerDoorTest,
    ComplianceStatus,
    MultipointReading,
    WeatherConditions,
)


def approx(value: float, rel_tol: float = 0.001, abs_tol: float = 0.01):
    return pytest.approx(value, rel=rel_tol, abs=abs_tol)


STANDARD_WEATHER = WeatherConditions(indoor_temp=70, outdoor_temp=70, barometric_pressure=29.92)


def _single_point_test(cfm50: float, volume: float = 15000.0, **kwargs) -> BlowerDoorTest:
    return BlowerDoorTest(
        house_volume=volume,
        weather=kwargs.pop("weather", STANDARD_WEATHER),
        readings=[MultipointReading(house_pressure=50, cfm=cfm50)],
        **kwargs,
    )


# ---------------------------------------------------------------------------
# ACH50 formula
# ---------------------------------------------------------------------------

class TestCalculateACH50:
    def test_normal_house(self):
        """(1200 × 60) / 15000 = 4.8."""
        assert calculate_ach50(1200, 15000) == 4.8

    def test_tight_house(self):
        assert calculate_ach50(600, 15000) == 2.4

    def test_threshold(self):
        assert calculate_ach50(750, 15000) == 3.0

    def test_zero_cfm(self):
        assert calculate_ach50(0, 15000) == 0.0

    def test_rounds_to_two_decimals(self):
        """(333 × 60) / 10000 = 1.998 → 2.0."""
        assert calculate_ach50(333, 10000) == 2.0

    def test_zero_volume(self):
        with pytest.raises(InputValidationError, match="greater than zero"):
            calculate_ach50(1200, 0)

    def test_negative_volume(self):
        with pytest.raises(InputValidationError, match="greater than zero"):
            calculate_ach50(1200, -1000)

    def test_negative_cfm(self):
        with pytest.raises(InputValidationError, match="negative"):
            calculate_ach50(-100, 15000)

    def test_infinite_volume(self):
        with pytest.raises(InputValidationError, match="finite"):
            calculate_ach50(1200, math.inf)


# ---------------------------------------------------------------------------
# Full evaluation
# ---------------------------------------------------------------------------

class TestEvaluateBlowerDoor:
    def test_tight_house_passes(self):
        result = evaluate_blower_door(_single_point_test(600))
        assert result.ach50 == 2.4
        assert result.ach50_limit == 3.0
        assert result.compliance_status == ComplianceStatus.PASS
        assert result.margin == 0.6

    def test_boundary_passes(self):
        result = evaluate_blower_door(_single_point_test(750))
        assert result.ach50 == 3.0
        assert result.compliance_status == ComplianceStatus.PASS

    def test_leaky_house_fails(self):
        result = evaluate_blower_door(_single_point_test(1200))
        assert result.ach50 == 4.8
        assert result.compliance_status == ComplianceStatus.FAIL
        assert result.margin == -1.8

    def test_factors_reported_at_standard_conditions(self):
        result = evaluate_blower_door(_single_point_test(600))
        assert result.weather_correction_factor == 1.0
        assert result.altitude_correction_factor == 1.0
        assert result.weather_corrected_cfm50 == result.cfm50 == 600.0

    def test_single_point_reduced_confidence(self):
        result = evaluate_blower_door(_single_point_test(600))
        assert result.reduced_confidence is True
        assert result.correlation is None

    def test_multipoint(self):
        readings = [
            MultipointReading(house_pressure=p, cfm=110.0 * p ** 0.62)
            for p in (50, 45, 40, 35, 30, 25, 20)
        ]
        test = BlowerDoorTest(house_volume=20000, weather=STANDARD_WEATHER, readings=readings)
        result = evaluate_blower_door(test)
        expected_cfm50 = 110.0 * 50 ** 0.62
        assert result.cfm50 == approx(expected_cfm50)
        assert result.ach50 == approx(expected_cfm50 * 60 / 20000)
        assert result.flow_exponent == approx(0.62, abs_tol=1e-4)
        assert result.correlation == approx(1.0, abs_tol=1e-4)
        assert result.valid_point_count == 7
        assert result.reduced_confidence is False

    def test_altitude_and_weather_applied(self):
        weather = WeatherConditions(indoor_temp=70, outdoor_temp=10, altitude=5000)
        result = evaluate_blower_door(_single_point_test(700, weather=weather))
        expected = round(700 * result.weather_correction_factor * result.altitude_correction_factor, 2)
        assert result.weather_corrected_cfm50 == expected
        assert result.altitude_correction_factor < 1.0
        assert result.weather_correction_factor > 1.0

    def test_ela_reported(self):
        result = evaluate_blower_door(_single_point_test(1000))
        assert result.ela > 0

    def test_surface_area_metric(self):
        result = evaluate_blower_door(_single_point_test(900, surface_area=4500))
        assert result.cfm50_per_surface_area == approx(0.2)

    def test_idempotent(self):
        test = _single_point_test(980, climate_zone="6")
        assert evaluate_blower_door(test) == evaluate_blower_door(test)

    def test_result_is_immutable(self):
        result = evaluate_blower_door(_single_point_test(600))
        with pytest.raises(Exception):
            result.ach50 = 1.0


class TestCodeLimitSelection:
    def test_zone_specific_limit(self):
        """IECC 2021, climate zone 2: 5.0 ACH50."""
        result = evaluate_blower_door(_single_point_test(1200, code_year="2021", climate_zone="2"))
        assert result.ach50_limit == 5.0
        assert result.compliance_status == ComplianceStatus.PASS

    def test_cold_zone_limit(self):
        result = evaluate_blower_door(_single_point_test(1200, code_year="2021", climate_zone="6"))
        assert result.ach50_limit == 3.0
        assert result.compliance_status == ComplianceStatus.FAIL

    def test_zone_required_when_limits_vary(self):
        with pytest.raises(ConfigurationMissingError, match="climate zone"):
            evaluate_blower_door(_single_point_test(1200, code_year="2021"))

    def test_unknown_code_year(self):
        with pytest.raises(ConfigurationMissingError, match="1999"):
            evaluate_blower_door(_single_point_test(1200, code_year="1999"))

    def test_injected_table(self):
        limits = CodeLimitTable.from_mapping({"ach50": {"2020": {"*": 5.0}}})
        result = evaluate_blower_door(_single_point_test(1200), limits)
        assert result.ach50_limit == 5.0
        assert result.compliance_status == ComplianceStatus.PASS


class TestBlowerDoorValidation:
    def test_zero_volume(self):
        with pytest.raises(InputValidationError, match="house_volume"):
            evaluate_blower_door(_single_point_test(1200, volume=0))

    def test_no_usable_readings(self):
        test = BlowerDoorTest(
            house_volume=15000,
            weather=STANDARD_WEATHER,
            readings=[MultipointReading(house_pressure=3, cfm=200)],
        )
        with pytest.raises(InsufficientDataError):
            evaluate_blower_door(test)

    def test_invalid_surface_area(self):
        with pytest.raises(InputValidationError, match="surface_area"):
            evaluate_blower_door(_single_point_test(1200, surface_area=0))


class TestWarnings:
    def test_stale_calibration(self):
        test = _single_point_test(
            800,
            calibration_date=date(2022, 1, 10),
            test_date=date(2024, 6, 1),
        )
        result = evaluate_blower_door(test)
        assert any("calibration" in w for w in result.warnings)

    def test_current_calibration(self):
        test = _single_point_test(
            800,
            calibration_date=date(2024, 1, 10),
            test_date=date(2024, 6, 1),
        )
        result = evaluate_blower_door(test)
        assert not any("calibration" in w for w in result.warnings)
