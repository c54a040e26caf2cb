"""
Pydantic models for blower-door envelope leakage testing.

Provides models for:
  - Multipoint readings (house pressure, fan pressure, ring, CFM)
  - Weather snapshot taken at test time
  - The complete test input and its computed result
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from aircheck.config import DEFAULT_CODE_YEAR, STANDARD_BAROMETRIC_INHG


class RingConfiguration(str, Enum):
    OPEN = "open"
    RING_A = "ring_a"
    RING_B = "ring_b"
    RING_C = "ring_c"
    RING_D = "ring_d"


class BasementType(str, Enum):
    NONE = "none"
    CONDITIONED = "conditioned"
    UNCONDITIONED = "unconditioned"
    CRAWLSPACE = "crawlspace"
    SLAB = "slab"


class ComplianceStatus(str, Enum):
    PASS = "pass"
    FAIL = "fail"


class MultipointReading(BaseModel):
    """One station of a blower-door test."""
    house_pressure: float                # Pa; magnitude is used, sign is test direction
    fan_pressure: float = 0.0            # Pa
    ring_configuration: RingConfiguration = RingConfiguration.OPEN
    cfm: Optional[float] = None          # derived from fan calibration when omitted


class WeatherConditions(BaseModel):
    """Weather snapshot at test time."""
    outdoor_temp: float                  # °F
    indoor_temp: float = 70.0            # °F
    outdoor_humidity: Optional[float] = None  # %RH
    indoor_humidity: Optional[float] = None   # %RH
    wind_speed: Optional[float] = None   # mph
    barometric_pressure: float = STANDARD_BAROMETRIC_INHG  # inHg
    altitude: float = 0.0                # ft above sea level


class BlowerDoorTest(BaseModel):
    """Input for a blower-door envelope leakage evaluation."""

    # Equipment
    equipment_serial: Optional[str] = None
    calibration_date: Optional[date] = None
    test_date: Optional[date] = None

    # House
    house_volume: float                  # ft³
    conditioned_area: Optional[float] = None  # ft²
    surface_area: Optional[float] = None      # ft² of enclosure surface
    stories: Optional[int] = None
    basement_type: Optional[BasementType] = None

    weather: WeatherConditions
    readings: list[MultipointReading] = Field(default_factory=list)

    code_year: str = DEFAULT_CODE_YEAR
    climate_zone: Optional[str] = None


class RegressionOutput(BaseModel):
    """Power-law fit CFM = C × ΔP^n over the valid readings."""
    model_config = ConfigDict(frozen=True)

    flow_coefficient: float              # C
    flow_exponent: float                 # n
    correlation: Optional[float] = None  # r of ln(CFM) vs ln(ΔP); None without a fit
    valid_point_count: int
    cfm50: float
    reduced_confidence: bool
    exponent_in_range: bool
    warnings: tuple[str, ...] = ()


class CorrectionFactors(BaseModel):
    """Weather and altitude corrections, reported separately."""
    model_config = ConfigDict(frozen=True)

    weather: float
    altitude: float
    warnings: tuple[str, ...] = ()


class BlowerDoorResult(BaseModel):
    """Result of a blower-door evaluation."""
    model_config = ConfigDict(frozen=True)

    flow_coefficient: float
    flow_exponent: float
    correlation: Optional[float] = None
    valid_point_count: int
    reduced_confidence: bool
    exponent_in_range: bool

    cfm50: float                         # from the fit, before corrections
    weather_correction_factor: float
    altitude_correction_factor: float
    weather_corrected_cfm50: float       # cfm50 × weather × altitude

    ach50: float
    ach50_limit: float
    margin: float                        # limit - ach50 (negative = over limit)
    compliance_status: ComplianceStatus
    code_year: str
    climate_zone: Optional[str] = None

    ela: float                           # in² at 4 Pa
    cfm50_per_surface_area: Optional[float] = None

    warnings: tuple[str, ...] = ()
