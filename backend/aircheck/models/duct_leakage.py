"""
Pydantic models for duct leakage testing (total and to-outside).
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from aircheck.config import DEFAULT_CODE_YEAR, DUCT_TEST_PRESSURE_PA, LimitBasis


class RegisterType(str, Enum):
    SUPPLY = "supply"
    RETURN = "return"


class PressurePanGrade(str, Enum):
    PASS = "pass"          # ≤ 1.0 Pa
    MARGINAL = "marginal"  # ≤ 3.0 Pa
    FAIL = "fail"


class PressurePanReading(BaseModel):
    location: str
    register_type: RegisterType = RegisterType.SUPPLY
    reading: float                       # Pa


class DuctLeakageTest(BaseModel):
    """
    Input for a duct leakage evaluation. Either test may be omitted.

    Each test takes a single CFM value or a list of repeated readings that
    are averaged, not both.
    """
    system_airflow: float                # CFM, design air handler flow
    conditioned_area: Optional[float] = None  # ft²

    cfm25_total: Optional[float] = None
    cfm25_total_readings: list[float] = Field(default_factory=list)
    total_test_pressure: float = DUCT_TEST_PRESSURE_PA      # Pa

    cfm25_outside: Optional[float] = None
    cfm25_outside_readings: list[float] = Field(default_factory=list)
    outside_test_pressure: float = DUCT_TEST_PRESSURE_PA    # Pa
    outside_house_pressure: Optional[float] = None          # Pa during the DLO test

    pressure_pan_readings: list[PressurePanReading] = Field(default_factory=list)

    code_year: str = DEFAULT_CODE_YEAR


class CFM25Average(BaseModel):
    """Mean of repeated leakage readings with any readings far off the median."""
    model_config = ConfigDict(frozen=True)

    average: float
    reading_count: int
    outliers: tuple[float, ...] = ()

    @property
    def has_outliers(self) -> bool:
        return bool(self.outliers)


class PressurePanResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: str
    register_type: RegisterType
    reading: float
    grade: PressurePanGrade


class DuctLeakageResult(BaseModel):
    """Result of a duct leakage evaluation. TDL and DLO verdicts are independent."""
    model_config = ConfigDict(frozen=True)

    cfm25_total: Optional[float] = None      # normalized to 25 Pa
    cfm25_outside: Optional[float] = None
    total_percent_of_flow: Optional[float] = None
    outside_percent_of_flow: Optional[float] = None
    total_per_100_sqft: Optional[float] = None
    outside_per_100_sqft: Optional[float] = None

    tdl_limit: float
    dlo_limit: float
    limit_basis: LimitBasis
    meets_code_tdl: Optional[bool] = None    # None when the test was not performed
    meets_code_dlo: Optional[bool] = None
    tdl_margin: Optional[float] = None       # limit - value on the limit basis
    dlo_margin: Optional[float] = None

    total_average: Optional[CFM25Average] = None    # set when readings were averaged
    outside_average: Optional[CFM25Average] = None

    pressure_pan: tuple[PressurePanResult, ...] = ()
    code_year: str
    warnings: tuple[str, ...] = ()
