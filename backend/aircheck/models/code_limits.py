"""
Pydantic models for code-limit lookups.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from aircheck.config import LimitBasis


class Ach50Limit(BaseModel):
    """Envelope leakage limit resolved for one code year and climate zone."""
    model_config = ConfigDict(frozen=True)

    code_year: str
    climate_zone: Optional[str] = None   # None when the limit applies to every zone
    ach50: float


class DuctLeakageLimit(BaseModel):
    """Duct leakage limits for one code year."""
    model_config = ConfigDict(frozen=True)

    code_year: str
    tdl: float
    dlo: float
    basis: LimitBasis = LimitBasis.PERCENT_OF_FLOW


class CodeLimitsOutput(BaseModel):
    """The active code-limit tables, as served over the API."""
    ach50: dict[str, dict[str, float]]
    duct: dict[str, DuctLeakageLimit]
