"""
Pydantic models for ASHRAE 62.2 ventilation testing.

Exhaust fans and mechanical systems are tagged variants: the "none" case is
its own type with no airflow field, so it cannot be summed by accident.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ExhaustType(str, Enum):
    NONE = "none"
    INTERMITTENT = "intermittent"
    CONTINUOUS = "continuous"


class MechanicalType(str, Enum):
    NONE = "none"
    BALANCED_HRV = "balanced_hrv"
    BALANCED_ERV = "balanced_erv"
    SUPPLY_ONLY = "supply_only"
    EXHAUST_ONLY = "exhaust_only"


# ---------------------------------------------------------------------------
# Local exhaust variants
# ---------------------------------------------------------------------------

class NoExhaust(BaseModel):
    """No exhaust intended for this path."""
    exhaust_type: Literal["none"] = "none"


class IntermittentExhaust(BaseModel):
    exhaust_type: Literal["intermittent"] = "intermittent"
    measured_cfm: float


class ContinuousExhaust(BaseModel):
    exhaust_type: Literal["continuous"] = "continuous"
    measured_cfm: float


ExhaustFan = Annotated[
    Union[NoExhaust, IntermittentExhaust, ContinuousExhaust],
    Field(discriminator="exhaust_type"),
]


# ---------------------------------------------------------------------------
# Mechanical ventilation variants
# ---------------------------------------------------------------------------

class NoMechanical(BaseModel):
    system_type: Literal["none"] = "none"


class BalancedSystem(BaseModel):
    """HRV or ERV with simultaneous supply and exhaust legs."""
    system_type: Literal["balanced_hrv", "balanced_erv"]
    supply_cfm: float
    exhaust_cfm: float


class SupplyOnlySystem(BaseModel):
    system_type: Literal["supply_only"] = "supply_only"
    supply_cfm: float


class ExhaustOnlySystem(BaseModel):
    system_type: Literal["exhaust_only"] = "exhaust_only"
    exhaust_cfm: float


MechanicalSystem = Annotated[
    Union[NoMechanical, BalancedSystem, SupplyOnlySystem, ExhaustOnlySystem],
    Field(discriminator="system_type"),
]


# ---------------------------------------------------------------------------
# Test input and result
# ---------------------------------------------------------------------------

class VentilationTest(BaseModel):
    """Input for an ASHRAE 62.2 ventilation evaluation."""
    floor_area: float                    # ft² conditioned floor area
    bedrooms: int
    infiltration_credit: float = 0.0     # CFM

    kitchen: ExhaustFan = Field(default_factory=NoExhaust)
    bathrooms: list[ExhaustFan] = Field(default_factory=list)  # up to four
    mechanical: MechanicalSystem = Field(default_factory=NoMechanical)


class ComponentCompliance(BaseModel):
    """Independent verdict for one local exhaust path."""
    model_config = ConfigDict(frozen=True)

    component: str                       # "kitchen", "bathroom_1", ...
    exhaust_type: ExhaustType
    configured: bool                     # False for "none" paths
    provided: float                      # CFM counted toward the total
    required: Optional[float] = None     # None for "none" paths
    compliant: Optional[bool] = None     # None for "none" paths


class VentilationResult(BaseModel):
    """Result of a ventilation evaluation."""
    model_config = ConfigDict(frozen=True)

    required_rate: float                 # Qtotal
    adjusted_required: float             # max(0, Qtotal - infiltration credit)

    kitchen: ComponentCompliance
    bathrooms: tuple[ComponentCompliance, ...] = ()
    mechanical_type: MechanicalType
    mechanical_contribution: float

    total_provided: float
    local_exhaust_compliant: bool
    meets_whole_house_requirement: bool
    overall_compliant: bool
    non_compliance_reasons: tuple[str, ...] = ()

    @property
    def components(self) -> tuple[ComponentCompliance, ...]:
        """All local exhaust records: kitchen first, then bathrooms in order."""
        return (self.kitchen,) + self.bathrooms
