"""
ASHRAE 62.2 ventilation engine.

Provides:
  - Whole-house requirement: Qtotal = 0.03 × floor area + 7.5 × (bedrooms + 1),
    reduced by the infiltration credit and clamped at zero.
  - Local exhaust checks for the kitchen and up to four bathrooms.
  - Mechanical system credit (balanced systems count their larger leg).
  - Aggregation into an overall verdict: every configured local path must
    pass on its own AND the summed airflow must meet the adjusted requirement.
"""

import logging

from aircheck.config import (
    ASHRAE_AREA_FACTOR,
    ASHRAE_OCCUPANT_FACTOR,
    BATHROOM_EXHAUST_MINIMUMS,
    KITCHEN_EXHAUST_MINIMUMS,
    MAX_BATHROOMS,
)
from aircheck.engine.errors import (
    InputValidationError,
    require_non_negative,
    require_positive,
)
from aircheck.models.ventilation import (
    BalancedSystem,
    ComponentCompliance,
    ExhaustOnlySystem,
    ExhaustType,
    MechanicalType,
    NoExhaust,
    NoMechanical,
    SupplyOnlySystem,
    VentilationResult,
    VentilationTest,
)

logger = logging.getLogger(__name__)


def required_ventilation_rate(floor_area: float, bedrooms: int) -> float:
    """ASHRAE 62.2 total required rate (CFM)."""
    require_positive("floor_area", floor_area)
    if isinstance(bedrooms, bool) or not isinstance(bedrooms, int) or bedrooms < 0:
        raise InputValidationError("bedrooms must be a non-negative whole number")
    return ASHRAE_AREA_FACTOR * floor_area + ASHRAE_OCCUPANT_FACTOR * (bedrooms + 1)


def adjusted_required_rate(required_rate: float, infiltration_credit: float) -> float:
    """Required rate after the infiltration credit, never below zero."""
    require_non_negative("infiltration_credit", infiltration_credit)
    return max(0.0, required_rate - infiltration_credit)


def evaluate_exhaust(component: str, fan, minimums: dict[str, float]) -> ComponentCompliance:
    """
    Check one local exhaust path against the minimum for its type.

    A "none" path is not evaluated: it provides 0 CFM and has no verdict.
    """
    if isinstance(fan, NoExhaust):
        return ComponentCompliance(
            component=component,
            exhaust_type=ExhaustType.NONE,
            configured=False,
            provided=0.0,
        )

    provided = require_non_negative(f"{component} measured_cfm", fan.measured_cfm)
    required = minimums[fan.exhaust_type]
    return ComponentCompliance(
        component=component,
        exhaust_type=ExhaustType(fan.exhaust_type),
        configured=True,
        provided=provided,
        required=required,
        compliant=provided >= required,
    )


def evaluate_kitchen(fan) -> ComponentCompliance:
    """Kitchen: ≥100 CFM intermittent, ≥25 CFM continuous."""
    return evaluate_exhaust("kitchen", fan, KITCHEN_EXHAUST_MINIMUMS)


def evaluate_bathroom(index: int, fan) -> ComponentCompliance:
    """Bathroom: ≥50 CFM intermittent, ≥20 CFM continuous. index is 1-based."""
    return evaluate_exhaust(f"bathroom_{index}", fan, BATHROOM_EXHAUST_MINIMUMS)


def mechanical_contribution(system) -> float:
    """Airflow credited to a mechanical ventilation system (CFM)."""
    if isinstance(system, NoMechanical):
        return 0.0
    if isinstance(system, BalancedSystem):
        supply = require_non_negative("supply_cfm", system.supply_cfm)
        exhaust = require_non_negative("exhaust_cfm", system.exhaust_cfm)
        # Recovered air moves through both legs; only the larger leg counts
        return max(supply, exhaust)
    if isinstance(system, SupplyOnlySystem):
        return require_non_negative("supply_cfm", system.supply_cfm)
    if isinstance(system, ExhaustOnlySystem):
        return require_non_negative("exhaust_cfm", system.exhaust_cfm)
    raise InputValidationError(f"Unknown mechanical system: {system!r}")


def evaluate_ventilation(test: VentilationTest) -> VentilationResult:
    """
    Evaluate local exhaust and whole-house ventilation for one house.

    Raises InputValidationError for invalid inputs; no partial result is
    produced.
    """
    if len(test.bathrooms) > MAX_BATHROOMS:
        raise InputValidationError(
            f"At most {MAX_BATHROOMS} bathrooms can be evaluated, got {len(test.bathrooms)}"
        )

    # Verdicts compare the reported 2-decimal values
    required = round(required_ventilation_rate(test.floor_area, test.bedrooms), 2)
    adjusted = round(adjusted_required_rate(required, test.infiltration_credit), 2)

    kitchen = evaluate_kitchen(test.kitchen)
    bathrooms = tuple(
        evaluate_bathroom(i, fan) for i, fan in enumerate(test.bathrooms, start=1)
    )
    mechanical = mechanical_contribution(test.mechanical)

    local = (kitchen,) + bathrooms
    total = round(sum(c.provided for c in local) + mechanical, 2)

    reasons = []
    for record in local:
        if record.configured and not record.compliant:
            reasons.append(
                f"{record.component.replace('_', ' ').capitalize()} exhaust provides "
                f"{record.provided:g} cfm, below the {record.required:g} cfm "
                f"{record.exhaust_type.value} minimum"
            )
    local_ok = all(c.compliant for c in local if c.configured)

    meets_total = total >= adjusted
    if not meets_total:
        reasons.append(
            f"Total ventilation provided ({total:g} cfm) is less than "
            f"required ({adjusted:g} cfm)"
        )

    logger.debug(
        "Ventilation: required=%.1f adjusted=%.1f provided=%.1f local_ok=%s",
        required, adjusted, total, local_ok,
    )

    return VentilationResult(
        required_rate=required,
        adjusted_required=adjusted,
        kitchen=kitchen,
        bathrooms=bathrooms,
        mechanical_type=MechanicalType(test.mechanical.system_type),
        mechanical_contribution=mechanical,
        total_provided=total,
        local_exhaust_compliant=local_ok,
        meets_whole_house_requirement=meets_total,
        overall_compliant=local_ok and meets_total,
        non_compliance_reasons=tuple(reasons),
    )
