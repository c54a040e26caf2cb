"""
Error taxonomy for the compliance engine.
"""

import math


class ComplianceEngineError(Exception):
    """Base class for all engine errors."""


class InputValidationError(ComplianceEngineError, ValueError):
    """Missing, non-numeric or out-of-range input. No result is produced."""


class InsufficientDataError(ComplianceEngineError, ValueError):
    """No usable reading exists to compute a result from."""


class ConfigurationMissingError(ComplianceEngineError, LookupError):
    """No code-limit entry exists for the requested code year or zone."""


def require_finite(name: str, value: float) -> float:
    """Raise InputValidationError unless value is a finite number."""
    if value is None or not math.isfinite(value):
        raise InputValidationError(f"{name} must be a finite number")
    return value


def require_positive(name: str, value: float) -> float:
    require_finite(name, value)
    if value <= 0:
        raise InputValidationError(f"{name} must be greater than zero")
    return value


def require_non_negative(name: str, value: float) -> float:
    require_finite(name, value)
    if value < 0:
        raise InputValidationError(f"{name} cannot be negative")
    return value
