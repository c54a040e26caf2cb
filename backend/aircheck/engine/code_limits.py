"""
Code-limit tables.

Limits are configuration data, not branches in the evaluators. A table is
built once from a mapping (or a JSON file) and is read-only afterwards, so a
single instance can be shared by any number of concurrent evaluations.

Table shape:
    {
        "ach50": {"<code year>": {"<climate zone>" | "*": <limit>, ...}, ...},
        "duct":  {"<code year>": {"tdl": <limit>, "dlo": <limit>,
                                  "basis": "percent_of_flow" | "per_100_sqft"}, ...},
    }
"""

import json
import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from aircheck.config import DEFAULT_ACH50_LIMITS, DEFAULT_DUCT_LIMITS, LimitBasis
from aircheck.engine.errors import ConfigurationMissingError, InputValidationError
from aircheck.models.code_limits import Ach50Limit, CodeLimitsOutput, DuctLeakageLimit

logger = logging.getLogger(__name__)

ANY_ZONE = "*"


def _check_limit(label: str, value) -> float:
    try:
        limit = float(value)
    except (TypeError, ValueError):
        raise InputValidationError(f"{label}: limit must be numeric, got {value!r}")
    if not math.isfinite(limit) or limit < 0:
        raise InputValidationError(f"{label}: limit must be a non-negative finite number")
    return limit


class CodeLimitTable:
    """Immutable ACH50 and duct leakage limits keyed by code year (and zone)."""

    __slots__ = ("_ach50", "_duct")

    def __init__(
        self,
        ach50: Mapping[str, Mapping[str, float]],
        duct: Mapping[str, Mapping[str, object]],
    ):
        ach50_table = {}
        for year, zones in ach50.items():
            year = str(year)
            ach50_table[year] = MappingProxyType({
                str(zone): _check_limit(f"ACH50 {year}/{zone}", limit)
                for zone, limit in zones.items()
            })

        duct_table = {}
        for year, entry in duct.items():
            year = str(year)
            try:
                basis = LimitBasis(entry.get("basis", LimitBasis.PERCENT_OF_FLOW.value))
            except ValueError:
                raise InputValidationError(
                    f"Duct {year}: unknown limit basis {entry.get('basis')!r}"
                )
            if "tdl" not in entry or "dlo" not in entry:
                raise InputValidationError(f"Duct {year}: both 'tdl' and 'dlo' limits are required")
            duct_table[year] = DuctLeakageLimit(
                code_year=year,
                tdl=_check_limit(f"Duct {year} TDL", entry["tdl"]),
                dlo=_check_limit(f"Duct {year} DLO", entry["dlo"]),
                basis=basis,
            )

        object.__setattr__(self, "_ach50", MappingProxyType(ach50_table))
        object.__setattr__(self, "_duct", MappingProxyType(duct_table))

    def __setattr__(self, name, value):
        raise AttributeError("CodeLimitTable is read-only")

    @classmethod
    def from_mapping(cls, data: Mapping) -> "CodeLimitTable":
        """Build a table from a {"ach50": ..., "duct": ...} mapping."""
        return cls(ach50=data.get("ach50", {}), duct=data.get("duct", {}))

    @classmethod
    def from_json(cls, path) -> "CodeLimitTable":
        """Load a table from a JSON file with the same shape as from_mapping."""
        path = Path(path)
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        logger.info("Loaded code limits from %s", path)
        return cls.from_mapping(data)

    @property
    def code_years(self) -> tuple[str, ...]:
        return tuple(sorted(set(self._ach50) | set(self._duct)))

    def ach50_limit(self, code_year: str, climate_zone: Optional[str] = None) -> Ach50Limit:
        """
        Resolve the ACH50 limit for a code year and climate zone.

        An exact zone entry wins over the year's any-zone entry. Raises
        ConfigurationMissingError when neither exists.
        """
        zones = self._ach50.get(str(code_year))
        if zones is None:
            raise ConfigurationMissingError(
                f"No ACH50 limit configured for code year {code_year}"
            )

        if climate_zone is not None and str(climate_zone) in zones:
            return Ach50Limit(
                code_year=str(code_year),
                climate_zone=str(climate_zone),
                ach50=zones[str(climate_zone)],
            )
        if ANY_ZONE in zones:
            return Ach50Limit(code_year=str(code_year), climate_zone=None, ach50=zones[ANY_ZONE])

        if climate_zone is None:
            raise ConfigurationMissingError(
                f"Code year {code_year} sets ACH50 limits by climate zone; "
                "a climate zone is required"
            )
        raise ConfigurationMissingError(
            f"No ACH50 limit configured for code year {code_year}, climate zone {climate_zone}"
        )

    def duct_limit(self, code_year: str) -> DuctLeakageLimit:
        """Resolve the duct leakage limits for a code year."""
        limit = self._duct.get(str(code_year))
        if limit is None:
            raise ConfigurationMissingError(
                f"No duct leakage limit configured for code year {code_year}"
            )
        return limit

    def to_output(self) -> CodeLimitsOutput:
        return CodeLimitsOutput(
            ach50={year: dict(zones) for year, zones in self._ach50.items()},
            duct=dict(self._duct),
        )


DEFAULT_CODE_LIMITS = CodeLimitTable(ach50=DEFAULT_ACH50_LIMITS, duct=DEFAULT_DUCT_LIMITS)
