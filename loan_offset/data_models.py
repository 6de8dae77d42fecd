"""Data models for the loan offset calculator.

This module defines the dataclasses exchanged between the calculation engine
and its callers: the four user inputs and the aggregate savings figures
derived from them. Undefined values are represented with ``math.nan`` so that
they propagate naturally through floating point arithmetic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class LoanInputs:
    """Inputs for a single savings calculation.

    Attributes
    ----------
    principal: float
        Outstanding loan amount in currency units.
    annual_rate_percent: float
        Nominal annual interest rate in percent (7.5 means 7.5 %).
    tenure_years: float
        Original loan tenure in years.
    offset: float
        Lump sum applied against the principal at time zero. Optional, a
        missing or invalid offset is treated as zero by the engine.

    Any field may be ``math.nan`` to mark a value that has not been provided.
    """

    principal: float
    annual_rate_percent: float
    tenure_years: float
    offset: float = 0.0

    def as_dict(self) -> Dict[str, Optional[float]]:
        return {
            "principal": _json_number(self.principal),
            "annual_rate_percent": _json_number(self.annual_rate_percent),
            "tenure_years": _json_number(self.tenure_years),
            "offset": _json_number(self.offset),
        }


@dataclass(frozen=True)
class SavingsResult:
    """Aggregate outcome of applying an offset to a loan.

    ``emis_saved`` is an ``int`` whenever it is defined. Every other field is
    a float that is ``nan`` when it could not be computed, except
    ``opportunity_cost`` which falls back to ``0.0``.
    """

    emi: float
    years_completed: float
    interest_saved: float
    opportunity_cost: float
    net_savings: float
    emis_saved: Number
    effective_rate: float

    @property
    def is_complete(self) -> bool:
        return all(math.isfinite(v) for v in self.as_tuple())

    def as_tuple(self):
        return (
            self.emi,
            self.years_completed,
            self.interest_saved,
            self.opportunity_cost,
            self.net_savings,
            self.emis_saved,
            self.effective_rate,
        )

    def as_dict(self) -> Dict[str, Optional[Number]]:
        """Return a JSON-serialisable mapping, undefined values become ``None``."""
        return {
            "emi": _json_number(self.emi),
            "years_completed": _json_number(self.years_completed),
            "interest_saved": _json_number(self.interest_saved),
            "opportunity_cost": _json_number(self.opportunity_cost),
            "net_savings": _json_number(self.net_savings),
            "emis_saved": _json_number(self.emis_saved),
            "effective_rate": _json_number(self.effective_rate),
        }


def _json_number(value: Number) -> Optional[Number]:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value
