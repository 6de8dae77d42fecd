"""Core calculation engine for the loan offset calculator.

This module implements the amortization arithmetic behind the savings figures:
the equated monthly installment (EMI), a closed-form solver for the number of
payments needed to clear a balance at a fixed EMI, and the orchestration that
compares the original payoff with the payoff after a lump-sum offset.

All functions are pure. Degenerate inputs never raise: they produce ``nan``
in the affected fields and the value propagates through ordinary float
arithmetic into everything that depends on it.
"""

from __future__ import annotations

import logging
import math

from .data_models import LoanInputs, SavingsResult
from .utils import is_non_negative_finite, is_positive_finite, round_half_up

logger = logging.getLogger(__name__)

# Assumed annual post-tax return on capital kept invested instead of being
# used as an offset, in percent. Callers may override it per calculation.
DEFAULT_SAVINGS_ROI = 5.00975528


def _power(base: float, exponent: float) -> float:
    """``base ** exponent`` that saturates to ``inf`` instead of raising."""
    try:
        return base ** exponent
    except OverflowError:
        return math.inf


def compute_emi(principal: float, monthly_rate: float, total_periods: int) -> float:
    """Return the fixed monthly payment that amortizes ``principal``.

    The formula is:

        emi = r * P / (1 - (1 + r)^-n)

    where ``P`` is the principal, ``r`` is the monthly interest rate and
    ``n`` is the number of payments. When the rate is zero the payment
    simplifies to ``P / n``. A non-positive ``n`` gives ``nan``.
    """
    if total_periods <= 0 or not math.isfinite(principal):
        return math.nan
    if monthly_rate == 0:
        return principal / total_periods
    # 1 - (1 + r)^-n, written with expm1/log1p so tiny rates stay non-zero
    denominator = -math.expm1(-total_periods * math.log1p(monthly_rate))
    return monthly_rate * principal / denominator


def solve_periods(present_value: float, emi: float, monthly_rate: float) -> float:
    """Return how many payments of ``emi`` clear ``present_value``.

    This inverts the annuity identity directly:

        n = -ln(1 - r * PV / emi) / ln(1 + r)

    The result is fractional. ``nan`` is returned when any argument is not
    finite, when ``emi`` is not positive, or when the payment never covers
    the interest (``1 - r * PV / emi <= 0``).
    """
    if not (math.isfinite(present_value) and math.isfinite(emi) and math.isfinite(monthly_rate)):
        return math.nan
    if emi <= 0 or monthly_rate <= -1:
        return math.nan
    if monthly_rate == 0:
        return present_value / emi
    denominator = 1 - monthly_rate * present_value / emi
    if denominator <= 0:
        logger.debug(
            "Payment %.2f never amortizes %.2f at monthly rate %g", emi, present_value, monthly_rate
        )
        return math.nan
    return -math.log(denominator) / math.log1p(monthly_rate)


def undefined_result() -> SavingsResult:
    """The result returned when the required inputs are missing or invalid."""
    return SavingsResult(
        emi=math.nan,
        years_completed=math.nan,
        interest_saved=math.nan,
        opportunity_cost=0.0,
        net_savings=math.nan,
        emis_saved=math.nan,
        effective_rate=math.nan,
    )


def compute_savings(inputs: LoanInputs, savings_roi: float = DEFAULT_SAVINGS_ROI) -> SavingsResult:
    """Compute the savings from applying ``inputs.offset`` at time zero.

    Parameters
    ----------
    inputs: LoanInputs
        Principal, annual rate, tenure and offset. The first three must be
        finite and positive; the offset defaults to zero when it is missing,
        negative or not finite.
    savings_roi: float
        Annual return (percent) the offset would have earned if invested.
        It is compounded annually over the shortened payoff period to give
        the opportunity cost. A negative or non-finite rate earns nothing,
        so the opportunity cost is then zero.

    Returns
    -------
    SavingsResult
        The savings figures. See :func:`undefined_result` for the shape
        returned on invalid input.
    """
    principal = inputs.principal
    annual_rate = inputs.annual_rate_percent
    tenure_years = inputs.tenure_years
    if not (
        is_positive_finite(principal)
        and is_positive_finite(annual_rate)
        and is_positive_finite(tenure_years)
    ):
        logger.debug("Required loan inputs missing or invalid: %r", inputs)
        return undefined_result()
    offset = inputs.offset if is_non_negative_finite(inputs.offset) else 0.0

    monthly_rate = annual_rate / 100 / 12
    months = tenure_years * 12
    total_periods = round_half_up(months) if math.isfinite(months) else 0
    emi = compute_emi(principal, monthly_rate, total_periods)

    principal_after_offset = max(0.0, principal - offset)
    original_periods = solve_periods(principal, emi, monthly_rate)
    new_periods = solve_periods(principal_after_offset, emi, monthly_rate)

    original_interest = emi * original_periods - principal
    new_interest = emi * new_periods - principal_after_offset
    interest_saved = original_interest - new_interest

    years_completed = new_periods / 12
    payoff_known = math.isfinite(years_completed) and years_completed > 0
    roi_usable = math.isfinite(savings_roi) and savings_roi >= 0
    if not roi_usable:
        logger.warning("Ignoring unusable savings ROI %r", savings_roi)
    if payoff_known and offset > 0 and roi_usable:
        growth = _power(1 + savings_roi / 100, years_completed)
        opportunity_cost = offset * (growth - 1)
    else:
        opportunity_cost = 0.0

    net_savings = interest_saved - opportunity_cost

    periods_saved = original_periods - new_periods
    emis_saved = math.trunc(periods_saved) if math.isfinite(periods_saved) else math.nan

    if payoff_known:
        effective_rate = annual_rate - (net_savings / (principal * years_completed)) * 100
    else:
        effective_rate = math.nan

    return SavingsResult(
        emi=emi,
        years_completed=years_completed,
        interest_saved=interest_saved,
        opportunity_cost=opportunity_cost,
        net_savings=net_savings,
        emis_saved=emis_saved,
        effective_rate=effective_rate,
    )
