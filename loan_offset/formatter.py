"""Output helpers for the loan offset calculator.

Undefined figures are shown as an em dash placeholder. Amounts use thousands
grouping with at most two decimals and no trailing zeros, percentages always
show two decimals.
"""

from __future__ import annotations

import math
from typing import Iterable, Tuple

from .data_models import LoanInputs, SavingsResult
from .utils import is_positive_finite

PLACEHOLDER = "—"
MISSING_INPUTS_MESSAGE = "Please enter all input values to see results."


def _is_defined(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def format_amount(value) -> str:
    """Format a number as ``12,345.67`` (``12,345`` when there are no cents)."""
    if not _is_defined(value):
        return PLACEHOLDER
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_percent(value) -> str:
    if not _is_defined(value):
        return PLACEHOLDER
    return f"{value:.2f}%"


def format_count(value) -> str:
    if not _is_defined(value):
        return PLACEHOLDER
    return str(int(value))


def assumptions_note(savings_roi: float) -> str:
    return (
        "Offset is applied immediately at t=0 with fixed EMI. "
        f"Opportunity cost compounded annually at {savings_roi:.4f}%."
    )


def inputs_entered(inputs: LoanInputs) -> bool:
    """Whether every required input has a usable value."""
    return all(
        is_positive_finite(v)
        for v in (inputs.principal, inputs.annual_rate_percent, inputs.tenure_years)
    )


def result_rows(result: SavingsResult) -> Tuple[Tuple[str, str], ...]:
    """Label/value pairs in display order, shared by the CLI and the web page."""
    return (
        ("EMI amount", format_amount(result.emi)),
        ("Loan completed (years)", format_amount(result.years_completed)),
        ("Interest saved", format_amount(result.interest_saved)),
        ("Net savings", format_amount(result.net_savings)),
        ("EMIs saved (months)", format_count(result.emis_saved)),
        ("Effective interest rate", format_percent(result.effective_rate)),
    )


def print_results(inputs: LoanInputs, result: SavingsResult, savings_roi: float) -> None:
    """Print the savings for one offset in a human-readable format."""
    print("Offset savings")
    print("-" * 48)
    if not inputs_entered(inputs):
        print(MISSING_INPUTS_MESSAGE)
        print("-" * 48)
        return
    for label, value in result_rows(result):
        print(f"{label:26s}: {value}")
    print("-" * 48)
    print(assumptions_note(savings_roi))


def print_comparison(rows: Iterable[Tuple[float, SavingsResult]]) -> None:
    """Print several offsets for the same loan side by side."""
    print("Comparison")
    print("=" * 84)
    print(
        f"{'Offset':>14s} {'Years':>8s} {'Interest saved':>16s} "
        f"{'Net savings':>16s} {'EMIs saved':>11s} {'Eff. rate':>10s}"
    )
    for offset, result in rows:
        print(
            f"{format_amount(offset):>14s} {format_amount(result.years_completed):>8s} "
            f"{format_amount(result.interest_saved):>16s} {format_amount(result.net_savings):>16s} "
            f"{format_count(result.emis_saved):>11s} {format_percent(result.effective_rate):>10s}"
        )
    print("=" * 84)
