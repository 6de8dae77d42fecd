"""Command‑line interface for the loan offset calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute the savings of a single offset or compare
several offsets for the same loan. Results can be printed to the terminal or
exported to JSON/CSV files.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from .data_models import LoanInputs, SavingsResult
from .engine import DEFAULT_SAVINGS_ROI, compute_savings
from .formatter import print_comparison, print_results
from .utils import to_number

# Values the calculator starts with (and returns to on reset).
DEFAULT_PRINCIPAL = "10000000"
DEFAULT_RATE = "7.5"
DEFAULT_TENURE = "20"
DEFAULT_OFFSET = "100000"


def parse_input(value: Optional[str], name: str) -> float:
    """Convert a raw option value to a float, ``nan`` when left blank."""
    try:
        return to_number(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint=f"'--{name}'")


def build_inputs_from_options(
    principal: Optional[str],
    rate: Optional[str],
    tenure: Optional[str],
    offset: Optional[str],
) -> LoanInputs:
    return LoanInputs(
        principal=parse_input(principal, "principal"),
        annual_rate_percent=parse_input(rate, "rate"),
        tenure_years=parse_input(tenure, "tenure"),
        offset=parse_input(offset, "offset"),
    )


def build_payload(inputs: LoanInputs, result: SavingsResult, savings_roi: float) -> Dict[str, Any]:
    """Serialisable view of one calculation, undefined values become ``null``."""
    return {
        "inputs": inputs.as_dict(),
        "savings_roi": savings_roi,
        "results": result.as_dict(),
    }


def export_to_json(path: Path, data: Any) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, rows: List[Tuple[LoanInputs, SavingsResult]]) -> None:
    """Export one line per offset to a CSV file."""
    header = [
        "Offset",
        "EMI",
        "Years_Completed",
        "Interest_Saved",
        "Opportunity_Cost",
        "Net_Savings",
        "EMIs_Saved",
        "Effective_Rate",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for inputs, result in rows:
            values = result.as_dict()
            writer.writerow(
                [
                    inputs.offset,
                    values["emi"],
                    values["years_completed"],
                    values["interest_saved"],
                    values["opportunity_cost"],
                    values["net_savings"],
                    values["emis_saved"],
                    values["effective_rate"],
                ]
            )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log calculation details to stderr")
def cli(verbose: bool) -> None:
    """Work out what a lump-sum loan prepayment really saves."""
    configure_logging(verbose)


loan_options = [
    click.option("--principal", "-p", "principal", default=DEFAULT_PRINCIPAL, show_default=True, help="Loan amount (accepts k/m suffixes)"),
    click.option("--rate", "-r", "rate", default=DEFAULT_RATE, show_default=True, help="Annual interest rate (percent)"),
    click.option("--tenure", "-t", "tenure", default=DEFAULT_TENURE, show_default=True, help="Loan tenure in years"),
    click.option(
        "--savings-roi",
        "savings_roi",
        type=click.FloatRange(min=0),
        default=DEFAULT_SAVINGS_ROI,
        show_default=True,
        envvar="LOAN_OFFSET_SAVINGS_ROI",
        help="Annual return the offset would earn if invested (percent)",
    ),
]


def with_loan_options(func):
    for option in reversed(loan_options):
        func = option(func)
    return func


@cli.command()
@with_loan_options
@click.option("--offset", "-o", "offset", default=DEFAULT_OFFSET, show_default=True, help="Lump sum applied at the start")
@click.option("--output", "output", type=str, help="Output file path (.json)")
def calculate(
    principal: str,
    rate: str,
    tenure: str,
    savings_roi: float,
    offset: str,
    output: Optional[str],
) -> None:
    """Compute the savings from a single offset."""
    inputs = build_inputs_from_options(principal, rate, tenure, offset)
    result = compute_savings(inputs, savings_roi=savings_roi)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Results export must use .json extension", param_hint="'--output'")
        export_to_json(path, build_payload(inputs, result, savings_roi))
        click.echo(f"Results exported to {path}")
    else:
        print_results(inputs, result, savings_roi)


@cli.command()
@with_loan_options
@click.option("--offset", "-o", "offsets", multiple=True, required=True, help="Offset to compare (repeatable)")
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
def compare(
    principal: str,
    rate: str,
    tenure: str,
    savings_roi: float,
    offsets: Tuple[str, ...],
    output: Optional[str],
) -> None:
    """Compare several offsets for the same loan.

    Example:

        loan-offset compare -p 5m -r 8 -t 15 -o 100k -o 250k -o 500k
    """
    rows: List[Tuple[LoanInputs, SavingsResult]] = []
    for raw_offset in offsets:
        inputs = build_inputs_from_options(principal, rate, tenure, raw_offset)
        rows.append((inputs, compute_savings(inputs, savings_roi=savings_roi)))

    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, [build_payload(i, r, savings_roi) for i, r in rows])
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, rows)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv", param_hint="'--output'")
        click.echo(f"Comparison exported to {path}")
    else:
        print_comparison((inputs.offset, result) for inputs, result in rows)


if __name__ == "__main__":
    cli()
