import math

import pytest

from loan_offset.data_models import LoanInputs
from loan_offset.engine import (
    DEFAULT_SAVINGS_ROI,
    compute_emi,
    compute_savings,
    solve_periods,
    undefined_result,
)


def test_emi_zero_rate_is_straight_division():
    assert compute_emi(120_000, 0.0, 240) == 120_000 / 240


def test_emi_known_value():
    emi = compute_emi(10_000_000, 0.075 / 12, 240)
    assert emi == pytest.approx(80_559.32, abs=0.01)


def test_emi_non_positive_periods_is_undefined():
    assert math.isnan(compute_emi(100_000, 0.01, 0))
    assert math.isnan(compute_emi(100_000, 0.0, -3))


def test_emi_non_finite_principal_is_undefined():
    assert math.isnan(compute_emi(math.nan, 0.01, 12))
    assert math.isnan(compute_emi(math.inf, 0.01, 12))


def test_emi_tiny_rate_does_not_divide_by_zero():
    emi = compute_emi(120_000, 1e-18, 240)
    assert emi == pytest.approx(500.0)


@pytest.mark.parametrize("tenure", [1, 5, 20, 30])
def test_emi_non_decreasing_in_rate(tenure):
    rates = [0.0, 0.5, 1, 3, 7.5, 12, 24, 60]
    emis = [compute_emi(2_500_000, r / 100 / 12, tenure * 12) for r in rates]
    assert all(a <= b for a, b in zip(emis, emis[1:]))


def test_solve_periods_inverts_emi():
    rate = 0.075 / 12
    emi = compute_emi(10_000_000, rate, 240)
    assert solve_periods(10_000_000, emi, rate) == pytest.approx(240.0, abs=1e-6)


def test_solve_periods_zero_rate_uses_limit():
    assert solve_periods(12_000, 1_000, 0.0) == pytest.approx(12.0)


def test_solve_periods_zero_balance_needs_no_payments():
    assert solve_periods(0.0, 1_000, 0.01) == 0


def test_solve_periods_payment_below_interest_is_undefined():
    # Interest of 10,000 a month can never be covered by a payment of 1
    result = solve_periods(1_000_000, 1.0, 0.01)
    assert math.isnan(result)


def test_solve_periods_payment_equal_to_interest_is_undefined():
    assert math.isnan(solve_periods(1_000_000, 10_000, 0.01))


@pytest.mark.parametrize("emi", [0.0, -250.0])
def test_solve_periods_non_positive_emi_is_undefined(emi):
    assert math.isnan(solve_periods(1_000, emi, 0.01))


@pytest.mark.parametrize(
    "args",
    [(math.nan, 100.0, 0.01), (1_000.0, math.inf, 0.01), (1_000.0, 100.0, math.nan)],
)
def test_solve_periods_non_finite_arguments_are_undefined(args):
    assert math.isnan(solve_periods(*args))


def test_reference_scenario(sample_inputs):
    result = compute_savings(sample_inputs)
    rate = 7.5 / 100 / 12
    original = solve_periods(10_000_000, result.emi, rate)
    new = solve_periods(9_900_000, result.emi, rate)

    assert result.emi == pytest.approx(80_559.32, abs=0.01)
    assert original == pytest.approx(240.0, abs=1e-6)
    assert new < 240
    assert result.years_completed == pytest.approx(new / 12)
    assert result.interest_saved > 0
    assert result.opportunity_cost >= 0
    assert result.net_savings == pytest.approx(result.interest_saved - result.opportunity_cost)
    assert isinstance(result.emis_saved, int)
    assert result.emis_saved == 5
    assert result.is_complete


def test_opportunity_cost_compounds_annually(sample_inputs):
    result = compute_savings(sample_inputs, savings_roi=5.0)
    expected = 100_000 * (1.05 ** result.years_completed - 1)
    assert result.opportunity_cost == pytest.approx(expected)


def test_effective_rate_formula(sample_inputs):
    result = compute_savings(sample_inputs)
    expected = 7.5 - result.net_savings / (10_000_000 * result.years_completed) * 100
    assert result.effective_rate == pytest.approx(expected)


def test_savings_roi_only_moves_opportunity_cost(sample_inputs):
    low = compute_savings(sample_inputs, savings_roi=1.0)
    high = compute_savings(sample_inputs, savings_roi=DEFAULT_SAVINGS_ROI)
    assert low.interest_saved == high.interest_saved
    assert low.opportunity_cost < high.opportunity_cost
    assert low.net_savings > high.net_savings


@pytest.mark.parametrize("offset", [1_000, 50_000, 2_000_000, 9_000_000])
def test_offset_shortens_payoff(offset):
    inputs = LoanInputs(principal=10_000_000, annual_rate_percent=9, tenure_years=15, offset=offset)
    result = compute_savings(inputs)
    assert result.years_completed < 15
    assert result.interest_saved > 0
    assert result.emis_saved >= 0


def test_no_offset_saves_nothing(sample_inputs):
    inputs = LoanInputs(
        principal=sample_inputs.principal,
        annual_rate_percent=sample_inputs.annual_rate_percent,
        tenure_years=sample_inputs.tenure_years,
        offset=0,
    )
    result = compute_savings(inputs)
    assert result.interest_saved == pytest.approx(0.0, abs=1e-6)
    assert result.emis_saved == 0
    assert result.opportunity_cost == 0.0
    assert result.net_savings == pytest.approx(0.0, abs=1e-6)
    assert result.effective_rate == pytest.approx(7.5)


@pytest.mark.parametrize("offset", [math.nan, math.inf, -5_000, None])
def test_invalid_offset_counts_as_zero(offset):
    inputs = LoanInputs(principal=500_000, annual_rate_percent=8, tenure_years=10, offset=offset)
    result = compute_savings(inputs)
    assert result.emi > 0
    assert result.emis_saved == 0
    assert result.opportunity_cost == 0.0


def test_offset_clearing_the_loan():
    inputs = LoanInputs(principal=1_000_000, annual_rate_percent=7.5, tenure_years=20, offset=1_500_000)
    result = compute_savings(inputs)
    assert result.years_completed == 0
    assert result.opportunity_cost == 0.0
    assert 239 <= result.emis_saved <= 240
    assert math.isnan(result.effective_rate)
    assert result.net_savings == pytest.approx(result.interest_saved)


@pytest.mark.parametrize(
    "principal,rate,tenure",
    [
        (math.nan, 7.5, 20),
        (10_000_000, math.nan, 20),
        (10_000_000, 7.5, math.nan),
        (0, 7.5, 20),
        (-1_000, 7.5, 20),
        (10_000_000, 0, 20),
        (10_000_000, -1, 20),
        (10_000_000, 7.5, 0),
        (math.inf, 7.5, 20),
    ],
)
def test_invalid_required_inputs_give_undefined_result(principal, rate, tenure):
    inputs = LoanInputs(principal=principal, annual_rate_percent=rate, tenure_years=tenure, offset=100_000)
    result = compute_savings(inputs)
    assert result.opportunity_cost == 0.0
    for name in ("emi", "years_completed", "interest_saved", "net_savings", "emis_saved", "effective_rate"):
        assert math.isnan(getattr(result, name)), name
    assert not result.is_complete


def test_undefined_payment_propagates_but_opportunity_cost_stays_zero():
    # 0.01 years rounds to zero months, so no installment can be derived
    inputs = LoanInputs(principal=1_000_000, annual_rate_percent=7.5, tenure_years=0.01, offset=10_000)
    result = compute_savings(inputs)
    assert math.isnan(result.emi)
    assert math.isnan(result.years_completed)
    assert math.isnan(result.interest_saved)
    assert math.isnan(result.net_savings)
    assert math.isnan(result.emis_saved)
    assert math.isnan(result.effective_rate)
    assert result.opportunity_cost == 0.0


def test_emis_saved_truncates_towards_zero():
    inputs = LoanInputs(principal=10_000_000, annual_rate_percent=7.5, tenure_years=20, offset=108_000)
    result = compute_savings(inputs)
    rate = 7.5 / 100 / 12
    gap = solve_periods(10_000_000, result.emi, rate) - solve_periods(9_892_000, result.emi, rate)
    assert 5.5 < gap < 6
    assert result.emis_saved == 5


def test_half_month_tenure_rounds_up():
    # 2.625 years is 31.5 months, which must round to 32 payments
    inputs = LoanInputs(principal=100_000, annual_rate_percent=6, tenure_years=2.625, offset=0)
    result = compute_savings(inputs)
    assert result.emi == pytest.approx(compute_emi(100_000, 0.005, 32))


def test_repeated_calls_are_independent(sample_inputs):
    first = compute_savings(sample_inputs)
    compute_savings(LoanInputs(principal=1, annual_rate_percent=99, tenure_years=1, offset=1))
    assert compute_savings(sample_inputs) == first


def test_undefined_result_shape():
    result = undefined_result()
    assert result.opportunity_cost == 0.0
    assert result.as_dict() == {
        "emi": None,
        "years_completed": None,
        "interest_saved": None,
        "opportunity_cost": 0.0,
        "net_savings": None,
        "emis_saved": None,
        "effective_rate": None,
    }


@pytest.mark.parametrize("roi", [-2.0, -100.0, -150.0, math.nan, math.inf, -math.inf])
def test_unusable_savings_roi_gives_zero_opportunity_cost(sample_inputs, roi):
    result = compute_savings(sample_inputs, savings_roi=roi)
    assert isinstance(result.opportunity_cost, float)
    assert result.opportunity_cost == 0.0
    assert result.net_savings == result.interest_saved
    assert math.isfinite(result.effective_rate)


def test_zero_savings_roi_is_allowed(sample_inputs):
    result = compute_savings(sample_inputs, savings_roi=0.0)
    assert result.opportunity_cost == 0.0
    assert result.interest_saved > 0
