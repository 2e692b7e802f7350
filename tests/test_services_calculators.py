"""Tests for deterministic mortgage payment and affordability math."""

import pytest

from mortgage_sim.services import calculate_affordability, calculate_monthly_payment, calculate_payment


def test_calculate_payment_matches_reference_amortization() -> None:
    """Verify the 500k, 6.25%, 30-year loan pays 3078.59 per month."""

    breakdown = calculate_payment(500000, 6.25, 30)

    assert breakdown.monthly_payment == 3078.59
    assert breakdown.principal == 500000
    assert breakdown.taxes == 500.0
    assert breakdown.insurance == 166.67
    assert breakdown.total_interest == pytest.approx(breakdown.total_payment - 500000, abs=0.01)


def test_calculate_payment_payload_uses_wire_names() -> None:
    """Verify payload keys use the camelCase wire contract."""

    payload = calculate_payment(300000, 5.0, 15).breakdown_to_payload()

    assert set(payload) == {"monthlyPayment", "totalInterest", "totalPayment", "breakdown"}
    assert set(payload["breakdown"]) == {"principal", "interest", "taxes", "insurance"}


def test_calculate_monthly_payment_zero_rate_divides_evenly() -> None:
    """Verify a zero rate spreads principal evenly across payments."""

    assert calculate_monthly_payment(360000, 0, 30) == 1000


@pytest.mark.parametrize(
    ("loan_amount", "interest_rate_percent", "loan_term_years"),
    [(-1, 6.25, 30), (500000, -0.5, 30), (500000, 6.25, 0)],
)
def test_calculate_monthly_payment_rejects_invalid_inputs(
    loan_amount: float,
    interest_rate_percent: float,
    loan_term_years: float,
) -> None:
    """Verify negative amounts, rates and non-positive terms raise ValueError."""

    with pytest.raises(ValueError):
        calculate_monthly_payment(loan_amount, interest_rate_percent, loan_term_years)


def test_calculate_affordability_applies_debt_to_income_limits() -> None:
    """Verify the housing budget is the smaller of the 28% and 36% limits."""

    result = calculate_affordability(annual_income=120000, monthly_debts=1000, down_payment=50000)

    assert result["maxMonthlyPayment"] == 2600.0
    assert result["maxHomePrice"] == pytest.approx(result["maxLoanAmount"] + 50000, abs=0.01)
    assert result["debtToIncomeRatio"] == 0.36
    assert result["interestRate"] == 6.25
    assert result["loanTerm"] == 30


def test_calculate_affordability_never_returns_negative_budget() -> None:
    """Verify debts above the limit yield a zero budget."""

    result = calculate_affordability(annual_income=12000, monthly_debts=5000, down_payment=0)

    assert result["maxMonthlyPayment"] == 0.0
    assert result["maxLoanAmount"] == 0.0
