"""Deterministic mortgage math used by the loan service calculators."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final

BASE_THIRTY_YEAR_RATE_PERCENT: Final[float] = 6.25
PROPERTY_TAX_ANNUAL_RATIO: Final[float] = 0.012
INSURANCE_ANNUAL_RATIO: Final[float] = 0.004
FRONT_END_DTI_RATIO: Final[float] = 0.28
BACK_END_DTI_RATIO: Final[float] = 0.36


def _round_cents(value: float) -> float:
    # Half-up rounding to the cent.
    return math.floor(value * 100 + 0.5) / 100


@dataclass(frozen=True)
class PaymentBreakdown:
    """Amortized payment result rounded to cents.

    Attributes:
        monthly_payment: Principal and interest per month.
        total_interest: Interest paid over the full term.
        total_payment: Sum of all monthly payments.
        principal: Original loan amount.
        taxes: Estimated monthly property tax.
        insurance: Estimated monthly homeowners insurance.
    """

    monthly_payment: float
    total_interest: float
    total_payment: float
    principal: float
    taxes: float
    insurance: float

    def breakdown_to_payload(self) -> dict[str, object]:
        return {
            "monthlyPayment": self.monthly_payment,
            "totalInterest": self.total_interest,
            "totalPayment": self.total_payment,
            "breakdown": {
                "principal": self.principal,
                "interest": self.total_interest,
                "taxes": self.taxes,
                "insurance": self.insurance,
            },
        }


def calculate_monthly_payment(loan_amount: float, interest_rate_percent: float, loan_term_years: float) -> float:
    """Return the unrounded fixed-rate monthly payment.

    Args:
        loan_amount: Principal.
        interest_rate_percent: Annual nominal rate in percent.
        loan_term_years: Term in years.

    Returns:
        float: Monthly payment; a zero rate divides principal evenly.

    Raises:
        ValueError: Raised when inputs are negative or term is not positive.
    """

    if loan_amount < 0:
        raise ValueError("loan_amount must be >= 0")
    if interest_rate_percent < 0:
        raise ValueError("interest_rate_percent must be >= 0")
    if loan_term_years <= 0:
        raise ValueError("loan_term_years must be > 0")

    payment_count = loan_term_years * 12
    monthly_rate = interest_rate_percent / 100 / 12
    if monthly_rate == 0:
        return loan_amount / payment_count

    growth_factor = (1 + monthly_rate) ** payment_count
    return loan_amount * (monthly_rate * growth_factor) / (growth_factor - 1)


def calculate_payment(loan_amount: float, interest_rate_percent: float, loan_term_years: float) -> PaymentBreakdown:
    """Compute the amortized payment breakdown for one fixed-rate loan.

    `calculate_payment(500000, 6.25, 30).monthly_payment == 3078.59`.

    Args:
        loan_amount: Principal.
        interest_rate_percent: Annual nominal rate in percent.
        loan_term_years: Term in years.

    Returns:
        PaymentBreakdown: Cent-rounded payment, interest and escrow estimates.

    Raises:
        ValueError: Raised when inputs are out of range.
    """

    monthly_payment = calculate_monthly_payment(loan_amount, interest_rate_percent, loan_term_years)
    payment_count = loan_term_years * 12
    total_payment = monthly_payment * payment_count
    return PaymentBreakdown(
        monthly_payment=_round_cents(monthly_payment),
        total_interest=_round_cents(total_payment - loan_amount),
        total_payment=_round_cents(total_payment),
        principal=loan_amount,
        taxes=_round_cents(loan_amount * PROPERTY_TAX_ANNUAL_RATIO / 12),
        insurance=_round_cents(loan_amount * INSURANCE_ANNUAL_RATIO / 12),
    )


def calculate_affordability(
    annual_income: float,
    monthly_debts: float,
    down_payment: float,
    interest_rate_percent: float = BASE_THIRTY_YEAR_RATE_PERCENT,
    loan_term_years: int = 30,
) -> dict[str, float]:
    """Estimate the maximum affordable home price with the 28/36 debt-to-income rule.

    The housing budget is the smaller of 28% of gross monthly income and 36%
    of gross monthly income minus existing monthly debts. The maximum loan is
    the present value of that budget at the given rate and term.

    Args:
        annual_income: Gross annual income.
        monthly_debts: Existing monthly debt payments.
        down_payment: Cash available for the down payment.
        interest_rate_percent: Annual nominal rate in percent.
        loan_term_years: Term in years.

    Returns:
        dict[str, float]: Wire payload with max payment, loan and price.

    Raises:
        ValueError: Raised when any amount is negative.
    """

    if annual_income < 0 or monthly_debts < 0 or down_payment < 0:
        raise ValueError("income, debts and down payment must be >= 0")

    monthly_income = annual_income / 12
    front_end_limit = monthly_income * FRONT_END_DTI_RATIO
    back_end_limit = monthly_income * BACK_END_DTI_RATIO - monthly_debts
    max_monthly_payment = max(0.0, min(front_end_limit, back_end_limit))

    payment_count = loan_term_years * 12
    monthly_rate = interest_rate_percent / 100 / 12
    if monthly_rate == 0:
        max_loan_amount = max_monthly_payment * payment_count
    else:
        max_loan_amount = max_monthly_payment * (1 - (1 + monthly_rate) ** -payment_count) / monthly_rate

    debt_to_income = 0.0 if monthly_income == 0 else (monthly_debts + max_monthly_payment) / monthly_income
    return {
        "maxMonthlyPayment": _round_cents(max_monthly_payment),
        "maxLoanAmount": _round_cents(max_loan_amount),
        "maxHomePrice": _round_cents(max_loan_amount + down_payment),
        "downPayment": down_payment,
        "interestRate": interest_rate_percent,
        "loanTerm": loan_term_years,
        "debtToIncomeRatio": _round_cents(debt_to_income),
    }
