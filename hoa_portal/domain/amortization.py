"""Loan amortization for resident billing

Pure functions: Decimal in, dataclasses out. All currency values are
rounded to cents with ROUND_HALF_UP.
"""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Sequence, Tuple

from hoa_portal.domain.exceptions import InvalidInputError
from hoa_portal.domain.models import PaymentRecord
from hoa_portal.utils.date_utils import add_months

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert int/float/str amounts without binary float artifacts"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_currency(amount: Decimal) -> Decimal:
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / 100 / 12


def compute_monthly_payment(principal, annual_rate_percent, term_years: int) -> Decimal:
    """
    Calculate the fixed monthly payment for a fully amortizing loan.

    M = P * [r(1+r)^n] / [(1+r)^n - 1], with r the monthly rate and n the
    number of monthly payments. A zero rate splits the principal evenly.

    Raises:
        InvalidInputError: principal <= 0, term_years <= 0, a negative rate,
            or a payment that rounds to less than one cent

    Example:
        compute_monthly_payment(250000, 3.5, 30) -> Decimal("1122.61")
    """
    principal = to_decimal(principal)
    annual_rate_percent = to_decimal(annual_rate_percent)

    if principal <= 0:
        raise InvalidInputError(f"Principal must be positive, got {principal}")
    if term_years <= 0:
        raise InvalidInputError(f"Term must be a positive number of years, got {term_years}")
    if annual_rate_percent < 0:
        raise InvalidInputError(f"Interest rate cannot be negative, got {annual_rate_percent}")

    num_payments = term_years * 12
    if annual_rate_percent == 0:
        payment = principal / num_payments
    else:
        r = monthly_rate(annual_rate_percent)
        factor = (1 + r) ** num_payments
        payment = principal * (r * factor) / (factor - 1)

    payment = round_currency(payment)
    if payment <= 0:
        raise InvalidInputError(f"Principal {principal} is too small to amortize over {num_payments} payments")
    return payment


def generate_payment_history(
    principal,
    annual_rate_percent,
    monthly_payment,
    payments_made: int,
    start_date: date,
) -> Tuple[List[PaymentRecord], Decimal]:
    """
    Build the ledger of payments made so far, one record per month.

    Each month interest accrues on the running balance and the rest of the
    fixed payment reduces principal. The balance is clamped at zero, but
    the payment itself is never shortened: once a loan is paid off, later
    records still show the full payment split into principal and interest.

    Returns:
        (records ordered oldest first, balance after the last record)

    Raises:
        InvalidInputError: the last payment date falls beyond year 9999
    """
    principal = to_decimal(principal)
    monthly_payment = to_decimal(monthly_payment)
    r = monthly_rate(to_decimal(annual_rate_percent))

    records: List[PaymentRecord] = []
    balance = principal

    if payments_made > 0:
        try:
            add_months(start_date, payments_made - 1)
        except (ValueError, OverflowError) as e:
            raise InvalidInputError(
                f"{payments_made} monthly payments from {start_date} run past the last supported date"
            ) from e

    for i in range(max(payments_made, 0)):
        interest_paid = round_currency(balance * r)
        principal_paid = round_currency(monthly_payment - interest_paid)
        balance = max(ZERO, round_currency(balance - principal_paid))

        records.append(
            PaymentRecord(
                sequence_number=i + 1,
                payment_date=add_months(start_date, i),
                amount_paid=monthly_payment,
                principal_paid=principal_paid,
                interest_paid=interest_paid,
                remaining_balance=balance,
            )
        )

    return records, balance


def remaining_balance(payment_history: Sequence[PaymentRecord], principal) -> Decimal:
    """Balance after the most recent payment, or the principal if none were made"""
    if not payment_history:
        return to_decimal(principal)
    return payment_history[-1].remaining_balance
