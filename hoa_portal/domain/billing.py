"""Resident billing accounts and payment reminders"""

import logging
from datetime import date
from decimal import Decimal

from hoa_portal.domain.amortization import (
    compute_monthly_payment,
    generate_payment_history,
    to_decimal,
)
from hoa_portal.domain.exceptions import InvalidInputError
from hoa_portal.domain.models import (
    ActionResult,
    BillingAccount,
    LoanTerms,
    NotificationType,
    User,
)
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.domain.repositories import UserLookup
from hoa_portal.utils.date_utils import add_months


def build_billing_account(
    account_id: str,
    user: User,
    terms: LoanTerms,
    payments_made: int,
    start_date: date,
) -> BillingAccount:
    """
    Derive the monthly payment and ledger for a resident's loan.

    The next due date is the month after the last recorded payment.
    """
    if payments_made < 0:
        raise InvalidInputError(f"payments_made cannot be negative, got {payments_made}")

    monthly_payment = compute_monthly_payment(
        terms.principal, terms.annual_interest_rate_percent, terms.term_years
    )
    history, balance = generate_payment_history(
        terms.principal,
        terms.annual_interest_rate_percent,
        monthly_payment,
        payments_made,
        start_date,
    )

    return BillingAccount(
        id=account_id,
        user_id=user.id,
        user_name=user.full_name,
        property_address=user.property_address or "",
        terms=terms,
        monthly_payment=monthly_payment,
        payments_made=payments_made,
        total_payments=terms.term_years * 12,
        start_date=start_date,
        next_due_date=add_months(start_date, payments_made),
        payment_history=history,
        remaining_balance=balance,
    )


def loan_terms(principal, annual_rate_percent, term_years: int) -> LoanTerms:
    return LoanTerms(
        principal=to_decimal(principal),
        annual_interest_rate_percent=to_decimal(annual_rate_percent),
        term_years=term_years,
    )


def format_currency(amount: Decimal) -> str:
    return f"${amount:,.2f}"


def format_due_date(due: date) -> str:
    return f"{due.month}/{due.day}/{due.year}"


def send_billing_reminder(
    users: UserLookup,
    notifications: NotificationService,
    target_user_id: str,
    account: BillingAccount,
) -> ActionResult:
    """Notify a resident that their next payment is coming due"""
    user = users.get_by_id(target_user_id)
    if user is None:
        return ActionResult(success=False, message="Target user not found.")

    notifications.create_notification(
        user_id=target_user_id,
        title="Friendly Payment Reminder",
        message=(
            f"A friendly reminder that your payment of {format_currency(account.monthly_payment)} "
            f"for {account.property_address} is due on {format_due_date(account.next_due_date)}."
        ),
        type=NotificationType.BILLING,
        link="/billing",
    )
    logging.info(
        "Billing reminder sent",
        extra={"user_id": target_user_id, "billing_account_id": account.id},
    )
    return ActionResult(success=True, message=f"Reminder sent to {user.full_name}.")
