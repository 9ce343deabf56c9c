"""Billing endpoints: loan quotes, account ledgers, payment reminders"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from hoa_portal.api.dependencies import (
    get_current_user_id,
    get_notification_service,
    get_portal,
    get_request_id,
)
from hoa_portal.api.errors import to_http_error
from hoa_portal.api.v1.schemas import (
    ActionResultSchema,
    BillingAccountResponse,
    LoanQuoteRequest,
    LoanQuoteResponse,
    PaymentRecordSchema,
)
from hoa_portal.domain.amortization import compute_monthly_payment, generate_payment_history
from hoa_portal.domain.billing import send_billing_reminder
from hoa_portal.domain.exceptions import DomainException
from hoa_portal.domain.models import BillingAccount
from hoa_portal.domain.notifications import NotificationService
from hoa_portal.infrastructure.database.session import get_db
from hoa_portal.infrastructure.observability.metrics import record_billing_reminder
from hoa_portal.portal import Portal
from hoa_portal.utils.date_utils import add_months

router = APIRouter()


def _account_response(account: BillingAccount) -> BillingAccountResponse:
    return BillingAccountResponse(
        id=account.id,
        user_id=account.user_id,
        user_name=account.user_name,
        property_address=account.property_address,
        loan_amount=account.terms.principal,
        interest_rate=account.terms.annual_interest_rate_percent,
        loan_term_years=account.terms.term_years,
        monthly_payment=account.monthly_payment,
        payments_made=account.payments_made,
        total_payments=account.total_payments,
        next_due_date=account.next_due_date,
        remaining_balance=account.remaining_balance,
        payment_history=[PaymentRecordSchema.model_validate(p) for p in account.payment_history],
    )


@router.post("/billing/quote", response_model=LoanQuoteResponse)
def quote_loan(request_body: LoanQuoteRequest, request: Request):
    """
    Compute the monthly payment and ledger for arbitrary loan terms.

    Without a start date the schedule begins on the first of next month.
    """
    start_date = request_body.start_date or add_months(date.today().replace(day=1), 1)
    try:
        monthly_payment = compute_monthly_payment(
            request_body.principal,
            request_body.annual_interest_rate_percent,
            request_body.term_years,
        )
        history, balance = generate_payment_history(
            request_body.principal,
            request_body.annual_interest_rate_percent,
            monthly_payment,
            request_body.payments_made,
            start_date,
        )
    except DomainException as e:
        raise to_http_error(e, get_request_id(request))

    return LoanQuoteResponse(
        monthly_payment=monthly_payment,
        total_payments=request_body.term_years * 12,
        remaining_balance=balance,
        payment_history=[PaymentRecordSchema.model_validate(p) for p in history],
    )


@router.get("/billing/accounts/{account_id}", response_model=BillingAccountResponse)
def get_billing_account(
    account_id: str,
    user_id: str = Depends(get_current_user_id),
    portal: Portal = Depends(get_portal),
):
    """Residents see their own account; admins see any"""
    account = portal.billing_accounts.get_by_id(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Billing account not found")
    if account.user_id != user_id and not portal.users.is_admin(user_id):
        raise HTTPException(status_code=403, detail="Access denied")
    return _account_response(account)


@router.post("/billing/accounts/{account_id}/reminder", response_model=ActionResultSchema)
def remind_resident(
    account_id: str,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    portal: Portal = Depends(get_portal),
    notifications: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db),
):
    """Admin action: send the account holder a payment reminder"""
    if not portal.users.is_admin(user_id):
        raise HTTPException(status_code=403, detail="Unauthorized: Admin privileges required.")
    account = portal.billing_accounts.get_by_id(account_id)
    if account is None:
        raise HTTPException(status_code=404, detail="Billing account not found")

    try:
        result = send_billing_reminder(portal.users, notifications, account.user_id, account)
        db.commit()
    except DomainException as e:
        db.rollback()
        record_billing_reminder(sent=False)
        raise to_http_error(e, get_request_id(request))

    record_billing_reminder(sent=result.success)
    return ActionResultSchema(success=result.success, message=result.message)
