"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from hoa_portal.domain.models import NotificationType, VehicleStatus, VisitorPassStatus

# A century of monthly payments
MAX_QUOTE_PAYMENTS = 1200


class ORMSchema(BaseModel):
    """Built from domain dataclasses via model_validate"""

    model_config = ConfigDict(from_attributes=True)


class NotificationSchema(ORMSchema):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    link: Optional[str] = None
    is_read: bool
    created_at: datetime


class NotificationListResponse(BaseModel):
    """Response for GET /v1/notifications"""

    user_id: str
    unread_count: int
    notifications: List[NotificationSchema]


class ActionResultSchema(BaseModel):
    success: bool
    message: Optional[str] = None


class MarkAllReadResponse(BaseModel):
    """Response for POST /v1/notifications/read-all"""

    updated_count: int
    message: str


class LoanQuoteRequest(BaseModel):
    """Request body for POST /v1/billing/quote"""

    principal: Decimal = Field(..., gt=0, description="Loan amount")
    annual_interest_rate_percent: Decimal = Field(..., ge=0, description="e.g. 3.5 for 3.5%")
    term_years: int = Field(..., gt=0, le=100)
    payments_made: int = Field(default=0, ge=0, le=MAX_QUOTE_PAYMENTS)
    start_date: Optional[date] = Field(default=None, description="First payment date")


class PaymentRecordSchema(ORMSchema):
    sequence_number: int
    payment_date: date
    amount_paid: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal


class LoanQuoteResponse(BaseModel):
    """Response for POST /v1/billing/quote"""

    monthly_payment: Decimal
    total_payments: int
    remaining_balance: Decimal
    payment_history: List[PaymentRecordSchema]


class BillingAccountResponse(BaseModel):
    """Response for GET /v1/billing/accounts/{account_id}"""

    id: str
    user_id: str
    user_name: str
    property_address: str
    loan_amount: Decimal
    interest_rate: Decimal
    loan_term_years: int
    monthly_payment: Decimal
    payments_made: int
    total_payments: int
    next_due_date: date
    remaining_balance: Decimal
    payment_history: List[PaymentRecordSchema]


class AnnouncementSchema(ORMSchema):
    id: str
    title: str
    content: str
    type: str
    date: date
    author: Optional[str] = None
    image_url: Optional[str] = None


class AnnouncementCreatedResponse(BaseModel):
    """Response for POST /v1/announcements"""

    announcement: AnnouncementSchema
    notified_count: int


class VehicleSchema(ORMSchema):
    id: str
    user_id: str
    user_name: str
    make: str
    model: str
    year: str
    color: str
    license_plate: str
    registered_at: datetime
    status: VehicleStatus
    permit_number: Optional[str] = None
    permit_issued_at: Optional[datetime] = None


class PermitRequest(BaseModel):
    """Request body for POST /v1/vehicles/{vehicle_id}/permit"""

    permit_number: str = Field(..., min_length=1, max_length=50)


class VisitorPassSchema(ORMSchema):
    id: str
    user_id: str
    user_name: str
    visitor_name: str
    visit_date: date
    visit_start_time: Optional[str] = None
    duration_hours: Optional[int] = None
    vehicle_plate: Optional[str] = None
    status: VisitorPassStatus
    requested_at: datetime
    processed_by_user_id: Optional[str] = None
    processed_at: Optional[datetime] = None
    notes: Optional[str] = None


class PassStatusRequest(BaseModel):
    """Request body for POST /v1/visitor-passes/{pass_id}/status"""

    status: VisitorPassStatus
    notes: Optional[str] = Field(default=None, max_length=500)
