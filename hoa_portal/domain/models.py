"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class NotificationType(str, Enum):
    BILLING = "billing"
    ANNOUNCEMENT = "announcement"
    SERVICE_REQUEST = "service_request"
    DOCUMENT_COMMENT = "document_comment"
    VEHICLE_REGISTRATION = "vehicle_registration"
    VISITOR_PASS = "visitor_pass"
    GENERAL = "general"


class UserRole(str, Enum):
    HOA = "hoa"
    ADMIN = "admin"
    STAFF = "staff"
    UTILITY = "utility"


class VehicleStatus(str, Enum):
    PENDING_PERMIT = "pending_permit"
    ACTIVE = "active"
    INACTIVE = "inactive"


class VisitorPassStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


@dataclass
class ActionResult:
    """Outcome of a user-facing action that can fail softly"""

    success: bool
    message: Optional[str] = None


@dataclass
class User:
    """Portal account (resident or staff)"""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole = UserRole.HOA
    property_address: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class Notification:
    """Message delivered to a single user"""

    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    created_at: datetime
    link: Optional[str] = None
    is_read: bool = False
    version: int = 1
    archived_at: Optional[datetime] = None


@dataclass(frozen=True)
class LoanTerms:
    """Fixed-rate loan terms backing a billing account"""

    principal: Decimal
    annual_interest_rate_percent: Decimal
    term_years: int


@dataclass(frozen=True)
class PaymentRecord:
    """Single monthly payment in a billing ledger"""

    sequence_number: int
    payment_date: date
    amount_paid: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    remaining_balance: Decimal


@dataclass
class BillingAccount:
    """Resident billing record with derived amortization data"""

    id: str
    user_id: str
    user_name: str
    property_address: str
    terms: LoanTerms
    monthly_payment: Decimal
    payments_made: int
    total_payments: int
    start_date: date
    next_due_date: date
    payment_history: List[PaymentRecord] = field(default_factory=list)
    remaining_balance: Decimal = Decimal("0")


@dataclass
class Announcement:
    """Community announcement or event posting"""

    id: str
    title: str
    content: str
    type: str  # "announcement" or "event"
    date: date
    author: Optional[str] = None
    image_url: Optional[str] = None


@dataclass
class VehicleRegistration:
    """Resident vehicle and its parking permit"""

    id: str
    user_id: str
    user_name: str
    make: str
    model: str
    year: str
    color: str
    license_plate: str
    registered_at: datetime
    status: VehicleStatus = VehicleStatus.PENDING_PERMIT
    permit_number: Optional[str] = None
    permit_issued_at: Optional[datetime] = None
    version: int = 1


@dataclass
class VisitorPass:
    """Guest access request raised by a resident"""

    id: str
    user_id: str
    user_name: str
    visitor_name: str
    visit_date: date
    requested_at: datetime
    visit_start_time: Optional[str] = None
    duration_hours: Optional[int] = None
    vehicle_plate: Optional[str] = None
    status: VisitorPassStatus = VisitorPassStatus.PENDING
    processed_by_user_id: Optional[str] = None
    processed_at: Optional[datetime] = None
    notes: Optional[str] = None
    version: int = 1
