"""Demo residents, billing accounts and notifications for local runs"""

import logging
from datetime import date, timedelta

from hoa_portal.domain.billing import build_billing_account, loan_terms
from hoa_portal.domain.models import Notification, NotificationType, User, UserRole
from hoa_portal.portal import Portal
from hoa_portal.utils.date_utils import utc_now

DEMO_USERS = [
    User("user123", "alice@example.com", "Alice", "Member", UserRole.HOA, "123 Main St, Anytown, USA"),
    User("user456", "bob@example.com", "Bob", "Homeowner", UserRole.HOA, "456 Oak Ave, Anytown, USA"),
    User("user789", "robert@example.com", "Robert", "Johnson", UserRole.HOA, "789 Pine Ln, Anytown, USA"),
    User("admin001", "admin@example.com", "Admin", "User", UserRole.ADMIN),
]

# (account id, user id, principal, annual rate %, term years, payments made, first payment)
DEMO_LOANS = [
    ("billing-user1", "user123", 250000, 3.5, 30, 60, date(2019, 7, 1)),
    ("billing-user2", "user456", 180000, 4.1, 15, 24, date(2022, 7, 1)),
    ("billing-user3", "user789", 320000, 3.8, 30, 12, date(2023, 7, 1)),
]


def seed_demo_data(portal: Portal) -> None:
    """Populate an empty portal; notifications only go to the in-memory store"""
    for user in DEMO_USERS:
        portal.users.append(user)

    for account_id, user_id, principal, rate, years, payments_made, start in DEMO_LOANS:
        account = build_billing_account(
            account_id,
            portal.users.get_by_id(user_id),
            loan_terms(principal, rate, years),
            payments_made,
            start,
        )
        portal.billing_accounts.append(account)

    now = utc_now()
    demo_notifications = [
        Notification(
            id="notif1",
            user_id="user123",
            title="New Guideline Uploaded",
            message="The 'HOA Guidelines Rev. 2024' document has been updated.",
            type=NotificationType.DOCUMENT_COMMENT,
            link="/documents",
            created_at=now - timedelta(hours=2),
        ),
        Notification(
            id="notif2",
            user_id="user123",
            title="Payment Due Soon",
            message="Your monthly HOA payment is due in 3 days.",
            type=NotificationType.BILLING,
            link="/billing",
            is_read=True,
            created_at=now - timedelta(days=1),
        ),
        Notification(
            id="notif3",
            user_id="user456",
            title="Service Request Updated",
            message="Your request 'Streetlight out on Elm Street' is now In Progress.",
            type=NotificationType.SERVICE_REQUEST,
            link="/service-requests",
            created_at=now,
        ),
        Notification(
            id="notif-admin-1",
            user_id="admin001",
            title="New User Registered",
            message="A new user, 'test@example.com', has registered.",
            type=NotificationType.GENERAL,
            link="/admin/user-management",
            created_at=now - timedelta(minutes=5),
        ),
    ]
    for notification in demo_notifications:
        portal.notification_store.append(notification)

    logging.info(
        "Demo data loaded",
        extra={"users": len(portal.users), "billing_accounts": len(portal.billing_accounts)},
    )
