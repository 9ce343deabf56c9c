"""Process-wide repositories shared by every request"""

from dataclasses import dataclass, field

from hoa_portal.infrastructure.memory import (
    AnnouncementRepository,
    BillingAccountRepository,
    InMemoryNotificationStore,
    UserDirectory,
    VehicleRepository,
    VisitorPassRepository,
)


@dataclass
class Portal:
    """Collections owned by the running app; tests build a fresh one each time"""

    notification_backend: str = "memory"
    users: UserDirectory = field(default_factory=UserDirectory)
    notification_store: InMemoryNotificationStore = field(default_factory=InMemoryNotificationStore)
    billing_accounts: BillingAccountRepository = field(default_factory=BillingAccountRepository)
    announcements: AnnouncementRepository = field(default_factory=AnnouncementRepository)
    vehicles: VehicleRepository = field(default_factory=VehicleRepository)
    visitor_passes: VisitorPassRepository = field(default_factory=VisitorPassRepository)
