"""Prometheus metrics for notification volume, read activity, and billing reminders"""

from prometheus_client import Counter, Histogram

# Notification metrics
notifications_created_counter = Counter(
    "hoa_notifications_created_total",
    "Notifications created",
    ["type"],  # billing | announcement | vehicle_registration | ...
)

notifications_read_counter = Counter(
    "hoa_notifications_read_total",
    "Notifications transitioned to read",
    ["mode"],  # single | bulk
)

# Billing metrics
billing_reminder_counter = Counter(
    "hoa_billing_reminders_total",
    "Billing reminders requested by admins",
    ["outcome"],  # sent | failed
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_billing_reminder(sent: bool) -> None:
    """Record reminder outcome for monitoring delivery failures"""
    billing_reminder_counter.labels(outcome="sent" if sent else "failed").inc()


def record_notification_created(notification) -> None:
    notifications_created_counter.labels(type=notification.type.value).inc()


def record_notifications_read(mode: str, count: int) -> None:
    notifications_read_counter.labels(mode=mode).inc(count)
