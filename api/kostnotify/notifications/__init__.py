"""Notification kinds keyed by event type."""

from kostnotify.exceptions import UnknownEventType
from kostnotify.notifications.base import NotificationKind, RenderContext
from kostnotify.notifications.payment_received import PaymentReceived, payment_received
from kostnotify.notifications.payment_reminder import PaymentReminder, payment_reminder
from kostnotify.notifications.rental_approved import RentalApproved, rental_approved

NOTIFICATIONS: dict[str, NotificationKind] = {
    kind.event_type: kind
    for kind in (payment_received, payment_reminder, rental_approved)
}


def get_notification(event_type: str) -> NotificationKind:
    try:
        return NOTIFICATIONS[event_type]
    except KeyError:
        raise UnknownEventType(f"Unknown notification event type: {event_type}") from None


__all__ = [
    "NOTIFICATIONS",
    "NotificationKind",
    "PaymentReceived",
    "PaymentReminder",
    "RenderContext",
    "RentalApproved",
    "get_notification",
]
