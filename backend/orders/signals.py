import logging

from django.dispatch import Signal, receiver

logger = logging.getLogger(__name__)

# Sent after commit whenever an order moves to a new status.
# kwargs: order, old_status, new_status, actor
order_status_changed = Signal()


@receiver(order_status_changed)
def queue_status_notification(sender, order, old_status, new_status, **kwargs):
    """
    Queue the customer email for a status change. Failures to queue are
    logged; the order change itself is already committed.
    """
    from django.conf import settings

    if not getattr(settings, "ORDER_STATUS_EMAILS_ENABLED", True):
        return

    try:
        from notifications.tasks import send_order_status_email

        send_order_status_email.delay(str(order.id), new_status)
        logger.info(f"Queued status email for order {order.id}: {old_status} -> {new_status}")
    except Exception as e:
        logger.error(f"Failed to queue status email for order {order.id}: {e}")
