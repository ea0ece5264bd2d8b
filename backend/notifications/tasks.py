import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task
def send_order_status_email(order_id, new_status):
    """Deliver one order-status email. Failures are logged, not retried."""
    from orders.models import Order

    from .services import EmailService

    try:
        order = Order.objects.select_related("customer").prefetch_related("items").get(pk=order_id)
    except Order.DoesNotExist:
        logger.warning(f"Order {order_id} no longer exists; status email skipped")
        return False

    return EmailService().send_order_status_email(order, new_status)


@shared_task
def send_low_stock_alert(item_id):
    """Email every active admin about a low inventory item."""
    from django.contrib.auth import get_user_model

    from inventory.models import InventoryItem

    from .services import EmailService

    try:
        item = InventoryItem.objects.get(pk=item_id)
    except InventoryItem.DoesNotExist:
        logger.warning(f"Inventory item {item_id} no longer exists; low stock alert skipped")
        return False

    User = get_user_model()
    recipients = list(
        User.objects.filter(role=User.Role.ADMIN, is_active=True)
        .exclude(email="")
        .values_list("email", flat=True)
    )
    return EmailService().send_low_stock_alert(recipients, item)


@shared_task
def send_bulk_email(user_ids, subject, content, actor_id=None, ip=None):
    """
    Send an admin-composed message to each selected user, one at a time,
    then log a single BULK_EMAIL_SENT entry with the outcome.
    """
    from django.contrib.auth import get_user_model

    from activity.models import Activity
    from activity.services import ActivityService

    from .services import EmailService

    User = get_user_model()
    service = EmailService()
    success_count = 0
    fail_count = 0

    for user in User.objects.filter(pk__in=user_ids).order_by("pk"):
        if service.send_bulk_message(user, subject, content):
            success_count += 1
        else:
            fail_count += 1

    actor = User.objects.filter(pk=actor_id).first() if actor_id else None
    ActivityService.record(
        actor,
        Activity.Action.BULK_EMAIL_SENT,
        f"Bulk email sent to {success_count} users. Subject: {subject}",
        {
            "user_ids": list(user_ids),
            "subject": subject,
            "success_count": success_count,
            "fail_count": fail_count,
        },
        ip,
    )
    logger.info(f"Bulk email '{subject}': {success_count} sent, {fail_count} failed")
    return {"success_count": success_count, "fail_count": fail_count}
