import logging

from django.db import transaction
from django.db.models import F

from activity.models import Activity
from activity.services import ActivityService

from .models import InventoryItem

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Manual stock keeping for the kitchen. Every change is written to the
    activity log, and an alert is queued when an item drops to its threshold.
    """

    EDITABLE_FIELDS = ("name", "quantity", "unit", "min_threshold", "category")

    @staticmethod
    def list_low_stock():
        return InventoryItem.objects.filter(quantity__lte=F("min_threshold")).order_by("name")

    @staticmethod
    @transaction.atomic
    def add_item(actor, ip=None, **data) -> InventoryItem:
        item = InventoryItem.objects.create(last_updated_by=actor, **data)
        logger.info(f"Inventory item added: {item.name} ({item.quantity} {item.unit})")

        ActivityService.record_on_commit(
            actor,
            Activity.Action.INVENTORY_ADDED,
            f"Added new inventory item: {item.name} ({item.quantity} {item.unit})",
            {"item_id": item.pk, "quantity": item.quantity, "unit": item.unit},
            ip,
        )
        if item.is_low_stock:
            InventoryService._queue_low_stock_alert(item)
        return item

    @staticmethod
    @transaction.atomic
    def update_item(item: InventoryItem, actor, ip=None, **changes) -> InventoryItem:
        was_low = item.is_low_stock
        previous_quantity = item.quantity

        for field, value in changes.items():
            if field in InventoryService.EDITABLE_FIELDS:
                setattr(item, field, value)
        item.last_updated_by = actor
        item.save()

        ActivityService.record_on_commit(
            actor,
            Activity.Action.INVENTORY_UPDATED,
            f"Updated inventory: {item.name} quantity to {item.quantity} {item.unit}",
            {
                "item_id": item.pk,
                "previous_quantity": previous_quantity,
                "quantity": item.quantity,
            },
            ip,
        )
        if item.is_low_stock and not was_low:
            InventoryService._queue_low_stock_alert(item)
        return item

    @staticmethod
    @transaction.atomic
    def delete_item(item: InventoryItem, actor, ip=None):
        item_id, name = item.pk, item.name
        item.delete()
        logger.info(f"Inventory item removed: {name} ({item_id})")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.INVENTORY_DELETED,
            f"Removed inventory item: {name}",
            {"item_id": item_id},
            ip,
        )

    @staticmethod
    def _queue_low_stock_alert(item: InventoryItem):
        from notifications.tasks import send_low_stock_alert

        item_id = item.pk

        def _send():
            try:
                send_low_stock_alert.delay(item_id)
            except Exception as e:
                logger.error(f"Failed to queue low stock alert for item {item_id}: {e}")

        logger.warning(f"Low stock: {item.name} at {item.quantity} {item.unit} (threshold {item.min_threshold})")
        transaction.on_commit(_send)
