import logging

from django.db import transaction

from activity.models import Activity
from activity.services import ActivityService
from core_backend.exceptions import NotFoundError

from .models import Dish

logger = logging.getLogger(__name__)


class DishService:
    EDITABLE_FIELDS = ("name", "description", "price", "category", "is_available", "emoji")

    @staticmethod
    def get_dish(dish_id) -> Dish:
        try:
            return Dish.objects.get(pk=dish_id)
        except (Dish.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"Dish {dish_id} not found", code="dish_not_found")

    @staticmethod
    def normalize_dish_id(dish_id):
        """Integer primary key for ``dish_id``, or None if it cannot be one."""
        if isinstance(dish_id, bool):
            return None
        if isinstance(dish_id, int):
            return dish_id
        if isinstance(dish_id, str) and dish_id.strip().isdecimal():
            return int(dish_id.strip())
        return None

    @staticmethod
    def get_dishes_by_ids(dish_ids):
        """
        Fetch every requested dish in one query, keyed by integer id.

        Raises NotFoundError naming the first missing id.
        """
        normalized = []
        for dish_id in dish_ids:
            pk = DishService.normalize_dish_id(dish_id)
            if pk is None:
                raise NotFoundError(f"Dish {dish_id} not found", code="dish_not_found")
            normalized.append(pk)

        dishes = Dish.objects.in_bulk(set(normalized))
        for pk in normalized:
            if pk not in dishes:
                raise NotFoundError(f"Dish {pk} not found", code="dish_not_found")
        return dishes

    @staticmethod
    def list_available():
        return Dish.objects.filter(is_available=True).order_by("category", "name")

    @staticmethod
    @transaction.atomic
    def create_dish(actor, ip=None, **data) -> Dish:
        dish = Dish.objects.create(created_by=actor, **data)
        logger.info(f"Dish created: {dish.name} ({dish.pk})")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.DISH_CREATED,
            f"Created dish: {dish.name}",
            {"dish_id": dish.pk, "price": dish.price},
            ip,
        )
        return dish

    @staticmethod
    @transaction.atomic
    def update_dish(dish: Dish, actor, ip=None, **changes) -> Dish:
        """
        Apply catalog edits. Existing orders are untouched since they carry
        their own item snapshot.
        """
        changed = {}
        for field, value in changes.items():
            if field not in DishService.EDITABLE_FIELDS:
                continue
            if getattr(dish, field) != value:
                changed[field] = {"from": getattr(dish, field), "to": value}
            setattr(dish, field, value)

        dish.save()
        ActivityService.record_on_commit(
            actor,
            Activity.Action.DISH_UPDATED,
            f"Updated dish: {dish.name}",
            {"dish_id": dish.pk, "changes": changed},
            ip,
        )
        return dish

    @staticmethod
    @transaction.atomic
    def delete_dish(dish: Dish, actor, ip=None):
        dish_id, name = dish.pk, dish.name
        dish.delete()
        logger.info(f"Dish deleted: {name} ({dish_id})")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.DISH_DELETED,
            f"Deleted dish: {name}",
            {"dish_id": dish_id},
            ip,
        )
