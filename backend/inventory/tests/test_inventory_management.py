import pytest
from decimal import Decimal
from django.core import mail
from rest_framework import status

from activity.models import Activity
from inventory.models import InventoryItem
from inventory.services import InventoryService


@pytest.mark.django_db
class TestInventoryService:
    def test_add_item_is_logged(self, admin_user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            item = InventoryService.add_item(
                admin_user,
                name="Paper Cups",
                quantity=Decimal("200"),
                unit=InventoryItem.Unit.PCS,
                category=InventoryItem.Category.PACKAGING,
            )

        assert item.min_threshold == Decimal("5.00")
        assert item.last_updated_by == admin_user
        activity = Activity.objects.get(action=Activity.Action.INVENTORY_ADDED)
        assert activity.details == "Added new inventory item: Paper Cups (200 pcs)"
        assert mail.outbox == []

    def test_dropping_below_threshold_alerts_admins(self, noodle_stock, admin_user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            InventoryService.update_item(noodle_stock, admin_user, quantity=Decimal("8"))

        assert noodle_stock.is_low_stock
        assert len(mail.outbox) == 1
        assert mail.outbox[0].subject == "Low stock: Maggi Packets"
        assert Activity.objects.filter(action=Activity.Action.INVENTORY_UPDATED).count() == 1

    def test_threshold_is_inclusive(self, noodle_stock, admin_user):
        InventoryService.update_item(noodle_stock, admin_user, quantity=Decimal("10"))

        assert noodle_stock.is_low_stock

    def test_already_low_item_does_not_realert(self, noodle_stock, admin_user, django_capture_on_commit_callbacks):
        InventoryService.update_item(noodle_stock, admin_user, quantity=Decimal("5"))

        with django_capture_on_commit_callbacks(execute=True):
            InventoryService.update_item(noodle_stock, admin_user, quantity=Decimal("3"))

        assert mail.outbox == []

    def test_adding_low_item_alerts(self, admin_user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            InventoryService.add_item(
                admin_user,
                name="Chilli Flakes",
                quantity=Decimal("1"),
                unit=InventoryItem.Unit.GM,
                category=InventoryItem.Category.SPICES,
            )

        assert len(mail.outbox) == 1

    def test_low_stock_listing(self, noodle_stock, admin_user):
        InventoryItem.objects.create(
            name="Butter",
            quantity=Decimal("0.5"),
            unit=InventoryItem.Unit.KG,
            min_threshold=Decimal("1"),
            category=InventoryItem.Category.RAW_MATERIAL,
        )

        assert [item.name for item in InventoryService.list_low_stock()] == ["Butter"]

    def test_delete_is_logged(self, noodle_stock, admin_user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            InventoryService.delete_item(noodle_stock, admin_user)

        assert not InventoryItem.objects.exists()
        assert Activity.objects.get(action=Activity.Action.INVENTORY_DELETED).details == (
            "Removed inventory item: Maggi Packets"
        )


@pytest.mark.django_db
class TestInventoryAPI:
    def test_admin_crud(self, admin_client):
        response = admin_client.post(
            "/api/inventory/",
            {"name": "Onions", "quantity": "12", "unit": "kg", "category": "Raw Material"},
            format="json",
        )
        assert response.status_code == status.HTTP_201_CREATED
        item_id = response.json()["id"]
        assert response.json()["last_updated_by_email"] == "admin@maggiepoint.test"

        response = admin_client.patch(f"/api/inventory/{item_id}/", {"quantity": "2"}, format="json")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["is_low_stock"] is True

        response = admin_client.get("/api/inventory/low-stock/")
        assert [row["name"] for row in response.json()] == ["Onions"]

        response = admin_client.delete(f"/api/inventory/{item_id}/")
        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_invalid_unit_is_rejected(self, admin_client):
        response = admin_client.post(
            "/api/inventory/",
            {"name": "Cheese", "quantity": "2", "unit": "tons", "category": "Raw Material"},
            format="json",
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_customer_is_forbidden(self, customer_client, noodle_stock):
        assert customer_client.get("/api/inventory/").status_code == status.HTTP_403_FORBIDDEN
