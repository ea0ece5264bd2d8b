import pytest
from decimal import Decimal
from rest_framework import status

from activity.models import Activity
from core_backend.exceptions import NotFoundError
from menu.models import Dish
from menu.services import DishService


@pytest.mark.django_db
class TestDishService:
    def test_get_dish_not_found(self, db):
        with pytest.raises(NotFoundError) as exc_info:
            DishService.get_dish(12345)

        assert exc_info.value.code == "dish_not_found"

    def test_get_dishes_by_ids_reports_missing(self, masala_maggi):
        with pytest.raises(NotFoundError) as exc_info:
            DishService.get_dishes_by_ids([masala_maggi.pk, 98765])

        assert "98765" in str(exc_info.value)

    def test_get_dishes_by_ids_accepts_string_ids(self, masala_maggi, cold_coffee):
        dishes = DishService.get_dishes_by_ids([str(masala_maggi.pk), cold_coffee.pk])

        assert dishes == {masala_maggi.pk: masala_maggi, cold_coffee.pk: cold_coffee}

    @pytest.mark.parametrize("dish_id", ["abc", None, True, 1.5])
    def test_get_dishes_by_ids_rejects_non_ids(self, masala_maggi, dish_id):
        with pytest.raises(NotFoundError) as exc_info:
            DishService.get_dishes_by_ids([masala_maggi.pk, dish_id])

        assert exc_info.value.code == "dish_not_found"

    def test_update_records_changes(self, masala_maggi, admin_user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            DishService.update_dish(masala_maggi, admin_user, price=Decimal("45.00"), created_by=None)

        masala_maggi.refresh_from_db()
        assert masala_maggi.price == Decimal("45.00")
        assert masala_maggi.created_by == admin_user

        activity = Activity.objects.get(action=Activity.Action.DISH_UPDATED)
        assert activity.metadata["changes"]["price"] == {"from": "40.00", "to": "45.00"}


@pytest.mark.django_db
class TestDishAPI:
    def test_catalog_is_public(self, api_client, masala_maggi, unavailable_dish):
        response = api_client.get("/api/dishes/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["count"] == 2

    def test_filter_by_category_ignores_case(self, api_client, masala_maggi, cold_coffee):
        response = api_client.get("/api/dishes/", {"category": "beverages"})

        assert [row["name"] for row in response.json()["results"]] == ["Cold Coffee"]

    def test_admin_creates_dish(self, admin_client, admin_user, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = admin_client.post(
                "/api/dishes/",
                {"name": "Butter Maggi", "price": "55.00", "category": " Maggi "},
                format="json",
            )

        assert response.status_code == status.HTTP_201_CREATED
        dish = Dish.objects.get(name="Butter Maggi")
        assert dish.category == "Maggi"
        assert dish.emoji == "🍜"
        assert dish.created_by == admin_user
        assert Activity.objects.filter(action=Activity.Action.DISH_CREATED).count() == 1

    def test_negative_price_is_rejected(self, admin_client):
        response = admin_client.post(
            "/api/dishes/", {"name": "Broken", "price": "-1.00", "category": "Maggi"}, format="json"
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_admin_deletes_dish(self, admin_client, masala_maggi, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            response = admin_client.delete(f"/api/dishes/{masala_maggi.pk}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Dish.objects.exists()
        activity = Activity.objects.get(action=Activity.Action.DISH_DELETED)
        assert activity.details == "Deleted dish: Masala Maggi"

    def test_customer_cannot_write(self, customer_client, masala_maggi):
        response = customer_client.patch(f"/api/dishes/{masala_maggi.pk}/", {"price": "1.00"}, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        masala_maggi.refresh_from_db()
        assert masala_maggi.price == Decimal("40.00")


@pytest.mark.django_db
class TestMenuEndpoint:
    def test_menu_shows_resolved_prices(self, api_client, masala_maggi, cold_coffee, unavailable_dish, maggi_percentage_offer):
        response = api_client.get("/api/dishes/menu/")

        assert response.status_code == status.HTTP_200_OK
        menu = {row["name"]: row for row in response.json()}
        assert set(menu) == {"Masala Maggi", "Cold Coffee"}

        assert menu["Masala Maggi"]["price"] == "40.00"
        assert menu["Masala Maggi"]["final_price"] == "36.00"
        assert menu["Masala Maggi"]["discounted"] is True
        assert menu["Masala Maggi"]["applied_offer"] == "Maggi Monday"

        assert menu["Cold Coffee"]["final_price"] == "50.00"
        assert menu["Cold Coffee"]["discounted"] is False

    def test_menu_category_filter(self, api_client, masala_maggi, cold_coffee):
        response = api_client.get("/api/dishes/menu/", {"category": "MAGGI"})

        assert [row["name"] for row in response.json()] == ["Masala Maggi"]
