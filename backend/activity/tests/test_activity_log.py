import pytest
from datetime import timedelta
from unittest import mock
from django.contrib.auth.models import AnonymousUser
from django.utils import timezone
from rest_framework import status

from activity.models import Activity
from activity.services import ActivityService


@pytest.mark.django_db
class TestActivityRecording:
    def test_record_with_actor(self, customer):
        activity = ActivityService.record(
            customer,
            Activity.Action.LOGIN,
            "User logged in",
            {"source": "web"},
            ip="192.168.1.20",
        )

        assert activity.pk is not None
        assert activity.actor == customer
        assert activity.metadata == {"source": "web"}
        assert activity.ip == "192.168.1.20"

    def test_anonymous_actor_is_stored_as_system(self, db):
        activity = ActivityService.record(AnonymousUser(), Activity.Action.SIGNUP, "Signup attempt")

        assert activity.actor is None
        assert activity.ip == "System"
        assert activity.metadata == {}

    def test_write_failure_is_swallowed(self, customer):
        with mock.patch.object(Activity.objects, "create", side_effect=RuntimeError("db gone")):
            result = ActivityService.record(customer, Activity.Action.LOGIN, "User logged in")

        assert result is None

    def test_record_on_commit_waits_for_commit(self, customer, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=False) as callbacks:
            ActivityService.record_on_commit(customer, Activity.Action.LOGOUT, "User logged out")

        assert not Activity.objects.exists()
        assert len(callbacks) == 1

        callbacks[0]()
        assert Activity.objects.filter(action=Activity.Action.LOGOUT).count() == 1


@pytest.mark.django_db
class TestActivityIsAppendOnly:
    def test_instance_cannot_be_modified(self, customer):
        activity = ActivityService.record(customer, Activity.Action.LOGIN, "User logged in")

        activity.details = "tampered"
        with pytest.raises(TypeError):
            activity.save()
        with pytest.raises(TypeError):
            activity.delete()

    def test_queryset_cannot_be_modified(self, customer):
        ActivityService.record(customer, Activity.Action.LOGIN, "User logged in")

        with pytest.raises(TypeError):
            Activity.objects.filter(action=Activity.Action.LOGIN).update(details="tampered")
        with pytest.raises(TypeError):
            Activity.objects.all().delete()

        assert Activity.objects.get().details == "User logged in"

    def test_deleting_user_keeps_history(self, other_customer):
        ActivityService.record(other_customer, Activity.Action.LOGIN, "User logged in")

        other_customer.delete()

        activity = Activity.objects.get()
        assert activity.actor is None


@pytest.mark.django_db
class TestActivityFeed:
    @pytest.fixture
    def feed(self, customer, admin_user):
        now = timezone.now()
        entries = [
            (customer, Activity.Action.LOGIN, now - timedelta(minutes=30)),
            (customer, Activity.Action.ORDER_PLACED, now - timedelta(minutes=20)),
            (admin_user, Activity.Action.PAYMENT_VERIFIED, now - timedelta(minutes=10)),
            (customer, Activity.Action.ORDER_PLACED, now - timedelta(minutes=5)),
        ]
        return [
            Activity.objects.create(actor=actor, action=action, details=action, timestamp=ts)
            for actor, action, ts in entries
        ]

    def test_newest_first(self, feed):
        activities = ActivityService.list_activities()

        assert activities == list(reversed(feed))

    def test_filter_by_action(self, feed):
        activities = ActivityService.list_activities(action=Activity.Action.ORDER_PLACED)

        assert [a.pk for a in activities] == [feed[3].pk, feed[1].pk]

    def test_limit(self, feed):
        assert len(ActivityService.list_activities(limit=2)) == 2

    def test_limit_is_clamped(self, feed, settings):
        settings.ACTIVITY_FEED_MAX_LIMIT = 3

        assert len(ActivityService.list_activities(limit=1000)) == 3
        assert len(ActivityService.list_activities(limit=0)) == 1


@pytest.mark.django_db
class TestActivityAPI:
    def test_admin_reads_feed(self, admin_client, customer):
        ActivityService.record(customer, Activity.Action.LOGIN, "User logged in", ip="10.1.1.1")
        ActivityService.record(None, Activity.Action.ORDER_STATUS_UPDATED, "System sweep")

        response = admin_client.get("/api/admin/activities/", {"limit": 10})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data) == 2
        assert data[0]["actor_name"] == "System"
        assert data[1]["actor_email"] == "riya@hostel.test"
        assert data[1]["ip"] == "10.1.1.1"

    def test_filter_by_action(self, admin_client, customer):
        ActivityService.record(customer, Activity.Action.LOGIN, "User logged in")
        ActivityService.record(customer, Activity.Action.LOGOUT, "User logged out")

        response = admin_client.get("/api/admin/activities/", {"action": "LOGOUT"})

        assert [row["action"] for row in response.json()] == ["LOGOUT"]

    def test_unknown_action_is_rejected(self, admin_client):
        response = admin_client.get("/api/admin/activities/", {"action": "HACKED"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_customer_is_forbidden(self, customer_client):
        response = customer_client.get("/api/admin/activities/")

        assert response.status_code == status.HTTP_403_FORBIDDEN
