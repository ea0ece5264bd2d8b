from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class ActivityQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise TypeError("Activity records are append-only and cannot be updated.")

    def delete(self):
        raise TypeError("Activity records are append-only and cannot be deleted.")


class Activity(models.Model):
    """
    One immutable audit entry: who did what, when, and from where.
    """

    class Action(models.TextChoices):
        LOGIN = "LOGIN", _("Login")
        LOGOUT = "LOGOUT", _("Logout")
        SIGNUP = "SIGNUP", _("Signup")
        ORDER_PLACED = "ORDER_PLACED", _("Order Placed")
        ORDER_STATUS_UPDATED = "ORDER_STATUS_UPDATED", _("Order Status Updated")
        ORDER_CANCELLED = "ORDER_CANCELLED", _("Order Cancelled")
        ORDER_TIME_UPDATED = "ORDER_TIME_UPDATED", _("Order Time Updated")
        PAYMENT_SUBMITTED = "PAYMENT_SUBMITTED", _("Payment Submitted")
        PAYMENT_VERIFIED = "PAYMENT_VERIFIED", _("Payment Verified")
        DISH_CREATED = "DISH_CREATED", _("Dish Created")
        DISH_UPDATED = "DISH_UPDATED", _("Dish Updated")
        DISH_DELETED = "DISH_DELETED", _("Dish Deleted")
        OFFER_CREATED = "OFFER_CREATED", _("Offer Created")
        OFFER_UPDATED = "OFFER_UPDATED", _("Offer Updated")
        OFFER_DELETED = "OFFER_DELETED", _("Offer Deleted")
        INVENTORY_ADDED = "INVENTORY_ADDED", _("Inventory Added")
        INVENTORY_UPDATED = "INVENTORY_UPDATED", _("Inventory Updated")
        INVENTORY_DELETED = "INVENTORY_DELETED", _("Inventory Deleted")
        USER_CREATED = "USER_CREATED", _("User Created")
        USER_UPDATED = "USER_UPDATED", _("User Updated")
        USER_DELETED = "USER_DELETED", _("User Deleted")
        USER_PROMOTED = "USER_PROMOTED", _("User Promoted")
        USER_DEMOTED = "USER_DEMOTED", _("User Demoted")
        PASSWORD_RESET = "PASSWORD_RESET", _("Password Reset")
        BULK_EMAIL_SENT = "BULK_EMAIL_SENT", _("Bulk Email Sent")

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="activities",
        help_text=_("User who performed the action. Empty for system actions."),
    )
    action = models.CharField(max_length=40, choices=Action.choices, db_index=True)
    details = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    ip = models.CharField(max_length=64, default="System")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    objects = ActivityQuerySet.as_manager()

    class Meta:
        verbose_name = _("Activity")
        verbose_name_plural = _("Activities")
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["action", "-timestamp"], name="activity_action_ts_idx"),
            models.Index(fields=["actor", "-timestamp"], name="activity_actor_ts_idx"),
        ]

    def __str__(self):
        return f"{self.get_action_display()} by {self.actor or 'system'} at {self.timestamp:%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise TypeError("Activity records are append-only and cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TypeError("Activity records are append-only and cannot be deleted.")
