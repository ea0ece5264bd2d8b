import logging
from collections import deque

from django.conf import settings
from django.db import transaction
from django.db.models import Q

from activity.models import Activity
from activity.services import ActivityService
from core_backend.exceptions import NotFoundError, ValidationError

from .models import User

logger = logging.getLogger(__name__)


class UserService:
    PROFILE_FIELDS = ("first_name", "last_name", "mobile", "floor", "room")
    ADMIN_EDITABLE_FIELDS = PROFILE_FIELDS + ("email",)
    LOG_TYPES = ("app", "error")

    @staticmethod
    @transaction.atomic
    def register_customer(email, password, ip=None, **profile) -> User:
        """
        Create a customer account and log the signup.
        """
        user = User.objects.create_user(email=email, password=password, **profile)
        logger.info(f"New customer registered: {user.email}")
        ActivityService.record_on_commit(
            user,
            Activity.Action.SIGNUP,
            f"New user registered: {user.email}",
            {"user_id": user.id},
            ip,
        )
        return user

    @staticmethod
    def update_profile(user: User, **changes) -> User:
        """
        Update the editable profile fields (name, mobile, floor, room).

        Floor and room feed the default delivery details of future orders;
        existing orders keep the address they were placed with.
        """
        update_fields = []
        for field, value in changes.items():
            if field in UserService.PROFILE_FIELDS:
                setattr(user, field, value)
                update_fields.append(field)

        if update_fields:
            user.save(update_fields=update_fields + ["updated_at"])
        return user

    @staticmethod
    def record_login(user: User, ip=None):
        ActivityService.record(user, Activity.Action.LOGIN, f"User logged in: {user.email}", ip=ip)

    @staticmethod
    def record_logout(user: User, ip=None):
        ActivityService.record(user, Activity.Action.LOGOUT, f"User logged out: {user.email}", ip=ip)

    # ------------------------------------------------------------------
    # Admin user management
    # ------------------------------------------------------------------

    @staticmethod
    def admin_filter():
        return Q(role=User.Role.ADMIN) | Q(is_superuser=True)

    @staticmethod
    def list_users():
        return User.objects.order_by("-date_joined", "-id")

    @staticmethod
    def list_admins():
        return UserService.list_users().filter(UserService.admin_filter())

    @staticmethod
    def get_user(user_id) -> User:
        try:
            return User.objects.get(pk=user_id)
        except (User.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"User {user_id} not found", code="user_not_found")

    @staticmethod
    def _ensure_email_free(email, exclude_pk=None):
        queryset = User.objects.filter(email__iexact=email)
        if exclude_pk is not None:
            queryset = queryset.exclude(pk=exclude_pk)
        if queryset.exists():
            raise ValidationError("A user with this email already exists.", code="email_taken")

    @staticmethod
    @transaction.atomic
    def create_user(actor, email, password, is_admin=False, ip=None, **profile) -> User:
        """
        Account created by an admin on a resident's behalf. Optionally
        created straight into the admin role.
        """
        email = email.strip().lower()
        UserService._ensure_email_free(email)

        role = User.Role.ADMIN if is_admin else User.Role.CUSTOMER
        fields = {k: v for k, v in profile.items() if k in UserService.PROFILE_FIELDS}
        user = User.objects.create_user(email=email, password=password, role=role, **fields)

        logger.info(f"User created by admin {actor.email}: {user.email} ({role})")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.USER_CREATED,
            f"Created user: {user.email}",
            {"user_id": user.pk, "role": role},
            ip,
        )
        return user

    @staticmethod
    @transaction.atomic
    def update_user(user: User, actor, ip=None, **changes) -> User:
        changed = {}
        for field, value in changes.items():
            if field not in UserService.ADMIN_EDITABLE_FIELDS:
                continue
            if field == "email":
                value = value.strip().lower()
                UserService._ensure_email_free(value, exclude_pk=user.pk)
            if getattr(user, field) != value:
                changed[field] = {"from": getattr(user, field), "to": value}
                setattr(user, field, value)

        if changed:
            user.save(update_fields=list(changed) + ["updated_at"])
            logger.info(f"User {user.email} updated by admin {actor.email}")
            ActivityService.record_on_commit(
                actor,
                Activity.Action.USER_UPDATED,
                f"Updated user: {user.email}",
                {"user_id": user.pk, "changes": changed},
                ip,
            )
        return user

    @staticmethod
    @transaction.atomic
    def reset_password(user: User, new_password, actor, ip=None) -> User:
        user.set_password(new_password)
        user.save(update_fields=["password", "updated_at"])

        logger.info(f"Password reset for {user.email} by admin {actor.email}")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.PASSWORD_RESET,
            f"Password reset for user: {user.email}",
            {"user_id": user.pk},
            ip,
        )
        return user

    @staticmethod
    @transaction.atomic
    def delete_user(user: User, actor, ip=None):
        """
        Remove an account. Accounts with orders are kept since orders are
        never deleted; deactivate those instead.
        """
        if user.pk == actor.pk:
            raise ValidationError("You cannot delete your own account.", code="cannot_delete_self")
        if user.orders.exists():
            raise ValidationError(
                "This user has orders and cannot be deleted.", code="user_has_orders", user_id=user.pk
            )

        user_id, email = user.pk, user.email
        user.delete()

        logger.warning(f"User deleted: {email} by admin {actor.email}")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.USER_DELETED,
            f"Deleted user: {email}",
            {"user_id": user_id, "email": email},
            ip,
        )

    @staticmethod
    @transaction.atomic
    def promote(user: User, actor, ip=None) -> User:
        if user.is_admin:
            raise ValidationError("User is already an admin.", code="already_admin")

        user.role = User.Role.ADMIN
        user.save(update_fields=["role", "updated_at"])

        logger.info(f"User promoted to admin: {user.email} by {actor.email}")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.USER_PROMOTED,
            f"Promoted {user.email} to admin",
            {"user_id": user.pk},
            ip,
        )
        return user

    @staticmethod
    @transaction.atomic
    def demote(user: User, actor, ip=None) -> User:
        if user.role != User.Role.ADMIN and not user.is_superuser:
            raise ValidationError("User is not an admin.", code="not_admin")
        if user.pk == actor.pk:
            raise ValidationError(
                "You cannot remove your own admin privileges.", code="cannot_demote_self"
            )
        if user.is_superuser:
            raise ValidationError("Superusers cannot be demoted here.", code="cannot_demote_superuser")

        user.role = User.Role.CUSTOMER
        user.is_staff = False
        user.save(update_fields=["role", "is_staff", "updated_at"])

        logger.warning(f"User demoted from admin: {user.email} by {actor.email}")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.USER_DEMOTED,
            f"Removed admin privileges from {user.email}",
            {"user_id": user.pk},
            ip,
        )
        return user

    # ------------------------------------------------------------------
    # Dashboard, bulk email, logs
    # ------------------------------------------------------------------

    @staticmethod
    def dashboard_stats():
        from menu.models import Dish

        total_users = User.objects.count()
        total_admins = User.objects.filter(UserService.admin_filter()).count()
        return {
            "total_users": total_users,
            "total_admins": total_admins,
            "regular_users": total_users - total_admins,
            "total_dishes": Dish.objects.count(),
            "available_dishes": Dish.objects.filter(is_available=True).count(),
        }

    @staticmethod
    def send_bulk_email(actor, user_ids, subject, content, ip=None):
        """
        Queue one admin-composed message per selected user.

        Returns the number of users the message was queued for. Unknown ids
        are dropped; if none remain a ValidationError is raised.
        """
        from notifications.tasks import send_bulk_email

        recipients = list(User.objects.filter(pk__in=set(user_ids)).values_list("pk", flat=True))
        if not recipients:
            raise ValidationError("None of the selected users exist.", code="no_recipients")

        send_bulk_email.delay(sorted(recipients), subject, content, actor_id=actor.pk, ip=ip)
        logger.info(f"Bulk email '{subject}' queued for {len(recipients)} users by {actor.email}")
        return len(recipients)

    @staticmethod
    def read_log(log_type, lines=None):
        """
        Tail of the app or error log file written by the LOGGING config.
        """
        if log_type not in UserService.LOG_TYPES:
            raise NotFoundError(f"Unknown log type '{log_type}'", code="log_not_found")

        log_file = settings.LOG_DIR / f"{log_type}.log"
        if not log_file.exists():
            raise NotFoundError(f"Log file {log_type}.log not found", code="log_not_found")

        max_lines = getattr(settings, "ADMIN_LOG_MAX_LINES", 2000)
        lines = max(1, min(int(lines or max_lines), max_lines))
        with open(log_file, encoding="utf-8", errors="replace") as handle:
            tail = deque(handle, maxlen=lines)
        return "".join(tail)
