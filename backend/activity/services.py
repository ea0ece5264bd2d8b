import logging
from functools import partial

from django.conf import settings
from django.db import transaction

from .models import Activity

logger = logging.getLogger(__name__)


class ActivityService:
    """
    Append-only audit log.

    Recording is best-effort: a failure to write an activity is logged and
    never propagates into the operation that triggered it.
    """

    @staticmethod
    def record(actor, action, details="", metadata=None, ip=None):
        """
        Append one activity entry.

        Args:
            actor: User performing the action, or None for system actions.
            action: One of Activity.Action.
            details: Human readable description.
            metadata: JSON-serialisable dict with structured context.
            ip: Client address; stored as "System" when unknown.

        Returns:
            The created Activity, or None when the write failed.
        """
        actor_obj = actor if getattr(actor, "is_authenticated", False) else None
        try:
            activity = Activity.objects.create(
                actor=actor_obj,
                action=action,
                details=details or "",
                metadata=metadata or {},
                ip=ip or "System",
            )
        except Exception as e:
            logger.error(f"Failed to record activity {action} ({details}): {e}")
            return None

        logger.info(
            f"[ACTIVITY] {action} - {details} - user={getattr(actor_obj, 'email', 'system')}"
        )
        return activity

    @staticmethod
    def record_on_commit(actor, action, details="", metadata=None, ip=None):
        """
        Schedule an activity entry for after the surrounding transaction
        commits. Outside a transaction it is written immediately.
        """
        transaction.on_commit(
            partial(ActivityService.record, actor, action, details, metadata, ip)
        )

    @staticmethod
    def list_activities(action=None, limit=None):
        """
        Newest-first slice of the log, optionally filtered by action kind.

        The limit defaults to ACTIVITY_FEED_DEFAULT_LIMIT and is clamped to
        the range 1..ACTIVITY_FEED_MAX_LIMIT.
        """
        default_limit = getattr(settings, "ACTIVITY_FEED_DEFAULT_LIMIT", 50)
        max_limit = getattr(settings, "ACTIVITY_FEED_MAX_LIMIT", 500)

        if limit is None:
            limit = default_limit
        limit = max(1, min(int(limit), max_limit))

        queryset = Activity.objects.select_related("actor").order_by("-timestamp", "-id")
        if action:
            queryset = queryset.filter(action=action)
        return list(queryset[:limit])
