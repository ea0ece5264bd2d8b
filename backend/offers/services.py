import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from activity.models import Activity
from activity.services import ActivityService
from core_backend.exceptions import ValidationError

from .models import Offer

logger = logging.getLogger(__name__)


class OfferService:
    """
    Offer lookup and administration. Price math lives in offers.pricing.
    """

    EDITABLE_FIELDS = (
        "title",
        "description",
        "discount_type",
        "discount_value",
        "applicable_to",
        "target_id",
        "is_active",
        "valid_until",
    )

    @staticmethod
    def get_active_offers(now=None):
        """
        Offers that are switched on and not expired, oldest first.

        The ordering is what makes tie-breaking in resolve_price stable.
        """
        now = now or timezone.now()
        return list(
            Offer.objects.filter(is_active=True)
            .filter(Q(valid_until__isnull=True) | Q(valid_until__gte=now))
            .order_by("created_at", "id")
        )

    @staticmethod
    @transaction.atomic
    def create_offer(actor, ip=None, **data) -> Offer:
        offer = Offer(created_by=actor, **data)
        OfferService._validate(offer)
        offer.save()
        logger.info(f"Offer created: {offer.title} ({offer.pk})")
        ActivityService.record_on_commit(
            actor,
            Activity.Action.OFFER_CREATED,
            f"Created offer: {offer.title}",
            {
                "offer_id": offer.pk,
                "discount_type": offer.discount_type,
                "discount_value": offer.discount_value,
            },
            ip,
        )
        return offer

    @staticmethod
    @transaction.atomic
    def update_offer(offer: Offer, actor, ip=None, **changes) -> Offer:
        for field, value in changes.items():
            if field in OfferService.EDITABLE_FIELDS:
                setattr(offer, field, value)
        OfferService._validate(offer)
        offer.save()
        ActivityService.record_on_commit(
            actor,
            Activity.Action.OFFER_UPDATED,
            f"Updated offer: {offer.title}",
            {"offer_id": offer.pk, "fields": sorted(changes)},
            ip,
        )
        return offer

    @staticmethod
    @transaction.atomic
    def delete_offer(offer: Offer, actor, ip=None):
        offer_id, title = offer.pk, offer.title
        offer.delete()
        ActivityService.record_on_commit(
            actor,
            Activity.Action.OFFER_DELETED,
            f"Deleted offer: {title}",
            {"offer_id": offer_id},
            ip,
        )

    @staticmethod
    def _validate(offer: Offer):
        try:
            offer.full_clean(exclude=["created_by"])
        except DjangoValidationError as e:
            raise ValidationError(
                "Invalid offer", code="invalid_offer", fields=e.message_dict
            )
