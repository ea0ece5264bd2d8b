from decimal import Decimal
import logging

from django.db.models import Count, Q, Sum

from orders.models import Order

logger = logging.getLogger(__name__)


class OrderFinanceService:
    """Read-only aggregates for the admin dashboard and finance screen."""

    @staticmethod
    def get_verified_revenue() -> Decimal:
        total = Order.objects.filter(payment_verified=True).aggregate(total=Sum("total_amount"))["total"]
        return total or Decimal("0.00")

    @staticmethod
    def get_order_stats() -> dict:
        """
        Per-status order count and revenue, plus overall totals.

        Revenue per status is the sum of order totals in that status,
        whatever their verification state; verified_revenue counts only
        orders whose payment is currently verified.
        """
        rows = (
            Order.objects.values("status")
            .annotate(count=Count("id"), revenue=Sum("total_amount"))
            .order_by("status")
        )
        by_status = {
            row["status"]: {"count": row["count"], "revenue": row["revenue"] or Decimal("0.00")}
            for row in rows
        }
        for status in Order.OrderStatus.values:
            by_status.setdefault(status, {"count": 0, "revenue": Decimal("0.00")})

        return {
            "by_status": by_status,
            "total_orders": sum(entry["count"] for entry in by_status.values()),
            "verified_revenue": OrderFinanceService.get_verified_revenue(),
        }

    @staticmethod
    def list_payments(search: str = None):
        """
        Orders that carry a payment reference, newest first. ``search``
        matches UTR or transaction id, case-insensitively.
        """
        queryset = (
            Order.objects.exclude(utr_number="")
            .select_related("customer", "verified_by")
            .order_by("-created_at")
        )
        search = (search or "").strip()
        if search:
            queryset = queryset.filter(
                Q(utr_number__icontains=search) | Q(transaction_id__icontains=search)
            )
        return queryset
