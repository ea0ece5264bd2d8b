from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


class EmailService:
    # Subject line and headline per order status
    STATUS_MESSAGES = {
        "pending": (
            "Payment received for review",
            "We have your payment details and will verify them shortly.",
        ),
        "confirmed": (
            "Order confirmed",
            "Your payment is verified and your order is confirmed.",
        ),
        "preparing": (
            "Your order is being prepared",
            "The kitchen has started on your order.",
        ),
        "out_for_delivery": (
            "Your order is on the way",
            "Your order has left the kitchen and is heading to you.",
        ),
        "delivered": (
            "Order delivered",
            "Your order has been delivered. Enjoy your meal!",
        ),
        "cancelled": (
            "Order cancelled",
            "Your order has been cancelled.",
        ),
    }

    def __init__(self):
        self.default_from_email = getattr(
            settings, "DEFAULT_FROM_EMAIL", "Maggie Point <noreply@maggiepoint.local>"
        )

    def send_email(self, recipient_list, subject, template_name, context):
        """
        Sends an email using a Django template.

        Args:
            recipient_list (list): A list of recipient email addresses.
            subject (str): The subject of the email.
            template_name (str): The path to the email template (e.g., 'emails/order_status.html').
            context (dict): A dictionary of data to render in the template.
        """
        html_message = render_to_string(template_name, context)
        send_mail(
            subject,
            "",  # Empty message, as we are sending HTML
            self.default_from_email,
            recipient_list,
            html_message=html_message,
            fail_silently=False,
        )

    def send_order_status_email(self, order, new_status):
        """
        Tell the customer their order moved to ``new_status``.

        Returns:
            True if sent, False if skipped or failed. Never raises.
        """
        try:
            recipient_email = order.customer.email
            if not recipient_email:
                logger.warning(f"No email address found for order_id {order.id}")
                return False

            subject, headline = self.STATUS_MESSAGES.get(
                new_status, ("Order update", "There is an update on your order.")
            )
            local_placed_at = timezone.localtime(order.order_placed_at or order.created_at)

            context = {
                "user": {
                    "name": order.customer.get_full_name() or order.customer.email,
                    "email": recipient_email,
                },
                "headline": headline,
                "order": {
                    "shortId": order.short_id,
                    "status": order.get_status_display(),
                    "items": [
                        {
                            "name": item.name,
                            "emoji": item.emoji,
                            "quantity": item.quantity,
                            "price": item.unit_price,
                            "total": item.line_total,
                        }
                        for item in order.items.all()
                    ],
                    "convenienceFee": order.convenience_fee,
                    "total": order.total_amount,
                    "deliveryType": order.get_delivery_type_display(),
                    "floor": order.delivery_floor,
                    "room": order.delivery_room,
                    "estimatedMinutes": order.estimated_delivery_time,
                    "cancellationReason": order.cancellation_reason,
                    "placedAt": local_placed_at.strftime("%B %d, %Y at %I:%M %p"),
                },
            }

            self.send_email(
                recipient_list=[recipient_email],
                subject=f"Maggie Point #{order.short_id}: {subject}",
                template_name="emails/order_status.html",
                context=context,
            )

            logger.info(f"Status email ({new_status}) sent to {recipient_email} for order {order.id}")
            return True

        except Exception as e:
            logger.error(f"Failed to send status email for order {order.id}: {e}")
            return False

    def send_low_stock_alert(self, recipient_list, item):
        """
        Alert admins that an inventory item is at or below its threshold.
        """
        try:
            if not recipient_list:
                logger.warning(f"No recipients for low stock alert on {item.name}")
                return False

            self.send_email(
                recipient_list=recipient_list,
                subject=f"Low stock: {item.name}",
                template_name="emails/low_stock_alert.html",
                context={
                    "item": {
                        "name": item.name,
                        "quantity": item.quantity,
                        "unit": item.get_unit_display(),
                        "threshold": item.min_threshold,
                        "category": item.get_category_display(),
                    }
                },
            )
            logger.info(f"Low stock alert sent for {item.name} to {len(recipient_list)} recipient(s)")
            return True

        except Exception as e:
            logger.error(f"Failed to send low stock alert for {item.name}: {e}")
            return False

    def send_bulk_message(self, user, subject, content):
        """
        One admin-composed message to a single resident. Returns False on
        failure instead of raising so a batch can keep going.
        """
        if not user.email:
            logger.warning(f"User {user.pk} has no email address; bulk message skipped")
            return False

        try:
            self.send_email(
                recipient_list=[user.email],
                subject=subject,
                template_name="emails/bulk_message.html",
                context={
                    "user": {"name": user.get_full_name() or user.email},
                    "subject": subject,
                    "content": content,
                },
            )
            return True

        except Exception as e:
            logger.error(f"Failed to send bulk message to {user.email}: {e}")
            return False
