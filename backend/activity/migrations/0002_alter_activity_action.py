from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("activity", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="activity",
            name="action",
            field=models.CharField(choices=[("LOGIN", "Login"), ("LOGOUT", "Logout"), ("SIGNUP", "Signup"), ("ORDER_PLACED", "Order Placed"), ("ORDER_STATUS_UPDATED", "Order Status Updated"), ("ORDER_CANCELLED", "Order Cancelled"), ("ORDER_TIME_UPDATED", "Order Time Updated"), ("PAYMENT_SUBMITTED", "Payment Submitted"), ("PAYMENT_VERIFIED", "Payment Verified"), ("DISH_CREATED", "Dish Created"), ("DISH_UPDATED", "Dish Updated"), ("DISH_DELETED", "Dish Deleted"), ("OFFER_CREATED", "Offer Created"), ("OFFER_UPDATED", "Offer Updated"), ("OFFER_DELETED", "Offer Deleted"), ("INVENTORY_ADDED", "Inventory Added"), ("INVENTORY_UPDATED", "Inventory Updated"), ("INVENTORY_DELETED", "Inventory Deleted"), ("USER_CREATED", "User Created"), ("USER_UPDATED", "User Updated"), ("USER_DELETED", "User Deleted"), ("USER_PROMOTED", "User Promoted"), ("USER_DEMOTED", "User Demoted"), ("PASSWORD_RESET", "Password Reset"), ("BULK_EMAIL_SENT", "Bulk Email Sent")], db_index=True, max_length=40),
        ),
    ]
