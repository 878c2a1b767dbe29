import decimal
import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(
        decimal_places=2,
        default=decimal.Decimal("0.00"),
        max_digits=10,
        validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))],
        **kwargs,
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("restaurants", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("status", models.CharField(choices=[("PLACED", "Placed"), ("ACCEPTED", "Accepted"), ("PREPARING", "Preparing"), ("OUT_FOR_DELIVERY", "Out for Delivery"), ("DELIVERED", "Delivered"), ("CANCELLED", "Cancelled")], db_index=True, default="PLACED", max_length=20)),
                ("subtotal", money()),
                ("discount", money()),
                ("coupon_code", models.CharField(blank=True, max_length=50, null=True)),
                ("delivery_fee", money()),
                ("tax", money()),
                ("total", money(help_text="subtotal - discount + delivery_fee + tax")),
                ("ship_name", models.CharField(blank=True, default="", max_length=150)),
                ("ship_phone", models.CharField(blank=True, default="", max_length=20)),
                ("ship_line1", models.CharField(blank=True, default="", max_length=255)),
                ("ship_line2", models.CharField(blank=True, default="", max_length=255)),
                ("ship_city", models.CharField(blank=True, default="", max_length=100)),
                ("ship_state", models.CharField(blank=True, default="", max_length=100)),
                ("ship_postal", models.CharField(blank=True, default="", max_length=20)),
                ("ship_country", models.CharField(blank=True, default="", max_length=100)),
                ("placed_at", models.DateTimeField(blank=True, null=True)),
                ("preparing_at", models.DateTimeField(blank=True, help_text="Set when the order is accepted or starts preparing", null=True)),
                ("dispatched_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("assigned_agent", models.ForeignKey(blank=True, help_text="Delivery agent currently responsible for the order", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assigned_orders", to=settings.AUTH_USER_MODEL)),
                ("customer", models.ForeignKey(blank=True, help_text="Customer who placed the order. Empty for guest orders.", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to=settings.AUTH_USER_MODEL)),
                ("restaurant", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="orders", to="restaurants.restaurant")),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("menu_item_id", models.BigIntegerField(blank=True, help_text="Reference to the menu item at order time", null=True)),
                ("name", models.CharField(max_length=200)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(decimal.Decimal("0.00"))])),
                ("qty", models.PositiveIntegerField(default=1)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="orders.order")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(fields=["status", "assigned_agent"], name="order_status_agent_idx"),
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(fields=["customer", "-created_at"], name="order_customer_created_idx"),
        ),
        migrations.AddIndex(
            model_name="order",
            index=models.Index(fields=["assigned_agent", "-created_at"], name="order_agent_created_idx"),
        ),
    ]
