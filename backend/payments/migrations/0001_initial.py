import decimal
import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("provider", models.CharField(choices=[("STRIPE", "Stripe")], default="STRIPE", max_length=20)),
                ("provider_order_id", models.CharField(blank=True, help_text="Provider checkout identifier (Stripe PaymentIntent id)", max_length=255, null=True, unique=True)),
                ("provider_payment_id", models.CharField(blank=True, db_index=True, help_text="Provider payment identifier (Stripe charge id)", max_length=255, null=True)),
                ("status", models.CharField(choices=[("CREATED", "Created"), ("AUTHORIZED", "Authorized"), ("CAPTURED", "Captured"), ("FAILED", "Failed"), ("REFUND_REQUESTED", "Refund Requested"), ("REFUNDED", "Refunded")], default="CREATED", help_text="The current status of the payment.", max_length=20)),
                ("amount", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=10)),
                ("currency", models.CharField(default="INR", max_length=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("order", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="payments", to="orders.order")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["order", "-created_at"], name="payment_order_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="PaymentWebhookEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("event_id", models.CharField(max_length=255, unique=True)),
                ("event_type", models.CharField(blank=True, default="", max_length=100)),
                ("signature", models.TextField(blank=True, default="")),
                ("payload_sha256", models.CharField(max_length=64)),
                ("received_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["-received_at"],
            },
        ),
    ]
