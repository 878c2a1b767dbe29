import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("orders", "0001_initial"),
        ("restaurants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Dispute",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("ORDER_NOT_RECEIVED", "Order Not Received"), ("WRONG_ITEMS", "Wrong Items"), ("QUALITY_ISSUE", "Quality Issue"), ("COLD_FOOD", "Cold Food"), ("MISSING_ITEMS", "Missing Items"), ("OVERCHARGE", "Overcharge"), ("DELIVERY_DELAY", "Delivery Delay"), ("RUDE_BEHAVIOR", "Rude Behavior"), ("OTHER", "Other")], max_length=30)),
                ("status", models.CharField(choices=[("OPEN", "Open"), ("IN_REVIEW", "In Review"), ("RESOLVED", "Resolved"), ("REJECTED", "Rejected"), ("CLOSED", "Closed")], default="OPEN", max_length=20)),
                ("subject", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("admin_response", models.TextField(blank=True, default="")),
                ("refund_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("resolved_at", models.DateTimeField(blank=True, null=True)),
                ("customer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="disputes", to=settings.AUTH_USER_MODEL)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="disputes", to="orders.order")),
                ("resolved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="resolved_disputes", to=settings.AUTH_USER_MODEL)),
                ("restaurant", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="disputes", to="restaurants.restaurant")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "-created_at"], name="dispute_status_created_idx"),
                    models.Index(fields=["customer", "-created_at"], name="dispute_customer_created_idx"),
                ],
            },
        ),
    ]
