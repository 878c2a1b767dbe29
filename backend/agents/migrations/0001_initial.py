import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("orders", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AgentOrderAssignment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("ACCEPTED", "Accepted"), ("OUT_FOR_DELIVERY", "Out for Delivery"), ("DELIVERED", "Delivered")], default="ACCEPTED", max_length=20)),
                ("assigned_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("picked_up_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("agent", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="order_assignments", to=settings.AUTH_USER_MODEL)),
                ("order", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="agent_assignments", to="orders.order")),
            ],
            options={
                "ordering": ["-assigned_at", "-id"],
                "indexes": [
                    models.Index(fields=["order", "-assigned_at"], name="assignment_order_idx"),
                    models.Index(fields=["agent", "-assigned_at"], name="assignment_agent_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AgentProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("is_available", models.BooleanField(default=False, help_text="Agent is online and accepting deliveries")),
                ("current_latitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("current_longitude", models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ("last_location_update", models.DateTimeField(blank=True, null=True)),
                ("vehicle_type", models.CharField(blank=True, default="", max_length=50)),
                ("vehicle_number", models.CharField(blank=True, default="", max_length=50)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="agent_profile", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "indexes": [models.Index(fields=["is_available"], name="agent_profile_available_idx")],
            },
        ),
    ]
