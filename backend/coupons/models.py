from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class Coupon(models.Model):
    """
    Order-level coupon. A coupon may combine a percentage and a fixed amount;
    the resulting discount never exceeds the order subtotal.
    """

    code = models.CharField(
        max_length=50,
        unique=True,
        help_text="Coupon code, stored upper-case and matched case-insensitively.",
    )
    is_active = models.BooleanField(default=True)
    expires_at = models.DateTimeField(
        null=True, blank=True, help_text="The date and time when the coupon expires."
    )
    min_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="The minimum subtotal required for the coupon to apply.",
    )
    percent_off = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True
    )
    amount_off = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        if self.code:
            self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def is_currently_active(self):
        if not self.is_active:
            return False
        if self.expires_at and timezone.now() > self.expires_at:
            return False
        return True

    def clean(self):
        super().clean()
        if self.percent_off is not None and not (Decimal("0") <= self.percent_off <= Decimal("100")):
            raise ValidationError({"percent_off": "Percentage must be between 0 and 100."})
        if self.amount_off is not None and self.amount_off < 0:
            raise ValidationError({"amount_off": "Amount off cannot be negative."})
