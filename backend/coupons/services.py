import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .models import Coupon

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


@dataclass(frozen=True)
class CouponResolution:
    code: Optional[str]
    discount: Decimal

    @property
    def applied(self) -> bool:
        return self.code is not None


NO_COUPON = CouponResolution(code=None, discount=Decimal("0.00"))


class CouponService:
    """Turns a coupon code and an order subtotal into a discount amount."""

    @staticmethod
    def get_coupon(code: Optional[str]) -> Optional[Coupon]:
        if not code or not code.strip():
            return None
        return Coupon.objects.filter(code__iexact=code.strip()).first()

    @staticmethod
    def eligibility_errors(coupon: Coupon, subtotal: Decimal) -> list:
        errors = []
        if not coupon.is_active:
            errors.append("Coupon is not active")
        elif not coupon.is_currently_active():
            errors.append("Coupon has expired")
        if coupon.min_amount is not None and subtotal < coupon.min_amount:
            errors.append(f"Minimum order amount of {coupon.min_amount} not met")
        return errors

    @staticmethod
    def calculate_discount(coupon: Coupon, subtotal: Decimal) -> Decimal:
        discount = Decimal("0")
        if coupon.percent_off:
            discount += subtotal * coupon.percent_off / Decimal("100")
        if coupon.amount_off:
            discount += coupon.amount_off
        discount = min(discount, subtotal)
        return discount.quantize(CENT, rounding=ROUND_HALF_UP)

    @staticmethod
    def resolve(code: Optional[str], subtotal: Decimal) -> CouponResolution:
        """
        Resolve a coupon code against a subtotal.

        Unknown, inactive, expired or below-minimum codes resolve to a zero
        discount with no code, never an error.
        """
        coupon = CouponService.get_coupon(code)
        if coupon is None:
            if code:
                logger.info(f"Coupon code '{code}' not found; no discount applied")
            return NO_COUPON

        errors = CouponService.eligibility_errors(coupon, subtotal)
        if errors:
            logger.info(f"Coupon {coupon.code} not applied: {'; '.join(errors)}")
            return NO_COUPON

        return CouponResolution(
            code=coupon.code,
            discount=CouponService.calculate_discount(coupon, subtotal),
        )
