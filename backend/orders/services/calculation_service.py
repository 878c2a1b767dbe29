from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from django.conf import settings

from coupons.services import CouponService

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    discount: Decimal
    coupon_code: Optional[str]
    delivery_fee: Decimal
    tax: Decimal
    total: Decimal


class OrderCalculationService:
    """
    Prices an order at creation time.

    total = subtotal - discount + delivery_fee + tax, where tax is charged on
    the discounted subtotal and the discount never exceeds the subtotal.
    """

    @staticmethod
    def calculate_subtotal(lines: Iterable[dict]) -> Decimal:
        return _money(
            sum(
                (Decimal(str(line["price"])) * int(line["qty"]) for line in lines),
                Decimal("0"),
            )
        )

    @staticmethod
    def calculate(lines: Iterable[dict], coupon_code: Optional[str] = None) -> OrderTotals:
        lines = list(lines)
        subtotal = OrderCalculationService.calculate_subtotal(lines)
        coupon = CouponService.resolve(coupon_code, subtotal)

        delivery_fee = _money(settings.ORDER_DELIVERY_FEE)
        tax = _money((subtotal - coupon.discount) * Decimal(str(settings.ORDER_TAX_RATE)))
        total = subtotal - coupon.discount + delivery_fee + tax

        return OrderTotals(
            subtotal=subtotal,
            discount=coupon.discount,
            coupon_code=coupon.code,
            delivery_fee=delivery_fee,
            tax=tax,
            total=total,
        )
