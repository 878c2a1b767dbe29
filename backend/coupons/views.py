from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import ValidateCouponSerializer
from .services import CouponService


class ValidateCouponView(APIView):
    """
    Preview the discount a coupon would give for a subtotal.

    POST /api/coupons/validate/  {"code": "SAVE10", "subtotal": "200.00"}
    """

    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = ValidateCouponSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        code = serializer.validated_data["code"]
        subtotal = serializer.validated_data["subtotal"]

        coupon = CouponService.get_coupon(code)
        if coupon is None:
            return Response(
                {"valid": False, "errors": ["Invalid coupon code."], "discount": "0.00"},
                status=status.HTTP_200_OK,
            )

        errors = CouponService.eligibility_errors(coupon, subtotal)
        resolution = CouponService.resolve(code, subtotal)
        return Response(
            {
                "valid": not errors,
                "code": coupon.code,
                "errors": errors,
                "discount": str(resolution.discount),
            },
            status=status.HTTP_200_OK,
        )
