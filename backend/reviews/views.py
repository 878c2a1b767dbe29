from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import CreateReviewSerializer, ReviewSerializer
from .services import ReviewService


class BaseReviewView(APIView):
    """
    GET lists reviews for the target, newest first; POST adds one.
    Subclasses map the URL kwarg onto the review target.
    """

    permission_classes = [AllowAny]
    target_kwarg = None

    def list_reviews(self, target_id):
        raise NotImplementedError

    def get(self, request, *args, **kwargs):
        reviews = self.list_reviews(kwargs[self.target_kwarg])
        return Response(ReviewSerializer(reviews, many=True).data)

    def post(self, request, *args, **kwargs):
        serializer = CreateReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        review = ReviewService.create_review(
            request.user,
            **serializer.validated_data,
            **{self.target_kwarg: kwargs[self.target_kwarg]},
        )
        return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


class MenuItemReviewsView(BaseReviewView):
    """/api/reviews/menu/<menu_item_id>/"""

    target_kwarg = "menu_item_id"

    def list_reviews(self, target_id):
        return ReviewService.list_for_menu_item(target_id)


class RestaurantReviewsView(BaseReviewView):
    """/api/reviews/restaurant/<restaurant_id>/"""

    target_kwarg = "restaurant_id"

    def list_reviews(self, target_id):
        return ReviewService.list_for_restaurant(target_id)
