from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core_backend.pagination import StandardPagination
from users.permissions import IsAdminRole, IsCustomerOrAdmin
from .serializers import (
    CreateDisputeSerializer,
    DisputeSerializer,
    ResolveDisputeSerializer,
    UpdateDisputeStatusSerializer,
)
from .services import DisputeService


class DisputeViewSet(viewsets.GenericViewSet):
    """
    Customer disputes and their admin workflow.

    - POST /api/disputes/                 open a dispute (customers)
    - GET  /api/disputes/my/              the caller's disputes
    - GET  /api/disputes/<id>/            a single dispute (its customer or an admin)
    - GET  /api/disputes/admin/all/       every dispute, ?status= filter (admin)
    - GET  /api/disputes/admin/stats/     counts per status (admin)
    - PUT  /api/disputes/<id>/resolve/    approve or reject (admin)
    - PUT  /api/disputes/<id>/status/     set any status (admin)
    """

    serializer_class = DisputeSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = StandardPagination
    lookup_value_regex = r"\d+"

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = CreateDisputeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dispute = DisputeService.create_dispute(
            customer=request.user,
            order_id=data["order_id"],
            dispute_type=data["type"],
            subject=data["subject"],
            description=data["description"],
        )
        return Response(DisputeSerializer(dispute).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, pk=None, *args, **kwargs) -> Response:
        dispute = DisputeService.get_dispute(pk, request.user)
        return Response(DisputeSerializer(dispute).data)

    @action(detail=False, methods=["get"], url_path="my")
    def my(self, request: Request) -> Response:
        disputes = DisputeService.list_for_customer(request.user)
        return Response(DisputeSerializer(disputes, many=True).data)

    @action(detail=False, methods=["get"], url_path="admin/all", permission_classes=[IsAdminRole])
    def admin_all(self, request: Request) -> Response:
        disputes = DisputeService.list_all(request.query_params.get("status"))
        page = self.paginate_queryset(disputes)
        if page is not None:
            return self.get_paginated_response(DisputeSerializer(page, many=True).data)
        return Response(DisputeSerializer(disputes, many=True).data)

    @action(detail=False, methods=["get"], url_path="admin/stats", permission_classes=[IsAdminRole])
    def admin_stats(self, request: Request) -> Response:
        return Response(DisputeService.stats())

    @action(detail=True, methods=["put"], url_path="resolve", permission_classes=[IsAdminRole])
    def resolve(self, request: Request, pk=None) -> Response:
        serializer = ResolveDisputeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dispute = DisputeService.resolve(
            pk,
            admin=request.user,
            approved=data["approved"],
            response=data["response"],
            refund_amount=data.get("refund_amount"),
        )
        return Response(DisputeSerializer(dispute).data)

    @action(detail=True, methods=["put"], url_path="status", permission_classes=[IsAdminRole])
    def update_status(self, request: Request, pk=None) -> Response:
        serializer = UpdateDisputeStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dispute = DisputeService.update_status(pk, serializer.validated_data["status"].upper())
        return Response(DisputeSerializer(dispute).data)

    def get_permissions(self):
        if self.action == "create":
            return [IsCustomerOrAdmin()]
        return super().get_permissions()
