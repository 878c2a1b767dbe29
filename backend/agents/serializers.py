from decimal import Decimal

from rest_framework import serializers

from .models import AgentOrderAssignment, AgentProfile
from .services import DEFAULT_SEARCH_RADIUS_KM


class UpdateLocationSerializer(serializers.Serializer):
    latitude = serializers.DecimalField(
        max_digits=9, decimal_places=6, min_value=Decimal("-90"), max_value=Decimal("90")
    )
    longitude = serializers.DecimalField(
        max_digits=9, decimal_places=6, min_value=Decimal("-180"), max_value=Decimal("180")
    )
    is_available = serializers.BooleanField(required=False, allow_null=True, default=None)


class NearbyAgentsQuerySerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    radius_km = serializers.FloatField(min_value=0, required=False, default=DEFAULT_SEARCH_RADIUS_KM)


class AgentLocationSerializer(serializers.ModelSerializer):
    latitude = serializers.DecimalField(
        source="current_latitude", max_digits=9, decimal_places=6, read_only=True
    )
    longitude = serializers.DecimalField(
        source="current_longitude", max_digits=9, decimal_places=6, read_only=True
    )
    updated_at = serializers.DateTimeField(source="last_location_update", read_only=True)

    class Meta:
        model = AgentProfile
        fields = ["latitude", "longitude", "updated_at"]


class ActiveAgentSerializer(AgentLocationSerializer):
    agent_id = serializers.IntegerField(source="user_id", read_only=True)
    name = serializers.CharField(source="user.full_name", read_only=True)

    class Meta(AgentLocationSerializer.Meta):
        fields = ["agent_id", "name"] + AgentLocationSerializer.Meta.fields


class NearbyAgentSerializer(ActiveAgentSerializer):
    distance_km = serializers.SerializerMethodField()

    class Meta(ActiveAgentSerializer.Meta):
        fields = ActiveAgentSerializer.Meta.fields + [
            "distance_km",
            "vehicle_type",
            "vehicle_number",
        ]

    def get_distance_km(self, obj):
        return round(self.context["distances"][obj.pk], 3)


class AgentOrderAssignmentSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(read_only=True)
    order_status = serializers.CharField(source="order.status", read_only=True)

    class Meta:
        model = AgentOrderAssignment
        fields = [
            "id",
            "order_id",
            "order_status",
            "status",
            "assigned_at",
            "picked_up_at",
            "delivered_at",
        ]
        read_only_fields = fields
