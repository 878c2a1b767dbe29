"""
Agent tracking API: location updates, location lookups and assignment history.
"""

import logging

from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.permissions import IsAdminRole, IsAgent, IsCustomerOrAdmin, IsOwnerOrAdmin
from .serializers import (
    ActiveAgentSerializer,
    AgentLocationSerializer,
    AgentOrderAssignmentSerializer,
    NearbyAgentSerializer,
    NearbyAgentsQuerySerializer,
    UpdateLocationSerializer,
)
from .services import AgentLocationService, AssignmentTracker

logger = logging.getLogger(__name__)


class UpdateLocationView(APIView):
    """PUT /api/tracking/location/ - the calling agent reports its position."""

    permission_classes = [IsAgent]

    def put(self, request, *args, **kwargs):
        serializer = UpdateLocationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = AgentLocationService.update_location(request.user, **serializer.validated_data)
        return Response(AgentLocationSerializer(profile).data)


class AgentLocationView(APIView):
    """GET /api/tracking/agent/<agent_id>/ - last known position of an online agent."""

    permission_classes = [IsCustomerOrAdmin]

    def get(self, request, agent_id, *args, **kwargs):
        profile = AgentLocationService.get_location(agent_id)
        return Response(AgentLocationSerializer(profile).data)


class ActiveAgentsView(APIView):
    """GET /api/tracking/agents/active/ - every online agent with a known position."""

    permission_classes = [IsAdminRole]

    def get(self, request, *args, **kwargs):
        profiles = AgentLocationService.active_agents()
        return Response(ActiveAgentSerializer(profiles, many=True).data)


class NearbyAgentsView(APIView):
    """
    GET /api/tracking/agents/nearby/?latitude=..&longitude=..&radius_km=5

    Online agents within the radius, nearest first.
    """

    permission_classes = [IsOwnerOrAdmin]

    def get(self, request, *args, **kwargs):
        query = NearbyAgentsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        nearby = AgentLocationService.nearby_agents(**query.validated_data)

        serializer = NearbyAgentSerializer(
            [profile for profile, _ in nearby],
            many=True,
            context={"distances": {profile.pk: distance for profile, distance in nearby}},
        )
        return Response(serializer.data)


class MyAssignmentsView(APIView):
    """GET /api/tracking/assignments/ - the calling agent's assignment history, newest first."""

    permission_classes = [IsAuthenticated, IsAgent]

    def get(self, request, *args, **kwargs):
        assignments = AssignmentTracker.for_agent(request.user)
        return Response(AgentOrderAssignmentSerializer(assignments, many=True).data)
