import logging
import math
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from core_backend.exceptions import NotFoundError
from .models import AgentOrderAssignment, AgentProfile

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_SEARCH_RADIUS_KM = 5.0


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    """Great-circle distance between two coordinates, in kilometres."""
    lat1, lon1, lat2, lon2 = (float(v) for v in (lat1, lon1, lat2, lon2))
    lat_distance = math.radians(lat2 - lat1)
    lon_distance = math.radians(lon2 - lon1)
    a = (
        math.sin(lat_distance / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(lon_distance / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


class AssignmentTracker:
    """
    Writes and reads the agent assignment log.

    Only the order lifecycle calls the ``record_*`` methods, inside the same
    transaction as the order status change they mirror.
    """

    @staticmethod
    def record_acceptance(order, agent) -> AgentOrderAssignment:
        assignment = AgentOrderAssignment.objects.create(
            order=order,
            agent=agent,
            status=AgentOrderAssignment.AssignmentStatus.ACCEPTED,
        )
        logger.info(f"Agent {agent.pk} accepted order {order.pk}")
        return assignment

    @staticmethod
    def current_for_order(order) -> Optional[AgentOrderAssignment]:
        return (
            AgentOrderAssignment.objects.filter(order=order)
            .order_by("-assigned_at", "-id")
            .first()
        )

    @staticmethod
    def for_agent(agent):
        return (
            AgentOrderAssignment.objects.filter(agent=agent)
            .select_related("order")
            .order_by("-assigned_at", "-id")
        )

    @staticmethod
    def record_pickup(order, at=None) -> Optional[AgentOrderAssignment]:
        assignment = AssignmentTracker.current_for_order(order)
        if assignment is None:
            return None
        assignment.status = AgentOrderAssignment.AssignmentStatus.OUT_FOR_DELIVERY
        if assignment.picked_up_at is None:
            assignment.picked_up_at = at or timezone.now()
        assignment.save(update_fields=["status", "picked_up_at"])
        return assignment

    @staticmethod
    def record_delivery(order, at=None) -> Optional[AgentOrderAssignment]:
        assignment = AssignmentTracker.current_for_order(order)
        if assignment is None:
            return None
        assignment.status = AgentOrderAssignment.AssignmentStatus.DELIVERED
        if assignment.delivered_at is None:
            assignment.delivered_at = at or timezone.now()
        assignment.save(update_fields=["status", "delivered_at"])
        return assignment


class AgentLocationService:
    @staticmethod
    def get_or_create_profile(agent) -> AgentProfile:
        profile, _ = AgentProfile.objects.get_or_create(user=agent)
        return profile

    @staticmethod
    def update_location(agent, latitude: Decimal, longitude: Decimal, is_available=None) -> AgentProfile:
        profile = AgentLocationService.get_or_create_profile(agent)
        profile.current_latitude = latitude
        profile.current_longitude = longitude
        profile.last_location_update = timezone.now()
        update_fields = ["current_latitude", "current_longitude", "last_location_update"]
        if is_available is not None:
            profile.is_available = is_available
            update_fields.append("is_available")
        profile.save(update_fields=update_fields)
        logger.debug(f"Agent {agent.pk} location updated to ({latitude}, {longitude})")
        return profile

    @staticmethod
    def get_location(agent_id) -> AgentProfile:
        """Location of an online agent; offline or unknown agents are not found."""
        profile = AgentProfile.objects.select_related("user").filter(user_id=agent_id).first()
        if profile is None or not profile.is_available:
            raise NotFoundError("Agent location is not available.")
        return profile

    @staticmethod
    def active_agents():
        return AgentProfile.objects.select_related("user").filter(
            is_available=True,
            current_latitude__isnull=False,
            current_longitude__isnull=False,
        )

    @staticmethod
    def nearby_agents(latitude, longitude, radius_km=DEFAULT_SEARCH_RADIUS_KM) -> list:
        """
        Available agents within ``radius_km`` of a point, nearest first.

        Returns a list of ``(profile, distance_km)`` tuples.
        """
        nearby = []
        for profile in AgentLocationService.active_agents():
            distance = haversine_km(
                latitude, longitude, profile.current_latitude, profile.current_longitude
            )
            if distance <= radius_km:
                nearby.append((profile, distance))
        nearby.sort(key=lambda pair: pair[1])
        return nearby
