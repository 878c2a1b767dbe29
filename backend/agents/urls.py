from django.urls import path

from .views import (
    ActiveAgentsView,
    AgentLocationView,
    MyAssignmentsView,
    NearbyAgentsView,
    UpdateLocationView,
)

app_name = "agents"

urlpatterns = [
    path("tracking/location/", UpdateLocationView.as_view(), name="tracking-location"),
    path("tracking/agent/<int:agent_id>/", AgentLocationView.as_view(), name="tracking-agent"),
    path("tracking/agents/active/", ActiveAgentsView.as_view(), name="tracking-active-agents"),
    path("tracking/agents/nearby/", NearbyAgentsView.as_view(), name="tracking-nearby-agents"),
    path("tracking/assignments/", MyAssignmentsView.as_view(), name="tracking-assignments"),
]
