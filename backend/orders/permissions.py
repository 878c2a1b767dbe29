from rest_framework import permissions


class CanViewOrder(permissions.BasePermission):
    """
    Object-level access to a single order:
    - Admins and restaurant owners can see any order
    - Agents can see orders assigned to them and unclaimed orders
    - Customers can see their own orders
    - Anyone holding the id of a guest order can see it
    """

    def has_object_permission(self, request, view, obj):
        user = request.user

        if obj.is_guest_order:
            return True

        if not (user and user.is_authenticated):
            return False

        if user.is_admin_role or user.is_restaurant_owner:
            return True

        if user.is_agent:
            return obj.assigned_agent_id in (None, user.pk)

        return obj.customer_id == user.pk


class CanAdvanceOrder(permissions.BasePermission):
    """Restaurant owners, admins and delivery agents."""

    message = "Only restaurant staff or delivery agents can update order status."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and (user.is_restaurant_owner or user.is_admin_role or user.is_agent)
        )
