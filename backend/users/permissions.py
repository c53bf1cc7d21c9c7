from rest_framework import permissions
import logging

logger = logging.getLogger(__name__)


class IsPosStaff(permissions.BasePermission):
    """
    Allows merchant staff who are flagged for POS use and bound to a merchant.
    """
    message = "Only merchant staff can perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if not getattr(user, 'tenant_id', None):
            logger.warning(f"Staff request from user {user.pk} without a merchant")
            return False
        return bool(user.is_pos_staff)
