from rest_framework.permissions import BasePermission

from donations.exceptions import ValidationFailed
from donations.models import Role


class RolePermission(BasePermission):
    """
    Grants access to authenticated, active users whose role is in allowed_roles.

    Unauthenticated requests are answered 401 by DRF, a wrong role gets 403.
    """

    allowed_roles = ()
    message = "Forbidden"

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and user.is_active
            and user.role in self.allowed_roles
        )


class IsAdmin(RolePermission):
    allowed_roles = (Role.ADMIN,)


class IsBarangayOfficial(RolePermission):
    allowed_roles = (Role.BARANGAY,)


class IsResident(RolePermission):
    allowed_roles = (Role.RESIDENT,)


class BarangayScopedMixin:
    """Resolves the acting official's barangay once per request."""

    permission_classes = [IsBarangayOfficial]

    def get_barangay(self, request):
        barangay = getattr(request, "_official_barangay", None)
        if barangay is None:
            barangay = request.user.barangay
            if barangay is None:
                raise ValidationFailed("User not assigned to a barangay")
            request._official_barangay = barangay
        return barangay
