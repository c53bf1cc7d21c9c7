from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from tenant.managers import set_current_tenant
from users.permissions import IsPosStaff


class StaffAPIView(APIView):
    """
    Base class for merchant staff endpoints (POS, reservation handling).

    DRF authenticates after Django middleware has run, so the tenant for
    staff requests is bound here, right after authentication and permission
    checks succeed. ``TenantMiddleware`` clears it when the response leaves.
    """
    permission_classes = [IsAuthenticated, IsPosStaff]

    def initial(self, request, *args, **kwargs):
        super().initial(request, *args, **kwargs)
        tenant = request.user.tenant
        request.tenant = tenant
        set_current_tenant(tenant)


class PublicAPIView(APIView):
    """
    Base class for customer-facing endpoints addressed by merchant code.

    The tenant is resolved by ``TenantMiddleware`` from the ``merchant_code``
    URL kwarg before the view runs.
    """
    authentication_classes = []
    permission_classes = [AllowAny]
