import logging

from django.http import JsonResponse

from .models import Tenant
from .managers import set_current_tenant

logger = logging.getLogger(__name__)


class TenantNotFoundError(Exception):
    """Raised when tenant cannot be resolved from request."""
    pass


class TenantMiddleware:
    """
    Resolves the merchant for public requests and guarantees tenant cleanup.

    Resolution:
    1. ``merchant_code`` URL kwarg - public ordering routes
       (/api/public/{merchant_code}/...). Resolved in ``process_view`` once
       the URL has been matched.
    2. Staff routes carry no merchant in the URL. DRF authenticates the user
       after middleware has run, so those views set the tenant from
       ``request.user.tenant`` themselves (see ``core_backend.base.StaffAPIView``).

    The thread-local tenant is always cleared when the response leaves, even
    if the view raised, so a pooled worker thread never carries one
    merchant's context into the next request.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.tenant = None
        set_current_tenant(None)
        try:
            return self.get_response(request)
        finally:
            set_current_tenant(None)

    def process_view(self, request, view_func, view_args, view_kwargs):
        merchant_code = view_kwargs.get('merchant_code')
        if not merchant_code:
            return None

        try:
            tenant = self.get_tenant_by_code(merchant_code)
        except TenantNotFoundError as e:
            return JsonResponse({
                'success': False,
                'error': 'MERCHANT_NOT_FOUND',
                'message': str(e),
            }, status=404)

        if not tenant.is_active:
            return JsonResponse({
                'success': False,
                'error': 'MERCHANT_INACTIVE',
                'message': 'This merchant is not accepting orders',
            }, status=403)

        request.tenant = tenant
        set_current_tenant(tenant)
        return None

    def get_tenant_by_code(self, merchant_code):
        try:
            return Tenant.objects.get(code=merchant_code.upper())
        except Tenant.DoesNotExist:
            logger.info(f"Unknown merchant code in request: {merchant_code}")
            raise TenantNotFoundError(f"Merchant '{merchant_code}' not found")
