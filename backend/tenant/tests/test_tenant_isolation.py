"""
Tenant Isolation Tests

The tenant-filtered managers fail closed, and the middleware binds the
merchant from the public URL and always clears it afterwards.
"""

import pytest
from decimal import Decimal
from django.test import RequestFactory

from products.models import MenuItem
from tenant.managers import get_current_tenant, set_current_tenant
from tenant.middleware import TenantMiddleware, TenantNotFoundError
from tenant.models import Tenant


@pytest.mark.django_db
class TestTenantManager:

    def test_no_tenant_context_returns_nothing(self, menu_item_a, menu_item_b):
        set_current_tenant(None)
        assert MenuItem.objects.count() == 0
        assert MenuItem.all_objects.count() == 2

    def test_filters_to_current_tenant(self, tenant_a, menu_item_a, menu_item_b):
        set_current_tenant(tenant_a)
        assert list(MenuItem.objects.all()) == [menu_item_a]

    def test_orderable_excludes_inactive_and_deleted(self, tenant_a, menu_item_a):
        hidden = MenuItem.all_objects.create(tenant=tenant_a, name='Calzone', price=Decimal('9.00'), is_active=False)
        gone = MenuItem.all_objects.create(tenant=tenant_a, name='Stromboli', price=Decimal('9.00'))
        gone.soft_delete()
        set_current_tenant(tenant_a)

        assert list(MenuItem.objects.orderable()) == [menu_item_a]
        assert set(MenuItem.objects.not_deleted()) == {menu_item_a, hidden}


@pytest.mark.django_db
class TestTenantModel:

    def test_code_is_upper_cased(self):
        tenant = Tenant.objects.create(name='Wellard Kebab House', slug='wellard', code='wkh')
        assert tenant.code == 'WKH'


@pytest.mark.django_db
class TestTenantMiddleware:

    def make_middleware(self, view=None):
        def get_response(request):
            if view is not None:
                return view(request)
            return None
        return TenantMiddleware(get_response)

    def test_resolves_merchant_code_case_insensitively(self, tenant_a):
        middleware = self.make_middleware()
        request = RequestFactory().get('/api/public/pizza/orders/')

        response = middleware.process_view(request, None, (), {'merchant_code': 'pizza'})

        assert response is None
        assert request.tenant == tenant_a
        assert get_current_tenant() == tenant_a

    def test_routes_without_merchant_code_untouched(self, db):
        middleware = self.make_middleware()
        request = RequestFactory().get('/api/orders/pos/')
        request.tenant = None

        assert middleware.process_view(request, None, (), {}) is None
        assert request.tenant is None

    def test_unknown_merchant(self, db):
        with pytest.raises(TenantNotFoundError):
            TenantMiddleware(lambda request: None).get_tenant_by_code('nope')

    def test_context_cleared_even_when_view_raises(self, tenant_a):
        def failing_view(request):
            set_current_tenant(tenant_a)
            raise RuntimeError('boom')

        middleware = self.make_middleware(failing_view)

        with pytest.raises(RuntimeError):
            middleware(RequestFactory().get('/api/public/PIZZA/orders/'))

        assert get_current_tenant() is None

    def test_stale_context_cleared_on_entry(self, tenant_b):
        seen = []
        set_current_tenant(tenant_b)

        middleware = self.make_middleware(lambda request: seen.append(get_current_tenant()))
        middleware(RequestFactory().get('/api/health/'))

        assert seen == [None]
