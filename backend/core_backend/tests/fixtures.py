"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like tenants, merchant settings, menu items, staff users and customers.
"""
import pytest
from decimal import Decimal

from customers.models import Customer
from products.models import MenuItem, AddonItem
from settings.models import MerchantSettings
from tenant.models import Tenant
from users.models import User


# ============================================================================
# TENANT FIXTURES
# ============================================================================

@pytest.fixture
def tenant_a(db):
    """Create test tenant A (Pizza Place)"""
    return Tenant.objects.create(
        name='Pizza Place',
        slug='pizza-place',
        code='PIZZA',
        is_active=True
    )


@pytest.fixture
def tenant_b(db):
    """Create test tenant B (Burger Joint)"""
    return Tenant.objects.create(
        name='Burger Joint',
        slug='burger-joint',
        code='BURGR',
        is_active=True
    )


@pytest.fixture
def inactive_tenant(db):
    """Create inactive test tenant"""
    return Tenant.objects.create(
        name='Closed Restaurant',
        slug='closed-restaurant',
        code='SHUT',
        is_active=False
    )


# ============================================================================
# MERCHANT SETTINGS FIXTURES
# ============================================================================

@pytest.fixture
def merchant_settings_a(tenant_a):
    """Tenant A settings: UTC, every fee off, dine-in and takeaway enabled"""
    return MerchantSettings.all_objects.create(
        tenant=tenant_a,
        currency='USD',
        timezone='UTC',
    )


@pytest.fixture
def merchant_settings_b(tenant_b):
    return MerchantSettings.all_objects.create(
        tenant=tenant_b,
        currency='USD',
        timezone='UTC',
    )


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def menu_item_a(tenant_a):
    """Untracked menu item for tenant A"""
    return MenuItem.all_objects.create(
        tenant=tenant_a,
        name='Margherita',
        price=Decimal('10.00'),
    )


@pytest.fixture
def tracked_item_a(tenant_a):
    """Stock-tracked menu item for tenant A with 5 on hand"""
    return MenuItem.all_objects.create(
        tenant=tenant_a,
        name='Tiramisu',
        price=Decimal('6.00'),
        track_stock=True,
        stock_qty=5,
    )


@pytest.fixture
def addon_a(tenant_a, menu_item_a):
    """Untracked addon for menu_item_a"""
    return AddonItem.all_objects.create(
        tenant=tenant_a,
        menu_item=menu_item_a,
        name='Extra Cheese',
        price=Decimal('1.50'),
    )


@pytest.fixture
def menu_item_b(tenant_b):
    """Menu item for tenant B"""
    return MenuItem.all_objects.create(
        tenant=tenant_b,
        name='Cheeseburger',
        price=Decimal('12.00'),
    )


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def staff_user_a(tenant_a):
    """POS staff member for tenant A"""
    return User.objects.create_user(
        username='cashier_pizza',
        email='cashier@pizza.com',
        password='password123',
        tenant=tenant_a,
        role=User.Role.CASHIER,
        is_pos_staff=True
    )


@pytest.fixture
def staff_user_b(tenant_b):
    """POS staff member for tenant B"""
    return User.objects.create_user(
        username='cashier_burger',
        email='cashier@burger.com',
        password='password123',
        tenant=tenant_b,
        role=User.Role.CASHIER,
        is_pos_staff=True
    )


# ============================================================================
# CUSTOMER FIXTURES
# ============================================================================

@pytest.fixture
def customer_a(tenant_a):
    """Customer of tenant A"""
    return Customer.all_objects.create(
        tenant=tenant_a,
        name='Jamie Rivera',
        email='jamie@example.com',
        phone='+15550100',
    )
