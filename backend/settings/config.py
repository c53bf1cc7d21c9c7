"""
Merchant configuration access.

Business logic never queries ``MerchantSettings`` directly; it goes through
``get_merchant_settings`` so that a merchant without a settings row gets one
created with defaults on first use, and so the lookup is done once per
order-assembly run.
"""

import logging

import pytz
from django.core.exceptions import ImproperlyConfigured

from tenant.managers import get_current_tenant

logger = logging.getLogger(__name__)


def get_merchant_settings(tenant=None):
    """
    Load the settings row for ``tenant`` (default: current tenant context).

    Raises:
        ImproperlyConfigured: when there is no tenant to load settings for.
    """
    # Import here to avoid circular imports
    from .models import MerchantSettings

    tenant = tenant or get_current_tenant()
    if tenant is None:
        raise ImproperlyConfigured("No tenant context available for merchant settings")

    try:
        return MerchantSettings.all_objects.get(tenant=tenant)
    except MerchantSettings.DoesNotExist:
        # Don't use get_or_create: the row is created with defaults and
        # logged so missing onboarding is visible.
        settings_obj = MerchantSettings(tenant=tenant)
        settings_obj.save()
        logger.info(f"Created default MerchantSettings for merchant {tenant.code}")
        return settings_obj


def get_merchant_timezone(merchant_settings):
    """Return the pytz timezone for a settings row, falling back to UTC."""
    try:
        return pytz.timezone(merchant_settings.timezone or "UTC")
    except pytz.UnknownTimeZoneError:
        logger.warning(
            f"Unknown timezone '{merchant_settings.timezone}' for merchant "
            f"{merchant_settings.tenant_id}; using UTC"
        )
        return pytz.UTC
