from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
from tenant.managers import TenantManager
import logging

logger = logging.getLogger(__name__)


# === CHOICES ===

class TimezoneChoices(models.TextChoices):
    """Common timezone choices for merchants"""
    UTC = "UTC", "UTC (Coordinated Universal Time)"

    US_EASTERN = "America/New_York", "Eastern Time (US & Canada)"
    US_CENTRAL = "America/Chicago", "Central Time (US & Canada)"
    US_PACIFIC = "America/Los_Angeles", "Pacific Time (US & Canada)"

    UK_LONDON = "Europe/London", "Greenwich Mean Time (UK)"
    EUROPE_BERLIN = "Europe/Berlin", "Central European Time (Germany)"

    ASIA_JAKARTA = "Asia/Jakarta", "Western Indonesia Time"
    ASIA_SINGAPORE = "Asia/Singapore", "Singapore Time"
    AUSTRALIA_PERTH = "Australia/Perth", "Australian Western Time"
    AUSTRALIA_SYDNEY = "Australia/Sydney", "Australian Eastern Time"


class FulfillmentMode(models.TextChoices):
    DINE_IN = "DINE_IN", "Dine In"
    TAKEAWAY = "TAKEAWAY", "Takeaway"
    DELIVERY = "DELIVERY", "Delivery"


PERCENT_VALIDATORS = [MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))]


class MerchantSettings(models.Model):
    """
    Merchant-wide pricing and availability policy.

    Read-only from the point of view of order assembly: fees, currency,
    timezone, fulfillment-mode switches and schedules, the manual
    open/closed override, and stock alert preferences all live here.
    Opening hours, special hours and per-day mode schedules are separate
    rows in the ``business_hours`` app.
    """

    tenant = models.OneToOneField(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='merchant_settings'
    )

    # === MONEY ===
    currency = models.CharField(
        max_length=3,
        default="USD",
        help_text="Three-letter currency code (ISO 4217)."
    )
    timezone = models.CharField(
        max_length=50,
        choices=TimezoneChoices.choices,
        default=TimezoneChoices.UTC,
        help_text="IANA timezone used for business days, opening hours and reservations."
    )

    # === FEES ===
    enable_tax = models.BooleanField(default=False)
    tax_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"),
        validators=PERCENT_VALIDATORS,
        help_text="Tax as a percentage of subtotal (e.g., 10.00 for 10%)."
    )
    enable_service_charge = models.BooleanField(default=False)
    service_charge_percentage = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00"),
        validators=PERCENT_VALIDATORS,
        help_text="Service charge as a percentage of subtotal."
    )
    enable_packaging_fee = models.BooleanField(default=False)
    packaging_fee_amount = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
        help_text="Flat packaging fee applied to takeaway orders only."
    )

    # === FULFILLMENT MODES ===
    is_dine_in_enabled = models.BooleanField(default=True)
    is_takeaway_enabled = models.BooleanField(default=True)
    is_delivery_enabled = models.BooleanField(default=False)

    # Global windows, used when per-day mode scheduling is off
    dine_in_schedule_start = models.TimeField(null=True, blank=True)
    dine_in_schedule_end = models.TimeField(null=True, blank=True)
    takeaway_schedule_start = models.TimeField(null=True, blank=True)
    takeaway_schedule_end = models.TimeField(null=True, blank=True)
    delivery_schedule_start = models.TimeField(null=True, blank=True)
    delivery_schedule_end = models.TimeField(null=True, blank=True)

    per_day_mode_schedule_enabled = models.BooleanField(
        default=False,
        help_text="Use per-day ModeSchedule rows instead of the global mode windows."
    )

    # === MANUAL OVERRIDE ===
    is_manual_override = models.BooleanField(
        default=False,
        help_text="When on, is_open decides whether the store is open, ignoring opening hours."
    )
    is_open = models.BooleanField(default=True)

    # === ORDERING POLICY ===
    require_table_number_for_dine_in = models.BooleanField(default=False)
    use_merchant_code_prefix = models.BooleanField(
        default=False,
        help_text="Prefix order numbers with the merchant code (e.g., WKH-7Q2X)."
    )

    # === STOCK ALERTS ===
    stock_alert_enabled = models.BooleanField(default=True)
    default_low_stock_threshold = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Low-stock threshold for items that do not set their own."
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = "Merchant Settings"
        verbose_name_plural = "Merchant Settings"

    def __str__(self):
        tenant_name = self.tenant.name if self.tenant_id else "Unassigned"
        return f"Merchant Settings ({tenant_name})"

    def clean(self):
        for mode in FulfillmentMode.values:
            start, end = self.get_mode_window(mode)
            if (start is None) != (end is None):
                raise ValidationError(
                    f"{FulfillmentMode(mode).label} schedule needs both a start and an end time."
                )

    def is_mode_enabled(self, mode):
        return {
            FulfillmentMode.DINE_IN: self.is_dine_in_enabled,
            FulfillmentMode.TAKEAWAY: self.is_takeaway_enabled,
            FulfillmentMode.DELIVERY: self.is_delivery_enabled,
        }.get(mode, False)

    def get_mode_window(self, mode):
        """Return the global (start, end) window for a mode; either may be None."""
        prefix = {
            FulfillmentMode.DINE_IN: "dine_in",
            FulfillmentMode.TAKEAWAY: "takeaway",
            FulfillmentMode.DELIVERY: "delivery",
        }[mode]
        return (
            getattr(self, f"{prefix}_schedule_start"),
            getattr(self, f"{prefix}_schedule_end"),
        )
