import uuid
from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager


class Payment(models.Model):
    """
    The payment record for a single Order.

    Created inside the order-assembly transaction with ``status=PENDING``
    and ``amount`` equal to the order total. Collecting the money (at the
    counter or through a gateway) is outside this service.
    """

    class PaymentMethod(models.TextChoices):
        CASH_ON_COUNTER = "CASH_ON_COUNTER", _("Cash on Counter")
        CARD_ON_COUNTER = "CARD_ON_COUNTER", _("Card on Counter")
        ONLINE = "ONLINE", _("Online")

    class PaymentStatus(models.TextChoices):
        PENDING = "PENDING", _("Pending")
        COMPLETED = "COMPLETED", _("Completed")
        FAILED = "FAILED", _("Failed")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='payments'
    )
    order = models.OneToOneField(
        'orders.Order', on_delete=models.CASCADE, related_name="payment"
    )

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("The order total at the time the order was placed."),
    )
    currency = models.CharField(max_length=3, default="USD")
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH_ON_COUNTER,
    )
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
        help_text=_("The current status of the payment."),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        indexes = [
            models.Index(fields=["tenant", "status"], name="payment_tenant_status_idx"),
        ]

    def __str__(self):
        return f"Payment for Order {self.order.order_number} - {self.status}"
