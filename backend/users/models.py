from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _


class User(AbstractUser):
    """
    Merchant staff account.

    Credential issuance and login flows live outside this service; staff are
    authenticated with Django's standard session/basic auth and scoped to
    exactly one merchant through ``tenant``.
    """

    class Role(models.TextChoices):
        OWNER = "OWNER", _("Owner")
        MANAGER = "MANAGER", _("Manager")
        CASHIER = "CASHIER", _("Cashier")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='users',
        null=True,
        blank=True,
        help_text=_("The merchant this staff member works for")
    )
    role = models.CharField(
        _("role"), max_length=50, choices=Role.choices, default=Role.CASHIER
    )
    is_pos_staff = models.BooleanField(
        default=True,
        help_text=_("Whether this user may ring up orders at the POS")
    )

    class Meta:
        indexes = [
            models.Index(fields=['tenant', 'role']),
        ]

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"
