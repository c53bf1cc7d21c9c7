import uuid
from django.db import models


class Tenant(models.Model):
    """
    Root entity for multi-tenancy.
    Each merchant (restaurant, cafe, food truck) is a tenant.

    The short ``code`` is what customers see: it appears in public ordering
    URLs (/api/public/{code}/...) and, when the merchant opts in, as the
    prefix of order numbers (e.g. ``WKH-7Q2X``).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        help_text="Display name for the merchant (e.g., Wellard Kebab House)"
    )
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe identifier for the merchant"
    )
    code = models.CharField(
        max_length=12,
        unique=True,
        help_text="Short public merchant code (e.g., WKH)"
    )
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=50, blank=True)

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive merchants cannot take orders"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['code']),
            models.Index(fields=['is_active']),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if self.code:
            self.code = self.code.upper()
        super().save(*args, **kwargs)
