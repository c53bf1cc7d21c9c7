"""
Customer services.
"""
from django.db.models import F
from django.utils import timezone

from core_backend.utils.pii import get_pii_safe_logger
from .models import Customer

logger = get_pii_safe_logger(__name__)


class CustomerService:

    @staticmethod
    def find(tenant, email='', phone=''):
        """Existing customer matched by email first, then phone."""
        email = (email or '').strip().lower()
        phone = (phone or '').strip()
        customers = Customer.all_objects.filter(tenant=tenant)

        if email:
            customer = customers.filter(email=email).order_by('id').first()
            if customer is not None:
                return customer
        if phone:
            return customers.filter(phone=phone).order_by('id').first()
        return None

    @staticmethod
    def resolve(tenant, contact):
        """
        Look a customer up by the contact on a cart, creating one if needed.

        Returns None when the contact carries no details at all. A known
        customer whose name was blank gets the name from this order.
        """
        if contact is None or contact.is_empty:
            return None

        customer = CustomerService.find(tenant, email=contact.email, phone=contact.phone)
        if customer is not None:
            if contact.name and not customer.name:
                customer.name = contact.name
                customer.save(update_fields=['name', 'updated_at'])
            return customer

        customer = Customer.all_objects.create(
            tenant=tenant,
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
        )
        logger.info(
            f"Registered customer {customer.pk} for merchant {tenant.code}",
            extra={'email': customer.email, 'phone': customer.phone},
        )
        return customer

    @staticmethod
    def record_order(customer_id, order_total, placed_at=None):
        """Increment lifetime stats in one UPDATE so concurrent orders don't lose counts."""
        Customer.all_objects.filter(pk=customer_id).update(
            total_orders=F('total_orders') + 1,
            total_spent=F('total_spent') + order_total,
            last_order_at=placed_at or timezone.now(),
            updated_at=timezone.now(),
        )
