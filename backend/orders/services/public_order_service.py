from customers.services import CustomerService
from orders.exceptions import CustomerInfoRequiredError, MerchantNotFoundError
from orders.models import Order
from tenant.models import Tenant
from .assembly_service import AssemblyRequest, OrderAssembler


class PublicOrderService:
    """Orders placed by customers through the public storefront."""

    def __init__(self, assembler=None):
        self.assembler = assembler or OrderAssembler()

    @staticmethod
    def resolve_merchant(merchant):
        if isinstance(merchant, Tenant):
            return merchant
        tenant = Tenant.objects.filter(code=str(merchant).upper(), is_active=True).first()
        if tenant is None:
            raise MerchantNotFoundError()
        return tenant

    def create_order(self, merchant, cart, schedule=None):
        """
        Args:
            merchant: Tenant or merchant code
            cart: cart.types.Cart; must carry a customer name and an email or phone
            schedule: optional ScheduledTarget, validated against opening hours
                      and mode availability at that date/time
        """
        tenant = self.resolve_merchant(merchant)

        contact = cart.customer
        if contact is None or not contact.name or not (contact.email or contact.phone):
            raise CustomerInfoRequiredError()
        customer = CustomerService.resolve(tenant, contact)

        return self.assembler.assemble(AssemblyRequest(
            tenant=tenant,
            cart=cart,
            source=Order.OrderSource.ONLINE,
            status=Order.OrderStatus.PENDING,
            customer=customer,
            schedule=schedule,
        ))
