import logging

from customers.services import CustomerService
from payments.models import Payment
from payments.money import ZERO
from orders.models import Order
from .assembly_service import AssemblyRequest, OrderAssembler

logger = logging.getLogger(__name__)


class PosOrderService:
    """Orders rung up by staff at the point of sale."""

    def __init__(self, assembler=None):
        self.assembler = assembler or OrderAssembler()

    def create_order(self, cart, staff_user, payment_method=Payment.PaymentMethod.CASH_ON_COUNTER,
                     delivery_fee=ZERO):
        """
        Place a POS order for the staff member's merchant.

        The merchant is present at the counter, so the order starts out
        ACCEPTED. A customer is attached only when the cart carries contact
        details.
        """
        tenant = staff_user.tenant
        customer = CustomerService.resolve(tenant, cart.customer)

        result = self.assembler.assemble(AssemblyRequest(
            tenant=tenant,
            cart=cart,
            source=Order.OrderSource.POS,
            status=Order.OrderStatus.ACCEPTED,
            payment_method=payment_method,
            customer=customer,
            delivery_fee=delivery_fee or ZERO,
        ))
        logger.info(f"POS order {result.order.order_number} rung up by {staff_user.username}")
        return result
