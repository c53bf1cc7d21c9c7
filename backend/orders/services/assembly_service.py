"""
The order assembly pipeline shared by every way an order can be placed.

POS checkout, public checkout, reservation acceptance and group-order
submission all build an ``AssemblyRequest`` and hand it to
``OrderAssembler.assemble``. Inside a single database transaction the
assembler runs:

    VALIDATE_ITEMS -> RESOLVE_PRICES -> CHECK_AVAILABILITY -> AGGREGATE_STOCK
    -> DECREMENT_STOCK -> COMPUTE_FEES -> GENERATE_ORDER_NUMBER -> PERSIST

Any ``OrderAssemblyError`` raised along the way rolls back every stock
decrement already made for the order. Notifications and customer stats run
only after the transaction commits and can never fail the order.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.utils import timezone

from business_hours.services import AvailabilityService
from cart.types import Cart, ScheduledTarget
from customers.services import CustomerService
from discounts.services import PriceResolver
from inventory.services import InventoryLedger, StockAllocation
from payments.models import Payment
from payments.money import ZERO, round2
from products.models import MenuItem, AddonItem
from settings.config import get_merchant_settings, get_merchant_timezone
from settings.models import FulfillmentMode
from orders.calculators import FeeBreakdown, FeeCalculator
from orders.exceptions import (
    EmptyCartError,
    InvalidOrderTypeError,
    InvalidQuantityError,
    ItemNotFoundError,
    ItemUnavailableError,
    TableNumberRequiredError,
)
from orders.models import Order, OrderItem, OrderItemAddon
from orders.numbering import OrderNumberGenerator, business_date_for
from orders.signals import low_stock_reached, order_placed, stock_depleted

logger = logging.getLogger(__name__)

# Savepoint retries when two writers commit the same order number
MAX_PERSIST_ATTEMPTS = 3


@dataclass
class AssemblyRequest:
    tenant: object
    cart: Cart
    source: str
    status: str = Order.OrderStatus.PENDING
    payment_method: str = Payment.PaymentMethod.CASH_ON_COUNTER
    customer: Optional[object] = None
    delivery_fee: Decimal = ZERO
    # Availability is checked at this merchant-local date/time when given
    schedule: Optional[ScheduledTarget] = None
    allow_empty: bool = False
    number_prefix: Optional[str] = None
    accepted_at: Optional[datetime] = None


@dataclass(frozen=True)
class PricedAddon:
    addon_item: AddonItem
    unit_price: Decimal
    quantity: int
    subtotal: Decimal


@dataclass(frozen=True)
class PricedLine:
    menu_item: MenuItem
    unit_price: Decimal
    quantity: int
    notes: str
    addons: Tuple[PricedAddon, ...]
    subtotal: Decimal
    attribution: Optional[str] = None


@dataclass
class AssemblyResult:
    order: Order
    lines: List[PricedLine]
    fees: FeeBreakdown
    allocations: List[StockAllocation] = field(default_factory=list)


def _is_positive_int(value):
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class OrderAssembler:
    """
    Turns a validated cart into a persisted order.

    Collaborators are injectable so tests can pin the clock, the random
    order-number source, or simulate a lost stock race.
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = timezone.now,
        price_resolver: Optional[PriceResolver] = None,
        ledger: Optional[InventoryLedger] = None,
        number_generator: Optional[OrderNumberGenerator] = None,
    ):
        self.clock = clock
        self.price_resolver = price_resolver or PriceResolver()
        self.ledger = ledger or InventoryLedger()
        self.number_generator = number_generator or OrderNumberGenerator()

    def assemble(self, request: AssemblyRequest) -> AssemblyResult:
        merchant_settings = get_merchant_settings(request.tenant)
        now = self.clock()

        with transaction.atomic():
            self._validate_cart(request, merchant_settings)
            menu_items, addon_items = self._load_items(request)
            lines = self._price_lines(request.cart, menu_items, addon_items, now)

            if request.schedule is not None:
                AvailabilityService(request.tenant, merchant_settings).check(
                    request.cart.order_type, request.schedule.date, request.schedule.time
                )

            requirements = self.ledger.aggregate(lines)
            allocations = self.ledger.allocate(
                requirements, default_threshold=merchant_settings.default_low_stock_threshold
            )

            subtotal = sum((line.subtotal for line in lines), ZERO)
            fees = FeeCalculator.compute(
                subtotal, merchant_settings, request.cart.order_type, request.delivery_fee
            )

            order = self._persist(request, merchant_settings, lines, fees, now)
            self.ledger.record_movements(allocations, order)

            self._schedule_side_effects(order, allocations, merchant_settings.stock_alert_enabled)

        logger.info(
            f"Order {order.order_number} placed for merchant {request.tenant.code} "
            f"({request.source}, {request.cart.order_type}, total {fees.total})"
        )

        order = (
            Order.all_objects
            .select_related('customer', 'payment', 'tenant')
            .prefetch_related(Prefetch(
                'items',
                queryset=OrderItem.all_objects.prefetch_related(
                    Prefetch('addons', queryset=OrderItemAddon.all_objects.all())
                ),
            ))
            .get(pk=order.pk)
        )
        return AssemblyResult(order=order, lines=lines, fees=fees, allocations=allocations)

    # ------------------------------------------------------------------
    # VALIDATE_ITEMS
    # ------------------------------------------------------------------

    def _validate_cart(self, request, merchant_settings):
        cart = request.cart

        if cart.order_type not in FulfillmentMode.values or not merchant_settings.is_mode_enabled(cart.order_type):
            raise InvalidOrderTypeError(cart.order_type)

        if cart.is_empty and not request.allow_empty:
            raise EmptyCartError()

        if (
            cart.order_type == FulfillmentMode.DINE_IN
            and merchant_settings.require_table_number_for_dine_in
            and not cart.table_number
        ):
            raise TableNumberRequiredError()

        for line in cart.lines:
            if not _is_positive_int(line.quantity):
                raise InvalidQuantityError(line.quantity)
            for addon in line.addons:
                if not _is_positive_int(addon.quantity):
                    raise InvalidQuantityError(addon.quantity)

    def _load_items(self, request):
        tenant = request.tenant
        lines = request.cart.lines

        menu_ids = {line.menu_id for line in lines}
        menu_items = {
            item.id: item
            for item in MenuItem.all_objects.filter(tenant=tenant, id__in=menu_ids, deleted_at__isnull=True)
        }
        addon_ids = {addon.addon_item_id for line in lines for addon in line.addons}
        addon_items = {
            item.id: item
            for item in AddonItem.all_objects.filter(tenant=tenant, id__in=addon_ids, deleted_at__isnull=True)
        }

        for line in lines:
            menu_item = menu_items.get(line.menu_id)
            if menu_item is None:
                raise ItemNotFoundError(line.menu_id)
            if not menu_item.is_active:
                raise ItemUnavailableError(menu_item.name)

            for addon in line.addons:
                addon_item = addon_items.get(addon.addon_item_id)
                if addon_item is None:
                    raise ItemNotFoundError(addon.addon_item_id, kind="addon")
                if not addon_item.is_active:
                    raise ItemUnavailableError(addon_item.name)
                if addon_item.menu_item_id != menu_item.id:
                    raise ItemUnavailableError(
                        addon_item.name,
                        message=f"'{addon_item.name}' cannot be added to '{menu_item.name}'",
                    )

        return menu_items, addon_items

    # ------------------------------------------------------------------
    # RESOLVE_PRICES
    # ------------------------------------------------------------------

    def _price_lines(self, cart, menu_items, addon_items, now) -> List[PricedLine]:
        unit_prices = self.price_resolver.effective_prices(menu_items.values(), now)

        priced = []
        for line in cart.lines:
            menu_item = menu_items[line.menu_id]
            unit_price = unit_prices[menu_item.id]

            addons = []
            for addon in line.addons:
                addon_item = addon_items[addon.addon_item_id]
                addons.append(PricedAddon(
                    addon_item=addon_item,
                    unit_price=addon_item.price,
                    quantity=addon.quantity,
                    subtotal=round2(addon_item.price * addon.quantity),
                ))

            # Addon quantities are per line, not per unit of the menu item
            subtotal = round2(unit_price * line.quantity) + sum((a.subtotal for a in addons), ZERO)
            priced.append(PricedLine(
                menu_item=menu_item,
                unit_price=unit_price,
                quantity=line.quantity,
                notes=line.notes,
                addons=tuple(addons),
                subtotal=subtotal,
                attribution=line.attribution,
            ))
        return priced

    # ------------------------------------------------------------------
    # GENERATE_ORDER_NUMBER + PERSIST
    # ------------------------------------------------------------------

    def _persist(self, request, merchant_settings, lines, fees, now) -> Order:
        tenant = request.tenant
        cart = request.cart
        business_date = business_date_for(now, get_merchant_timezone(merchant_settings))

        prefix = request.number_prefix
        if prefix is None and merchant_settings.use_merchant_code_prefix:
            prefix = tenant.code

        accepted_at = request.accepted_at
        if accepted_at is None and request.status == Order.OrderStatus.ACCEPTED:
            accepted_at = now

        schedule = request.schedule
        order_fields = dict(
            tenant=tenant,
            customer=request.customer,
            business_date=business_date,
            order_type=cart.order_type,
            source=request.source,
            status=request.status,
            table_number=cart.table_number,
            notes=cart.notes or '',
            subtotal=fees.subtotal,
            tax_amount=fees.tax,
            service_charge_amount=fees.service_charge,
            packaging_fee_amount=fees.packaging_fee,
            delivery_fee_amount=fees.delivery_fee,
            total_amount=fees.total,
            is_scheduled=bool(schedule and schedule.is_scheduled),
            scheduled_date=AvailabilityService.parse_date(schedule.date) if schedule else None,
            scheduled_time=AvailabilityService.parse_time(schedule.time) if schedule else None,
            placed_at=now,
            accepted_at=accepted_at,
        )

        order = None
        for attempt in range(1, MAX_PERSIST_ATTEMPTS + 1):
            order_number = self.number_generator.generate(tenant, business_date, prefix)
            try:
                with transaction.atomic():
                    order = Order.all_objects.create(order_number=order_number, **order_fields)
                break
            except IntegrityError:
                if attempt == MAX_PERSIST_ATTEMPTS:
                    raise
                logger.warning(
                    f"Order number {order_number} collided for merchant {tenant.code} on "
                    f"{business_date}; retrying ({attempt}/{MAX_PERSIST_ATTEMPTS})"
                )

        for line in lines:
            order_item = OrderItem.all_objects.create(
                tenant=tenant,
                order=order,
                menu_item=line.menu_item,
                menu_name=line.menu_item.name,
                menu_price=line.unit_price,
                quantity=line.quantity,
                subtotal=line.subtotal,
                notes=line.notes or '',
            )
            if line.addons:
                OrderItemAddon.all_objects.bulk_create([
                    OrderItemAddon(
                        tenant=tenant,
                        order_item=order_item,
                        addon_item=addon.addon_item,
                        addon_name=addon.addon_item.name,
                        addon_price=addon.unit_price,
                        quantity=addon.quantity,
                        subtotal=addon.subtotal,
                    )
                    for addon in line.addons
                ])

        Payment.all_objects.create(
            tenant=tenant,
            order=order,
            amount=fees.total,
            currency=merchant_settings.currency,
            payment_method=request.payment_method,
            status=Payment.PaymentStatus.PENDING,
        )
        return order

    # ------------------------------------------------------------------
    # Post-commit
    # ------------------------------------------------------------------

    @staticmethod
    def _send(signal, **kwargs):
        for receiver, response in signal.send_robust(sender=OrderAssembler, **kwargs):
            if isinstance(response, Exception):
                logger.error(f"Receiver {receiver!r} failed: {response!r}")

    def _schedule_side_effects(self, order, allocations, alerts_enabled):
        tenant = order.tenant

        def run_side_effects():
            """Deferred until the order transaction commits"""
            self._send(order_placed, order=order)

            if alerts_enabled:
                for allocation in allocations:
                    if allocation.depleted:
                        self._send(stock_depleted, tenant=tenant, allocation=allocation)
                    elif allocation.low_stock:
                        self._send(low_stock_reached, tenant=tenant, allocation=allocation)

            if order.customer_id:
                try:
                    CustomerService.record_order(order.customer_id, order.total_amount, order.placed_at)
                except Exception:
                    # Order is already committed
                    logger.exception(f"Failed to update customer stats for order {order.order_number}")

        transaction.on_commit(run_side_effects)
