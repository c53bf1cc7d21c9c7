import logging

from django.db import transaction
from django.utils import timezone

from business_hours.services import AvailabilityService
from cart.types import Cart, ScheduledTarget, lines_from_items
from orders.exceptions import (
    ReservationNotFoundError,
    ReservationNotPendingError,
    ReservationTimePastError,
)
from orders.models import Order
from orders.services import AssemblyRequest, OrderAssembler
from settings.config import get_merchant_settings
from settings.models import FulfillmentMode
from tenant.managers import get_current_tenant
from .models import Reservation
from .serializers import PreorderSerializer

logger = logging.getLogger(__name__)


class ReservationService:
    """Staff handling of table reservations."""

    def __init__(self, assembler=None, clock=timezone.now):
        self.assembler = assembler or OrderAssembler(clock=clock)
        self.clock = clock

    def _get_reservation(self, reservation_id, tenant):
        queryset = Reservation.all_objects.select_related('tenant', 'customer')
        reservation = queryset.filter(pk=reservation_id, tenant=tenant).first()
        if reservation is None:
            raise ReservationNotFoundError()
        return reservation

    def _ensure_not_past(self, reservation, merchant_settings):
        today, now_time = AvailabilityService(reservation.tenant, merchant_settings).local_now(self.clock())
        if reservation.reservation_date < today or (
            reservation.reservation_date == today
            and reservation.reservation_time.replace(second=0, microsecond=0) < now_time.replace(second=0)
        ):
            raise ReservationTimePastError()

    @staticmethod
    def build_cart(reservation, table_number):
        """
        Dine-in cart from the stored preorder.

        The preorder was written at booking time, so it is re-validated here
        before the order transaction opens. A reservation without a preorder
        yields an empty cart.
        """
        serializer = PreorderSerializer(data=reservation.preorder or {})
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        return Cart(
            order_type=FulfillmentMode.DINE_IN,
            lines=lines_from_items(data.get('items') or []),
            table_number=table_number,
            notes=data.get('notes') or reservation.notes or '',
        )

    def accept(self, reservation_id, table_number=None, tenant=None):
        """
        Accept a PENDING reservation and create its order.

        The order is ACCEPTED straight away and linked back onto the
        reservation. Store hours and dine-in availability are checked at the
        reservation's own date and time, not at the moment of acceptance.

        Raises:
            ReservationNotFoundError
            ReservationNotPendingError
            ReservationTimePastError
            OrderAssemblyError: from the assembler (stock, availability, items)
        """
        tenant = tenant or get_current_tenant()
        reservation = self._get_reservation(reservation_id, tenant)

        if reservation.status != Reservation.ReservationStatus.PENDING:
            raise ReservationNotPendingError()

        merchant_settings = get_merchant_settings(tenant)
        self._ensure_not_past(reservation, merchant_settings)

        table_number = table_number or reservation.table_number
        cart = self.build_cart(reservation, table_number)
        now = self.clock()

        with transaction.atomic():
            # Claim the reservation first; a concurrent accept sees zero rows
            claimed = Reservation.all_objects.filter(
                pk=reservation.pk,
                status=Reservation.ReservationStatus.PENDING,
            ).update(
                status=Reservation.ReservationStatus.ACCEPTED,
                accepted_at=now,
                table_number=table_number,
            )
            if claimed != 1:
                raise ReservationNotPendingError()

            result = self.assembler.assemble(AssemblyRequest(
                tenant=tenant,
                cart=cart,
                source=Order.OrderSource.RESERVATION,
                status=Order.OrderStatus.ACCEPTED,
                customer=reservation.customer,
                schedule=ScheduledTarget(
                    date=reservation.reservation_date.isoformat(),
                    time=reservation.reservation_time.strftime('%H:%M'),
                    is_scheduled=False,
                ),
                allow_empty=True,
                accepted_at=now,
            ))

            Reservation.all_objects.filter(pk=reservation.pk).update(order=result.order)

        logger.info(
            f"Reservation {reservation.pk} accepted for merchant {tenant.code}; "
            f"order {result.order.order_number} ({len(cart.lines)} preorder lines)"
        )

        reservation.refresh_from_db()
        reservation.order = result.order
        return reservation, result
