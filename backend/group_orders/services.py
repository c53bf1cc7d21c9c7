"""
Group order submission and bill splitting.

Each participant's sub-cart becomes a set of lines tagged with that
participant's id, so once the merged order is priced the subtotal each person
contributed can be read straight off the priced lines. Fees are then shared
out in proportion to those subtotals.
"""
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import List

from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from cart.serializers import CartLineSerializer
from cart.types import Cart, lines_from_items
from customers.services import CustomerService
from orders.exceptions import (
    EmptyCartError,
    NotEnoughParticipantsError,
    NotHostError,
    SessionNotFoundError,
    SessionNotOpenError,
)
from orders.models import Order
from orders.services import AssemblyRequest, OrderAssembler, PublicOrderService
from payments.money import ZERO, allocate, to_minor, validate_minor_sum
from .models import GroupOrderParticipant, GroupOrderSession

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 2


@dataclass(frozen=True)
class ParticipantShare:
    participant_id: str
    participant_name: str
    is_host: bool
    subtotal: Decimal
    tax_share: Decimal
    service_charge_share: Decimal
    packaging_fee_share: Decimal
    delivery_fee_share: Decimal
    total: Decimal

    def to_dict(self):
        return asdict(self)


@dataclass
class GroupSubmission:
    session: GroupOrderSession
    order: Order
    bill_split: List[ParticipantShare]


def compute_bill_split(participants, lines, fees) -> List[ParticipantShare]:
    """
    Split an order's fees across participants by their share of the subtotal.

    Every fee component is allocated on its own with the largest-remainder
    method, so for each component the shares add up to the order's amount to
    the cent, and the participant totals add up to the order total. When
    nobody contributed a non-zero subtotal the fees are split evenly.

    Example: subtotals 60.00 / 40.00 with 10.00 of fees on a 110.00 order
    give totals 66.00 / 44.00.
    """
    subtotals = []
    for participant in participants:
        tag = str(participant.pk)
        subtotals.append(sum((line.subtotal for line in lines if line.attribution == tag), ZERO))

    weights = subtotals if any(subtotal > 0 for subtotal in subtotals) else [Decimal('1')] * len(subtotals)
    shares = {
        component: allocate(weights, amount)
        for component, amount in fees.components().items()
    }
    for component, amount in fees.components().items():
        validate_minor_sum([to_minor(share) for share in shares[component]], to_minor(amount), context=component)

    split = []
    for index, participant in enumerate(participants):
        tax = shares['tax'][index]
        service_charge = shares['service_charge'][index]
        packaging_fee = shares['packaging_fee'][index]
        delivery_fee = shares['delivery_fee'][index]
        split.append(ParticipantShare(
            participant_id=str(participant.pk),
            participant_name=participant.name,
            is_host=participant.is_host,
            subtotal=subtotals[index],
            tax_share=tax,
            service_charge_share=service_charge,
            packaging_fee_share=packaging_fee,
            delivery_fee_share=delivery_fee,
            total=subtotals[index] + tax + service_charge + packaging_fee + delivery_fee,
        ))
    return split


class GroupOrderService:

    def __init__(self, assembler=None, clock=timezone.now):
        self.assembler = assembler or OrderAssembler(clock=clock)
        self.clock = clock

    @staticmethod
    def build_lines(participants):
        """Merge sub-carts, prefixing each line's notes with the participant's name."""
        lines = []
        for participant in participants:
            serializer = CartLineSerializer(data=participant.cart_items or [], many=True)
            if not serializer.is_valid():
                raise serializers.ValidationError({participant.name: serializer.errors})
            lines.extend(lines_from_items(
                serializer.validated_data,
                attribution=str(participant.pk),
                notes_prefix=participant.name,
            ))
        return tuple(lines)

    def submit(self, merchant, session_code, device_id, customer=None, notes=None) -> GroupSubmission:
        """
        Host submits the group order.

        Args:
            merchant: Tenant or merchant code
            session_code: case-insensitive session code
            device_id: must belong to the session's host
            customer: optional CartCustomer the order is billed to; defaults
                      to the host's customer record
            notes: order notes; defaults to "Group Order: <names>"

        Raises:
            SessionNotFoundError, NotHostError, SessionNotOpenError,
            NotEnoughParticipantsError, EmptyCartError, and anything the
            assembler raises. On failure the session stays OPEN.
        """
        tenant = PublicOrderService.resolve_merchant(merchant)
        session = GroupOrderSession.all_objects.filter(
            tenant=tenant, session_code=(session_code or '').upper()
        ).first()
        if session is None:
            raise SessionNotFoundError()

        participants = list(
            GroupOrderParticipant.all_objects
            .select_related('customer')
            .filter(session=session)
            .order_by('joined_at', 'id')
        )

        host = next((p for p in participants if p.is_host and p.device_id == device_id), None)
        if host is None:
            raise NotHostError()

        if session.status != GroupOrderSession.SessionStatus.OPEN or session.is_expired(self.clock()):
            raise SessionNotOpenError()

        if len(participants) < MIN_PARTICIPANTS:
            raise NotEnoughParticipantsError()

        lines = self.build_lines(participants)
        if not lines:
            raise EmptyCartError("At least one participant must have items in their cart.")

        cart = Cart(
            order_type=session.order_type,
            lines=lines,
            table_number=session.table_number or None,
            notes=notes or session.notes or f"Group Order: {', '.join(p.name for p in participants)}",
        )

        with transaction.atomic():
            locked = GroupOrderSession.all_objects.filter(
                pk=session.pk, status=GroupOrderSession.SessionStatus.OPEN
            ).update(status=GroupOrderSession.SessionStatus.LOCKED)
            if locked != 1:
                raise SessionNotOpenError()

            billed_to = CustomerService.resolve(tenant, customer) or host.customer
            result = self.assembler.assemble(AssemblyRequest(
                tenant=tenant,
                cart=cart,
                source=Order.OrderSource.GROUP,
                status=Order.OrderStatus.PENDING,
                customer=billed_to,
            ))

            GroupOrderSession.all_objects.filter(pk=session.pk).update(
                status=GroupOrderSession.SessionStatus.SUBMITTED,
                order=result.order,
                updated_at=self.clock(),
            )

        logger.info(
            f"Group order {session.session_code} submitted as {result.order.order_number} "
            f"with {len(participants)} participants"
        )

        session.refresh_from_db()
        return GroupSubmission(
            session=session,
            order=result.order,
            bill_split=compute_bill_split(participants, result.lines, result.fees),
        )
