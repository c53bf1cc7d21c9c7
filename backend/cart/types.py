"""
Typed cart passed to the order assembler.

Every entry path (POS, public checkout, reservation pre-order, group order)
turns its JSON into these dataclasses before a transaction is opened, so the
assembler never sees raw request payloads.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class CartAddon:
    addon_item_id: int
    quantity: int = 1


@dataclass(frozen=True)
class CartLine:
    menu_id: int
    quantity: int
    notes: str = ''
    addons: Tuple[CartAddon, ...] = ()
    # Opaque tag carried through to the priced line (group orders use the participant id)
    attribution: Optional[str] = None


@dataclass(frozen=True)
class CartCustomer:
    name: str = ''
    email: str = ''
    phone: str = ''

    @property
    def is_empty(self):
        return not (self.name or self.email or self.phone)


@dataclass(frozen=True)
class Cart:
    order_type: str
    lines: Tuple[CartLine, ...] = ()
    table_number: Optional[str] = None
    notes: str = ''
    customer: Optional[CartCustomer] = None

    @property
    def is_empty(self):
        return not self.lines


@dataclass(frozen=True)
class ScheduledTarget:
    """Merchant-local date/time an order (or reservation) is for."""
    date: str
    time: str
    is_scheduled: bool = True


def lines_from_items(items, attribution=None, notes_prefix=None):
    """Build ``CartLine`` tuples from validated ``CartLineSerializer`` data."""
    lines = []
    for item in items:
        notes = item.get('notes') or ''
        if notes_prefix:
            notes = f"[{notes_prefix}] {notes}".rstrip()
        lines.append(CartLine(
            menu_id=item['menuId'],
            quantity=item['quantity'],
            notes=notes,
            addons=tuple(
                CartAddon(addon_item_id=addon['addonItemId'], quantity=addon.get('quantity', 1))
                for addon in item.get('addons') or []
            ),
            attribution=attribution,
        ))
    return tuple(lines)
