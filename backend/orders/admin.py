from django.contrib import admin
from .models import Order, OrderItem, OrderItemAddon


class OrderItemAddonInline(admin.TabularInline):
    model = OrderItemAddon
    extra = 0
    readonly_fields = ('addon_name', 'addon_price', 'quantity', 'subtotal')
    fields = readonly_fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        """Use all_objects manager to bypass TenantManager in admin"""
        return OrderItemAddon.all_objects.all()


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ('menu_name', 'menu_price', 'quantity', 'subtotal', 'notes')
    fields = readonly_fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def get_queryset(self, request):
        return OrderItem.all_objects.all()


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Orders are created only by the order services; the admin can move the
    status along but never edit prices or items.
    """

    list_display = (
        "order_number",
        "tenant",
        "business_date",
        "source",
        "order_type",
        "status",
        "get_total_formatted",
        "placed_at",
    )
    list_display_links = ("order_number",)
    search_fields = ("order_number", "tenant__code", "customer__email", "customer__phone")
    list_filter = ("status", "source", "order_type", "is_scheduled", "business_date")
    inlines = [OrderItemInline]

    fieldsets = (
        (
            "Order Overview",
            {
                "fields": (
                    "id",
                    "tenant",
                    "order_number",
                    "business_date",
                    "source",
                    "order_type",
                    "status",
                    "table_number",
                    "customer",
                    "notes",
                )
            },
        ),
        (
            "Financial Summary",
            {
                "fields": (
                    "subtotal",
                    "tax_amount",
                    "service_charge_amount",
                    "packaging_fee_amount",
                    "delivery_fee_amount",
                    "total_amount",
                ),
                "description": "Amounts are fixed when the order is placed.",
            },
        ),
        (
            "Schedule",
            {
                "classes": ("collapse",),
                "fields": ("is_scheduled", "scheduled_date", "scheduled_time"),
            },
        ),
        (
            "Timestamps",
            {
                "classes": ("collapse",),
                "fields": ("placed_at", "accepted_at", "ready_at", "completed_at", "cancelled_at", "updated_at"),
            },
        ),
    )

    readonly_fields = (
        "id",
        "tenant",
        "order_number",
        "business_date",
        "source",
        "order_type",
        "customer",
        "subtotal",
        "tax_amount",
        "service_charge_amount",
        "packaging_fee_amount",
        "delivery_fee_amount",
        "total_amount",
        "is_scheduled",
        "scheduled_date",
        "scheduled_time",
        "placed_at",
        "updated_at",
    )

    def get_queryset(self, request):
        """Optimize query performance by pre-fetching related objects."""
        return Order.all_objects.select_related("tenant", "customer", "payment")

    def has_add_permission(self, request):
        return False

    @admin.display(ordering="total_amount", description="Total")
    def get_total_formatted(self, obj):
        return f"{obj.total_amount:,.2f}"


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("menu_name", "order", "quantity", "subtotal")
    search_fields = ("menu_name", "order__order_number")
    readonly_fields = ("order", "menu_item", "menu_name", "menu_price", "quantity", "subtotal", "notes")
    inlines = [OrderItemAddonInline]

    def get_queryset(self, request):
        return OrderItem.all_objects.select_related("order")

    def has_add_permission(self, request):
        return False
