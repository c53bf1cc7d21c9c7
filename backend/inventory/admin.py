from django.contrib import admin
from .models import StockMovement


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ('item_name', 'item_kind', 'quantity_change', 'previous_quantity', 'new_quantity', 'order', 'timestamp')
    list_filter = ('item_kind', 'operation_type')
    search_fields = ('item_name',)

    def get_queryset(self, request):
        return StockMovement.all_objects.select_related('order')

    def has_change_permission(self, request, obj=None):
        return False
