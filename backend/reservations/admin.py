from django.contrib import admin
from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ('id', 'tenant', 'customer', 'party_size', 'reservation_date', 'reservation_time', 'status', 'order')
    list_filter = ('status', 'reservation_date')
    search_fields = ('customer__name', 'customer__email', 'table_number')
    readonly_fields = ('order', 'accepted_at', 'created_at', 'updated_at')

    def get_queryset(self, request):
        return Reservation.all_objects.select_related('tenant', 'customer', 'order')
