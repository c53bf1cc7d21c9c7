from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("order", "tenant", "amount", "payment_method", "status", "created_at")
    list_filter = ("status", "payment_method")
    readonly_fields = ("order", "amount", "created_at")

    def get_queryset(self, request):
        return Payment.all_objects.select_related("tenant", "order")
