from django.contrib import admin
from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'tenant', 'name', 'total_orders', 'total_spent', 'last_order_at')
    search_fields = ('name', 'email', 'phone')
    readonly_fields = ('total_orders', 'total_spent', 'last_order_at', 'created_at')

    def get_queryset(self, request):
        return Customer.all_objects.select_related('tenant')
