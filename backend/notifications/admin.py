from django.contrib import admin
from .models import MerchantNotification


@admin.register(MerchantNotification)
class MerchantNotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'tenant', 'category', 'is_read', 'created_at')
    list_filter = ('category', 'is_read')
    search_fields = ('title', 'message')

    def get_queryset(self, request):
        return MerchantNotification.all_objects.select_related('tenant')
