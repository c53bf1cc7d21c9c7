from django.contrib import admin
from .models import MerchantSettings


@admin.register(MerchantSettings)
class MerchantSettingsAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'currency', 'timezone', 'enable_tax', 'tax_percentage', 'is_manual_override', 'is_open']
    list_filter = ['enable_tax', 'enable_service_charge', 'is_manual_override']

    def get_queryset(self, request):
        # Admin works across merchants
        return MerchantSettings.all_objects.select_related('tenant')
