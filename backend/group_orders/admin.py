from django.contrib import admin
from .models import GroupOrderSession, GroupOrderParticipant


class GroupOrderParticipantInline(admin.TabularInline):
    model = GroupOrderParticipant
    extra = 0
    fields = ('name', 'device_id', 'is_host', 'customer', 'joined_at')
    readonly_fields = ('joined_at',)

    def get_queryset(self, request):
        """Use all_objects manager to bypass TenantManager in admin"""
        return GroupOrderParticipant.all_objects.all()


@admin.register(GroupOrderSession)
class GroupOrderSessionAdmin(admin.ModelAdmin):
    list_display = ('session_code', 'tenant', 'order_type', 'status', 'order', 'expires_at')
    list_filter = ('status', 'order_type')
    search_fields = ('session_code',)
    readonly_fields = ('order', 'created_at', 'updated_at')
    inlines = [GroupOrderParticipantInline]

    def get_queryset(self, request):
        return GroupOrderSession.all_objects.select_related('tenant', 'order')
