from django.contrib import admin
from .models import MenuItem, AddonItem


class AddonItemInline(admin.TabularInline):
    model = AddonItem
    extra = 0
    fields = ('name', 'price', 'is_active', 'track_stock', 'stock_qty', 'low_stock_threshold')

    def get_queryset(self, request):
        """Use all_objects manager to bypass TenantManager in admin"""
        return AddonItem.all_objects.all()


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'tenant', 'price', 'is_active', 'track_stock', 'stock_qty', 'deleted_at')
    list_filter = ('is_active', 'track_stock')
    search_fields = ('name',)
    inlines = [AddonItemInline]

    def get_queryset(self, request):
        return MenuItem.all_objects.select_related('tenant')


@admin.register(AddonItem)
class AddonItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'menu_item', 'price', 'is_active', 'track_stock', 'stock_qty')
    list_filter = ('is_active', 'track_stock')
    search_fields = ('name', 'menu_item__name')

    def get_queryset(self, request):
        return AddonItem.all_objects.select_related('tenant', 'menu_item')
