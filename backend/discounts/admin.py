from django.contrib import admin
from .models import Promotion, PromotionWindow


class PromotionWindowInline(admin.TabularInline):
    model = PromotionWindow
    extra = 1
    fields = ('menu_item', 'promo_price', 'start_at', 'end_at')

    def get_queryset(self, request):
        return PromotionWindow.all_objects.select_related('menu_item')


@admin.register(Promotion)
class PromotionAdmin(admin.ModelAdmin):
    list_display = ('name', 'tenant', 'is_enabled', 'updated_at')
    list_filter = ('is_enabled',)
    search_fields = ('name',)
    inlines = [PromotionWindowInline]

    def get_queryset(self, request):
        return Promotion.all_objects.select_related('tenant')
