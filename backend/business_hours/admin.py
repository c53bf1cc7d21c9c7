from django.contrib import admin
from .models import OpeningHours, SpecialHours, ModeSchedule


@admin.register(OpeningHours)
class OpeningHoursAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'day_of_week', 'open_time', 'close_time', 'is_closed', 'is_24_hours']
    list_filter = ['day_of_week', 'is_closed']

    def get_queryset(self, request):
        return OpeningHours.all_objects.select_related('tenant')


@admin.register(SpecialHours)
class SpecialHoursAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'date', 'name', 'is_closed', 'open_time', 'close_time']
    list_filter = ['is_closed']
    date_hierarchy = 'date'

    def get_queryset(self, request):
        return SpecialHours.all_objects.select_related('tenant')


@admin.register(ModeSchedule)
class ModeScheduleAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'mode', 'day_of_week', 'start_time', 'end_time', 'is_active']
    list_filter = ['mode', 'day_of_week', 'is_active']

    def get_queryset(self, request):
        return ModeSchedule.all_objects.select_related('tenant')
