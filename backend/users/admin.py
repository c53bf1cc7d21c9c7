from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'tenant', 'role', 'is_pos_staff', 'is_active']
    list_filter = ['role', 'is_pos_staff', 'is_active']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Merchant', {'fields': ('tenant', 'role', 'is_pos_staff')}),
    )
