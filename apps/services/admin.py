from django.contrib import admin
from .models import Service


def get_owner(obj):
    return obj.barber.display_name if obj.barber_id else 'All barbers'
get_owner.short_description = 'Barber'


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ['name', get_owner, 'duration_minutes', 'price', 'is_active']
    list_filter = ['barber', 'is_active']
    search_fields = ['name', 'barber__display_name']
    list_editable = ['is_active', 'price']
    readonly_fields = ['id', 'created_at', 'updated_at']
    fieldsets = (
        ('Service Info', {'fields': ('id', 'barber', 'name', 'description')}),
        ('Timing & Pricing', {'fields': ('duration_minutes', 'price')}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
