from django.contrib import admin
from .models import Barber, AvailabilityRule, AvailabilityOverride


class AvailabilityRuleInline(admin.TabularInline):
    model = AvailabilityRule
    extra = 1


class AvailabilityOverrideInline(admin.TabularInline):
    model = AvailabilityOverride
    extra = 0


@admin.register(Barber)
class BarberAdmin(admin.ModelAdmin):
    list_display = ['display_name', 'user', 'phone', 'is_active']
    list_filter = ['is_active']
    search_fields = ['display_name', 'user__username', 'user__email', 'phone']
    list_editable = ['is_active']
    readonly_fields = ['id', 'created_at', 'updated_at']
    inlines = [AvailabilityRuleInline, AvailabilityOverrideInline]
    fieldsets = (
        ('Barber Info', {'fields': ('id', 'user', 'display_name', 'bio', 'phone')}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )


@admin.register(AvailabilityRule)
class AvailabilityRuleAdmin(admin.ModelAdmin):
    list_display = ['barber', 'weekday', 'start_time', 'end_time', 'is_available']
    list_filter = ['weekday', 'is_available']
    search_fields = ['barber__display_name']


@admin.register(AvailabilityOverride)
class AvailabilityOverrideAdmin(admin.ModelAdmin):
    list_display = ['barber', 'date', 'is_available', 'start_time', 'end_time', 'reason']
    list_filter = ['is_available', 'date']
    search_fields = ['barber__display_name']
    date_hierarchy = 'date'
