from django.contrib import admin
from .models import Appointment, AppointmentStatusLog


class AppointmentStatusLogInline(admin.TabularInline):
    model = AppointmentStatusLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    can_delete = False


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = [
        'short_id', 'client', 'barber', 'service',
        'date', 'start_time', 'status', 'payment_status', 'price',
    ]
    list_filter = ['status', 'payment_status', 'barber', 'date']
    search_fields = ['client__username', 'client__email', 'barber__display_name', 'service__name']
    # Lifecycle fields change through the state machine only
    readonly_fields = [
        'id', 'status', 'payment_status', 'cancelled_at', 'paid_at', 'created_at', 'updated_at',
    ]
    date_hierarchy = 'date'
    inlines = [AppointmentStatusLogInline]
    fieldsets = (
        ('Appointment', {'fields': ('id', 'barber', 'client', 'service')}),
        ('Schedule', {'fields': ('date', 'start_time', 'end_time', 'duration_minutes')}),
        ('Status', {'fields': ('status', 'payment_status', 'price', 'notes', 'cancellation_reason')}),
        ('Audit', {'fields': ('cancelled_at', 'paid_at', 'created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def short_id(self, obj):
        return str(obj.id)[:8]
    short_id.short_description = 'ID'


@admin.register(AppointmentStatusLog)
class AppointmentStatusLogAdmin(admin.ModelAdmin):
    list_display = ['appointment', 'from_status', 'to_status', 'changed_by', 'changed_at']
    readonly_fields = ['id', 'appointment', 'from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    search_fields = ['appointment__client__username', 'changed_by']
