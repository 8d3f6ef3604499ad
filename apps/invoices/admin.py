from django.contrib import admin
from .models import Invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'recipient_name', 'amount', 'is_paid', 'paid_at', 'created_at']
    list_filter = ['is_paid']
    search_fields = ['invoice_number', 'recipient_name', 'recipient_email']
    readonly_fields = [
        'id', 'invoice_number', 'appointment',
        'issuer_name', 'issuer_address', 'issuer_phone', 'issuer_email',
        'recipient_name', 'recipient_email', 'amount', 'created_at', 'updated_at',
    ]
    fieldsets = (
        ('Invoice', {'fields': ('id', 'invoice_number', 'appointment', 'amount', 'description')}),
        ('Issuer', {'fields': ('issuer_name', 'issuer_address', 'issuer_phone', 'issuer_email')}),
        ('Recipient', {'fields': ('recipient_name', 'recipient_email')}),
        ('Payment', {'fields': ('is_paid', 'paid_at')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def has_delete_permission(self, request, obj=None):
        return False
