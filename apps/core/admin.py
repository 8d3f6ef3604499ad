from django.contrib import admin
from .models import ShopSettings


@admin.register(ShopSettings)
class ShopSettingsAdmin(admin.ModelAdmin):
    list_display = ['shop_name', 'phone', 'email', 'updated_at']
    readonly_fields = ['created_at', 'updated_at']
    fieldsets = (
        ('Shop', {'fields': ('shop_name', 'address', 'phone', 'email')}),
        ('Location', {'fields': ('latitude', 'longitude')}),
        ('Social', {'fields': ('facebook', 'instagram', 'tiktok', 'youtube', 'whatsapp')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def has_add_permission(self, request):
        return not ShopSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
