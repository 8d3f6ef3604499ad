"""
Core base model mixins and the shop-wide settings record.
All production models should inherit from the mixins below.
"""
import logging
import uuid
from django.db import models

logger = logging.getLogger(__name__)


class UUIDModel(models.Model):
    """Primary key is a UUID, not an auto-incrementing integer."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """Automatically tracks creation and last-update timestamps."""
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class BaseModel(UUIDModel, TimestampedModel):
    """
    Convenience base combining UUID pk + timestamps.
    Records referenced by appointments are retired with an is_active flag
    instead of being deleted.
    """
    class Meta:
        abstract = True


# ── Shop settings (singleton) ─────────────────────────────────────────────────

class ShopSettings(TimestampedModel):
    """
    Single shop-wide configuration record.

    Always go through ShopSettings.load(): it returns the one row and
    creates it with defaults on first access.
    """
    SINGLETON_PK = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_PK, editable=False)
    shop_name = models.CharField(max_length=120, default='BookMe')
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    facebook = models.URLField(blank=True)
    instagram = models.URLField(blank=True)
    tiktok = models.URLField(blank=True)
    youtube = models.URLField(blank=True)
    whatsapp = models.CharField(max_length=30, blank=True)

    EDITABLE_FIELDS = [
        'shop_name', 'address', 'phone', 'email', 'latitude', 'longitude',
        'facebook', 'instagram', 'tiktok', 'youtube', 'whatsapp',
    ]

    class Meta:
        verbose_name = 'Shop Settings'
        verbose_name_plural = 'Shop Settings'

    def __str__(self):
        return self.shop_name

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        if self._state.adding:
            # A fresh instance replaces the existing row instead of inserting a second one.
            created_at = (
                type(self).objects.filter(pk=self.SINGLETON_PK)
                .values_list('created_at', flat=True).first()
            )
            if created_at is not None:
                self.created_at = created_at
                self._state.adding = False
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        logger.warning('Refused to delete the shop settings record.')
        return 0, {}

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj

    def as_dict(self):
        data = {field: getattr(self, field) for field in self.EDITABLE_FIELDS}
        for coord in ('latitude', 'longitude'):
            if data[coord] is not None:
                data[coord] = float(data[coord])
        return data
