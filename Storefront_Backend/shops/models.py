from django.db import models
from django.conf import settings
import uuid

# Create your models here.

class Shop(models.Model):
    """Model for sellers shops."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='shop'
    )
    shop_name = models.CharField(max_length=100)
    location = models.CharField(max_length=255)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)


    @property
    def has_coordinates(self):
        return self.latitude is not None and self.longitude is not None


    def __str__(self):
        return self.shop_name
    
    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=['shop_name'], name='shops_shop_name_idx'),
            models.Index(fields=['location'], name='shops_location_idx'),
        ]
