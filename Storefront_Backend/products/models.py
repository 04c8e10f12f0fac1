import uuid
from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
from shops.models import Shop


# Create your models here.
class Product(models.Model):
    """A catalog entry nested under a single shop"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(Shop, on_delete=models.CASCADE, related_name="products")
    name = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))]
    )
    category = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)


    def __str__(self):
        return f"{self.name} ({self.shop.shop_name})"
    
    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=['name'], name='products_name_idx'),
            models.Index(fields=['category'], name='products_category_idx'),
        ]
