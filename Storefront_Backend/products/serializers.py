from decimal import Decimal
from rest_framework import serializers
from django.utils.translation import gettext_lazy as _
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for a shop's product"""
    name = serializers.CharField(
        max_length=255,
        error_messages={"blank": _("Product name is required"), "required": _("Product name is required")}
    )
    price = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        coerce_to_string=False,
        error_messages={"invalid": _("Please enter a valid price"), "required": _("Please enter a valid price")}
    )
    category = serializers.CharField(
        max_length=100,
        error_messages={"blank": _("Category is required"), "required": _("Category is required")}
    )

    class Meta:
        model = Product
        fields = ["id", "shop", "name", "price", "category", "created_at", "updated_at"]
        read_only_fields = ["id", "shop", "created_at", "updated_at"]


    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError(_("Product name is required"))
        return value
    

    def validate_category(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError(_("Category is required"))
        return value
    

    def validate_price(self, value):
        if value is None or value <= Decimal("0"):
            raise serializers.ValidationError(_("Price must be positive"))
        return value
