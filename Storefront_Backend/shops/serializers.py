from django.db import transaction
from django.db.models import Avg
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers
from products.models import Product
from products.serializers import ProductSerializer
from .models import Shop


class ShopSerializer(serializers.ModelSerializer):
    """Serializer to handle seller's shops and their nested catalog"""
    shop_name = serializers.CharField(
        min_length=2,
        max_length=100,
        error_messages={"min_length": _("Shop name must be at least 2 characters")}
    )
    location = serializers.CharField(
        min_length=2,
        max_length=255,
        error_messages={"min_length": _("Location is required"), "blank": _("Location is required")}
    )
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False, allow_null=True)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False, allow_null=True)
    owner_name = serializers.CharField(source="owner.name", read_only=True)
    products = ProductSerializer(many=True, required=False)
    average_rating = serializers.SerializerMethodField()
    review_count = serializers.SerializerMethodField()
    distance_km = serializers.SerializerMethodField()

    class Meta:
        model = Shop
        fields = [
            "id", "owner", "owner_name", "shop_name", "location",
            "latitude", "longitude", "products", "average_rating",
            "review_count", "distance_km", "created_at", "updated_at"
        ]
        read_only_fields = ["id", "owner", "created_at", "updated_at"]


    def get_average_rating(self, obj):
        """Use the queryset annotation when present"""
        if hasattr(obj, "average_rating"):
            average = obj.average_rating
        else:
            average = obj.reviews.aggregate(avg_rating=Avg("rating"))["avg_rating"]
        return round(average, 1) if average else 0.0
    

    def get_review_count(self, obj):
        if hasattr(obj, "review_count"):
            return obj.review_count
        return obj.reviews.count()
    

    def get_distance_km(self, obj):
        return getattr(obj, "distance_km", None)
    

    def validate_shop_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError(_("Shop name must be at least 2 characters"))
        return value
    

    def validate_location(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError(_("Location is required"))
        return value
    

    def validate(self, attrs):
        """Coordinates come in pairs"""
        latitude = attrs.get("latitude", getattr(self.instance, "latitude", None))
        longitude = attrs.get("longitude", getattr(self.instance, "longitude", None))

        if (latitude is None) != (longitude is None):
            raise serializers.ValidationError({
                "coordinates": _("Both latitude and longitude are required")
            })
        return attrs
    

    @transaction.atomic
    def create(self, validated_data):
        """Create a Shop instance along with its initial products"""
        products = validated_data.pop("products", [])
        shop = Shop.objects.create(**validated_data)
        for product in products:
            Product.objects.create(shop=shop, **product)
        return shop
    

    @transaction.atomic
    def update(self, instance, validated_data):
        """Update shop details; a products list replaces the catalog"""
        products = validated_data.pop("products", None)
        instance = super().update(instance, validated_data)

        if products is not None:
            instance.products.all().delete()
            for product in products:
                Product.objects.create(shop=instance, **product)
        return instance
    

class NearbyShopQuerySerializer(serializers.Serializer):
    """Validates the geolocation query parameters of the shop list"""
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    radius = serializers.FloatField(min_value=0, required=False)


    def validate_radius(self, value):
        if value <= 0:
            raise serializers.ValidationError(_("Radius must be positive"))
        return value
