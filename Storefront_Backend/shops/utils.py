import math
from django.db.models import Q, Avg, Count
from .models import Shop

EARTH_RADIUS_KM = 6371.0


def get_shop_queryset():
    """Shops with their products and rating summary attached"""
    return (
        Shop.objects
        .select_related("owner")
        .prefetch_related("products")
        .annotate(
            average_rating=Avg("reviews__rating"),
            review_count=Count("reviews", distinct=True),
        )
    )


def filter_by_location(queryset, location):
    """Case-insensitive substring match on the location string"""
    if not location:
        return queryset
    return queryset.filter(location__icontains=location.strip())


def search_shops(queryset, query):
    """
    Case-insensitive substring match across shop name, location,
    product names and product categories
    """
    query = (query or "").strip()
    if not query:
        return queryset
    
    # Matching through products joins one row per product, so resolve ids first
    matching_ids = Shop.objects.filter(
        Q(shop_name__icontains=query) |
        Q(location__icontains=query) |
        Q(products__name__icontains=query) |
        Q(products__category__icontains=query)
    ).values("id")
    return queryset.filter(id__in=matching_ids)


def haversine_km(lat1, lng1, lat2, lng2):
    """Great-circle distance between two coordinates in kilometres"""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = (
        math.sin(d_phi / 2) ** 2 +
        math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def nearby_shops(queryset, latitude, longitude, radius_km):
    """
    Shops within radius_km of the given point, nearest first.
    Each returned shop carries a distance_km attribute.
    """
    shops = []
    for shop in queryset.filter(latitude__isnull=False, longitude__isnull=False):
        distance = haversine_km(latitude, longitude, shop.latitude, shop.longitude)
        if distance <= radius_km:
            shop.distance_km = round(distance, 2)
            shops.append(shop)

    shops.sort(key=lambda shop: shop.distance_km)
    return shops
