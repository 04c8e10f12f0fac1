import logging
from django.conf import settings
from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from rest_framework.generics import GenericAPIView
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework import status
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from products.utility import BaseResponseMixin, IsSellerPermission, IsShopOwner
from .models import Shop
from .serializers import ShopSerializer, NearbyShopQuerySerializer
from .utils import get_shop_queryset, filter_by_location, search_shops, nearby_shops

logger = logging.getLogger(__name__)


class ShopListCreateView(GenericAPIView, BaseResponseMixin):
    """
    API endpoints to browse shops and for sellers to open theirs
    """
    serializer_class = ShopSerializer

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsSellerPermission()]
    

    def get_queryset(self):
        queryset = get_shop_queryset()
        queryset = filter_by_location(queryset, self.request.query_params.get("location"))
        return search_shops(queryset, self.request.query_params.get("search"))
    

    def get_nearby_params(self):
        """Validated lat/lng/radius, or None when no coordinates were sent"""
        params = self.request.query_params
        if not params.get("lat") and not params.get("lng"):
            return None
        if not params.get("lat") or not params.get("lng"):
            raise ValidationError({"coordinates": "Both lat and lng are required"})

        query = NearbyShopQuerySerializer(data=params)
        query.is_valid(raise_exception=True)
        return query.validated_data
    

    @swagger_auto_schema(manual_parameters=[
        openapi.Parameter("location", openapi.IN_QUERY, type=openapi.TYPE_STRING),
        openapi.Parameter("search", openapi.IN_QUERY, type=openapi.TYPE_STRING),
        openapi.Parameter("lat", openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
        openapi.Parameter("lng", openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
        openapi.Parameter("radius", openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
    ])
    def get(self, request, *args, **kwargs):
        """Get all shops, optionally filtered by location, search text or proximity"""
        queryset = self.get_queryset()
        nearby = self.get_nearby_params()

        if nearby is not None:
            radius = nearby.get("radius") or settings.NEARBY_RADIUS_KM
            shops = nearby_shops(queryset, nearby["lat"], nearby["lng"], radius)
            message = f"Shops within {radius:g} km retrieved successfully"
        else:
            shops = queryset
            message = "All shops retrieved successfully"

        serializer = self.get_serializer(shops, many=True)
        return self.get_response(status.HTTP_200_OK, message, serializer.data)
    

    def has_shop(self, user):
        return Shop.objects.filter(owner=user).exists()


    @swagger_auto_schema(request_body=ShopSerializer)
    def post(self, request, *args, **kwargs):
        """
        Create the caller's shop, optionally with its first products.
        A seller owns at most one shop.
        """
        if self.has_shop(request.user):
            raise ValidationError("You already have a shop")

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            with transaction.atomic():
                shop = serializer.save(owner=request.user)
        except IntegrityError:
            # a concurrent request opened the shop after the check above
            raise ValidationError("You already have a shop")

        logger.info(f"Shop {shop.id} created by {request.user.email}")
        return self.get_response(
            status.HTTP_201_CREATED,
            "Shop created successfully",
            self.get_serializer(get_shop_queryset().get(id=shop.id)).data
        )
    

class MyShopView(GenericAPIView, BaseResponseMixin):
    """
    API endpoint for a seller to fetch their own shop
    """
    serializer_class = ShopSerializer
    permission_classes = [IsSellerPermission]

    def get(self, request, *args, **kwargs):
        shop = get_shop_queryset().filter(owner=request.user).first()
        if shop is None:
            return self.get_response(
                status.HTTP_404_NOT_FOUND,
                "Shop not found"
            )
        serializer = self.get_serializer(shop)
        return self.get_response(
            status.HTTP_200_OK,
            "Shop retrieved successfully",
            serializer.data
        )
    

class ShopDetailView(GenericAPIView, BaseResponseMixin):
    """
    API endpoints to view a shop, and for its owner to update or delete it
    """
    serializer_class = ShopSerializer

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsSellerPermission(), IsShopOwner()]
    

    def get_queryset(self):
        return get_shop_queryset()
    

    def get_object(self):
        shop = get_object_or_404(self.get_queryset(), pk=self.kwargs.get("pk"))
        self.check_object_permissions(self.request, shop)
        return shop
    

    def get(self, request, pk, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return self.get_response(
            status.HTTP_200_OK,
            "Shop retrieved successfully",
            serializer.data
        )
    

    @swagger_auto_schema(request_body=ShopSerializer)
    def put(self, request, pk, *args, **kwargs):
        """Update shop details, every field is optional"""
        shop = self.get_object()
        serializer = self.get_serializer(shop, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(f"Shop {shop.id} updated by {request.user.email}")
        return self.get_response(
            status.HTTP_200_OK,
            "Shop updated successfully",
            self.get_serializer(self.get_queryset().get(id=shop.id)).data
        )
    

    @swagger_auto_schema(request_body=ShopSerializer)
    def patch(self, request, pk, *args, **kwargs):
        return self.put(request, pk, *args, **kwargs)
    

    def delete(self, request, pk, *args, **kwargs):
        """Delete a shop together with its products and reviews"""
        shop = self.get_object()
        shop.delete() # cascades to products and reviews

        logger.info(f"Shop {pk} deleted by {request.user.email}")
        return self.get_response(
            status.HTTP_200_OK,
            "Shop deleted successfully with all its products"
        )
