import logging
from django.shortcuts import get_object_or_404
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import AllowAny
from rest_framework import status
from drf_yasg.utils import swagger_auto_schema
from shops.models import Shop
from .models import Product
from .serializers import ProductSerializer
from .utility import BaseResponseMixin, IsSellerPermission, IsShopOwner

logger = logging.getLogger(__name__)


class ShopProductMixin:
    """Resolves the shop from the URL and gates writes to its owner"""

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsSellerPermission(), IsShopOwner()]
    

    def get_shop(self):
        shop = get_object_or_404(Shop, id=self.kwargs.get("shop_id"))
        if self.request.method != "GET":
            self.check_object_permissions(self.request, shop)
        return shop


class ShopProductListCreateView(ShopProductMixin, GenericAPIView, BaseResponseMixin):
    """
    API endpoint to list a shop's products or add one to it
    """
    serializer_class = ProductSerializer

    def get(self, request, shop_id, *args, **kwargs):
        """Get all products of a shop"""
        shop = self.get_shop()
        serializer = self.get_serializer(shop.products.all(), many=True)
        return self.get_response(
            status.HTTP_200_OK,
            "Shop products retrieved successfully",
            serializer.data
        )
    

    @swagger_auto_schema(request_body=ProductSerializer)
    def post(self, request, shop_id, *args, **kwargs):
        """Add a product to the caller's shop"""
        shop = self.get_shop()
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = serializer.save(shop=shop)

        logger.info(f"Product {product.id} added to shop {shop.id}")
        return self.get_response(
            status.HTTP_201_CREATED,
            "Product added successfully",
            serializer.data
        )
    

class ShopProductDetailView(ShopProductMixin, GenericAPIView, BaseResponseMixin):
    """
    API endpoint to retrieve, update or delete one product of a shop
    """
    serializer_class = ProductSerializer

    def get_product(self):
        shop = self.get_shop()
        return get_object_or_404(Product, id=self.kwargs.get("product_id"), shop=shop)
    

    def get(self, request, shop_id, product_id, *args, **kwargs):
        product = self.get_product()
        serializer = self.get_serializer(product)
        return self.get_response(
            status.HTTP_200_OK,
            "Product retrieved successfully",
            serializer.data
        )
    

    @swagger_auto_schema(request_body=ProductSerializer)
    def put(self, request, shop_id, product_id, *args, **kwargs):
        """Update a product, every field is optional"""
        product = self.get_product()
        serializer = self.get_serializer(product, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()

        logger.info(f"Product {product.id} updated in shop {shop_id}")
        return self.get_response(
            status.HTTP_200_OK,
            "Product updated successfully",
            serializer.data
        )
    

    @swagger_auto_schema(request_body=ProductSerializer)
    def patch(self, request, shop_id, product_id, *args, **kwargs):
        return self.put(request, shop_id, product_id, *args, **kwargs)
    

    def delete(self, request, shop_id, product_id, *args, **kwargs):
        """Remove a product from the caller's shop"""
        product = self.get_product()
        product.delete()

        logger.info(f"Product {product_id} deleted from shop {shop_id}")
        return self.get_response(
            status.HTTP_200_OK,
            "Product deleted successfully"
        )
