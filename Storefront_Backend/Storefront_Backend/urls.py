"""
URL configuration for Storefront_Backend project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from rest_framework import permissions
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

# Swagger API configuration
schema_view = get_schema_view(
    openapi.Info(
        title="Storefront Backend API",
        default_version="v1",
        description="API documentation for the storefront marketplace: auth, shops, products and reviews",
        license=openapi.License(name="BSD License"),
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)


urlpatterns = [
    path('admin/', admin.site.urls),

    #swagger
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('redoc/', schema_view.with_ui('redoc', cache_timeout=0), name='schema-redoc'),
    path('swagger.json', schema_view.without_ui(cache_timeout=0), name='schema-json'),

    #App URL
    path('api/v1/auth/', include('users.urls')),
    path('api/v1/shop/', include('shops.urls')),
    path('api/v1/shop/<uuid:shop_id>/products/', include('products.urls')),
    path('api/v1/reviews/', include('ratings.urls')),
]
