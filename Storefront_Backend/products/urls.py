from django.urls import path
from .views import ShopProductListCreateView, ShopProductDetailView

# Mounted under /shop/<uuid:shop_id>/products/
urlpatterns = [
    path('', ShopProductListCreateView.as_view(), name='shop-products'),
    path('<uuid:product_id>/', ShopProductDetailView.as_view(), name='shop-product-detail'),
]
