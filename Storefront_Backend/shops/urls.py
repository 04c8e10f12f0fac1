from django.urls import path
from .views import ShopListCreateView, MyShopView, ShopDetailView

urlpatterns = [
    path('', ShopListCreateView.as_view(), name='shop-list'),
    path('my-shop/', MyShopView.as_view(), name='my-shop'),
    path('<uuid:pk>/', ShopDetailView.as_view(), name='shop-detail'),
]
