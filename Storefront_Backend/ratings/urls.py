from django.urls import path
from .views import (
    ReviewCreateView,
    ShopReviewListView,
    ReviewDetailView,
)

urlpatterns = [
    path('', ReviewCreateView.as_view(), name='add-review'),
    path('shop/<uuid:shop_id>/', ShopReviewListView.as_view(), name='shop-reviews'),
    path('<uuid:review_id>/', ReviewDetailView.as_view(), name='review-detail'),
]
