import logging
from django.shortcuts import get_object_or_404
from django.db import IntegrityError, transaction
from django.db.models import Avg
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework import status
from rest_framework.exceptions import ValidationError, PermissionDenied
from drf_yasg.utils import swagger_auto_schema
from products.utility import BaseResponseMixin
from shops.models import Shop
from .models import Review
from .serializers import ReviewSerializer

logger = logging.getLogger(__name__)

# Create your views here.

class ReviewCreateView(GenericAPIView, BaseResponseMixin):
    """
    Add a review to a shop. The reviewer is always the caller.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = ReviewSerializer

    def has_reviewed(self, user, shop):
        return Review.objects.filter(user=user, shop=shop).exists()


    @swagger_auto_schema(request_body=ReviewSerializer)
    def post(self, request, *args, **kwargs):
        user = request.user

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        shop = serializer.validated_data["shop"]

        if shop.owner_id == user.id:
            raise PermissionDenied("You cannot review your own shop")

        if self.has_reviewed(user, shop):
            raise ValidationError("You have already reviewed this shop")

        try:
            with transaction.atomic():
                serializer.save(user=user, user_name=user.name)
        except IntegrityError:
            raise ValidationError("You have already reviewed this shop")

        logger.info(f"Review added to shop {shop.id} by {user.email}")
        return self.get_response(
            status.HTTP_201_CREATED,
            "Review submitted successfully",
            serializer.data
        )


class ShopReviewListView(GenericAPIView, BaseResponseMixin):
    """
    List all reviews for a shop
    """
    serializer_class = ReviewSerializer
    permission_classes = [AllowAny]
    
    def get(self, request, shop_id, *args, **kwargs):
        """Get all shop reviews, newest first"""
        shop = get_object_or_404(Shop, id=shop_id)
        reviews = Review.objects.filter(shop=shop).select_related("user")
        serializer = self.get_serializer(reviews, many=True)

        # Inject average rating and count from view
        average_rating = reviews.aggregate(avg_rating=Avg('rating'))['avg_rating']
        average_rating = round(average_rating, 1) if average_rating else 0.0

        response_data = {
            "reviews": serializer.data,
            "average_rating": average_rating,
            "review_count": reviews.count()
        }
        
        return self.get_response(
            status.HTTP_200_OK,
            "Reviews retrieved successfully",
            response_data
        )


class ReviewDetailView(GenericAPIView, BaseResponseMixin):
    """
    Class to handle single review view and deletion.
    Deleting is available to the review's author and staff.
    """
    serializer_class = ReviewSerializer

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]
    

    def get(self, request, review_id, *args, **kwargs):
        """Retrive a single review"""
        review = get_object_or_404(Review, id=review_id)
        serializer = self.get_serializer(review)
        return self.get_response(
            status.HTTP_200_OK,
            "Review retrieved successfully",
            serializer.data
        )
    

    def delete(self, request, review_id, *args, **kwargs):
        """Delete a review"""
        review = get_object_or_404(Review, id=review_id)
        user = request.user

        if review.user_id != user.id and not (user.is_staff or user.is_superuser):
            raise PermissionDenied("You can only delete your own reviews")

        review.delete()
        logger.info(f"Review {review_id} deleted by {user.email}")
        return self.get_response(
            status.HTTP_200_OK,
            "Review deleted successfully"
        )
