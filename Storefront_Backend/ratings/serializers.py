from rest_framework import serializers
from django.utils.translation import gettext_lazy as _
from shops.models import Shop
from .models import Review

MIN_COMMENT_LENGTH = 10


class ReviewSerializer(serializers.ModelSerializer):
    """Serializer for a buyer's shop review"""
    shop_id = serializers.PrimaryKeyRelatedField(
        source="shop",
        queryset=Shop.objects.all(),
        pk_field=serializers.UUIDField(),
        error_messages={"does_not_exist": _("Shop not found")}
    )
    user_id = serializers.UUIDField(source="user.id", read_only=True)
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            "min_value": _("Rating must be between 1 and 5"),
            "max_value": _("Rating must be between 1 and 5"),
        }
    )
    comment = serializers.CharField(
        error_messages={"blank": _("Review must be at least 10 characters long")}
    )
    time_since_review = serializers.SerializerMethodField()

    class Meta:
        model = Review
        fields = [
            'id', 'shop_id', 'user_id', 'user_name', 'rating',
            'comment', 'created_at', 'time_since_review'
        ]
        read_only_fields = ['id', 'user_id', 'user_name', 'created_at']
        # One review per user per shop is enforced in the view
        validators = []

  
    def get_time_since_review(self, obj):
        return obj.time_since_review() # calls the method on the model
    

    def validate_comment(self, value):
        value = value.strip()
        if len(value) < MIN_COMMENT_LENGTH:
            raise serializers.ValidationError(_("Review must be at least 10 characters long"))
        return value
