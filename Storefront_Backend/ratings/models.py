from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone
from dateutil.relativedelta import relativedelta
from shops.models import Shop
import uuid

# Create your models here.

class Review(models.Model):
    """
    Model to represent a buyer's rating and comment on a shop
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    shop = models.ForeignKey(Shop, on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    user_name = models.CharField(max_length=255)
    rating = models.PositiveSmallIntegerField(
        choices=[(i, str(i)) for i in range(1, 6)],
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)


    def __str__(self):
        return f"Rating by {self.user_name} for {self.shop.shop_name}"
    

    def time_since_review(self):
        """Return a human readable time difference"""
        now = timezone.now()
        diff = relativedelta(now, self.created_at)

        if diff.years >= 1:
            return f"{diff.years} year{'s' if diff.years > 1 else ''} ago"
        elif diff.months >= 1:
            return f"{diff.months} month{'s' if diff.months > 1 else ''} ago"
        elif diff.days >= 1:
            return f"{diff.days} day{'s' if diff.days > 1 else ''} ago"
        elif diff.hours >= 1:
            return f"{diff.hours} hour{'s' if diff.hours > 1 else ''} ago"
        elif diff.minutes >= 1:
            return f"{diff.minutes} minute{'s' if diff.minutes > 1 else ''} ago"
        else:
            return "Just now"
        
    class Meta:
        verbose_name = "Review"
        verbose_name_plural = "Reviews"
        ordering = ["-created_at"]
        unique_together = ['user', 'shop']
