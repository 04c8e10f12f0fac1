from django.contrib import admin
from .models import Review


# Register your models here.
@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('shop', 'user_name', 'rating', 'created_at')
    list_filter = ('rating',)
    search_fields = ('shop__shop_name', 'user_name', 'comment')
