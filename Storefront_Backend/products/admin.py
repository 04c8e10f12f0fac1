from django.contrib import admin
from .models import Product


# Register your models here.
@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'price', 'shop', 'created_at')
    list_filter = ('category',)
    search_fields = ('name', 'category', 'shop__shop_name')
