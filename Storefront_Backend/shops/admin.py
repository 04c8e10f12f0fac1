from django.contrib import admin
from .models import Shop


# Register your models here.
@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ('shop_name', 'location', 'owner', 'created_at')
    search_fields = ('shop_name', 'location', 'owner__email')
