"""
Python client for the storefront marketplace API.

    from storefront_client import StorefrontAPI

    api = StorefrontAPI("http://localhost:8000/api/v1")
    api.auth.login({"email": "buyer0@mail.com", "password": "TestPass123"})
    shops = api.shops.get_shops(location="Lagos")
"""
from .api import StorefrontAPI
from .exceptions import APIError, FormError, StorefrontError
from .filters import filter_shops
from .models import Product, Review, ReviewSummary, Shop, User
from .session import SessionStore

__all__ = [
    "StorefrontAPI",
    "SessionStore",
    "APIError",
    "FormError",
    "StorefrontError",
    "filter_shops",
    "Product",
    "Review",
    "ReviewSummary",
    "Shop",
    "User",
]
