import pytest
from rest_framework.test import APIClient
from users.models import CustomUser
from users.utils import generate_token_for_user
from shops.models import Shop
from products.models import Product


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    """Create users with sensible defaults"""
    counter = {"n": 0}

    def _make_user(user_type="buyer", **kwargs):
        counter["n"] += 1
        defaults = {
            "email": f"{user_type}{counter['n']}@mail.com",
            "name": f"{user_type.title()} {counter['n']}",
            "password": "secret123",
            "user_type": user_type,
        }
        defaults.update(kwargs)
        return CustomUser.objects.create_user(**defaults)

    return _make_user


@pytest.fixture
def seller(make_user):
    return make_user("seller")


@pytest.fixture
def buyer(make_user):
    return make_user("buyer")


@pytest.fixture
def auth_client():
    """An APIClient sending the user's token the way the storefront client does"""
    def _auth_client(user):
        client = APIClient()
        client.credentials(HTTP_X_AUTH_TOKEN=generate_token_for_user(user))
        return client

    return _auth_client


@pytest.fixture
def make_shop(db):
    def _make_shop(owner, products=(), **kwargs):
        defaults = {"shop_name": f"{owner.name}'s Shop", "location": "Lagos"}
        defaults.update(kwargs)
        shop = Shop.objects.create(owner=owner, **defaults)
        for name, price, category in products:
            Product.objects.create(shop=shop, name=name, price=price, category=category)
        return shop

    return _make_shop
