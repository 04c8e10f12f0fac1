import pytest
from decimal import Decimal
from django.urls import reverse
from products.models import Product

pytestmark = pytest.mark.django_db


@pytest.fixture
def shop(seller, make_shop):
    return make_shop(seller, products=[("Garri", "10.00", "foods")])


def products_url(shop):
    return reverse("shop-products", kwargs={"shop_id": shop.id})


def product_url(shop, product):
    return reverse("shop-product-detail", kwargs={"shop_id": shop.id, "product_id": product.id})


class TestProductList:
    def test_anyone_can_list_products(self, api_client, shop):
        response = api_client.get(products_url(shop))

        assert response.status_code == 200
        assert [p["name"] for p in response.data["data"]] == ["Garri"]

    def test_unknown_shop(self, api_client):
        response = api_client.get(
            reverse("shop-products", kwargs={"shop_id": "6f1c9f52-6f0b-4a51-9a57-2d9bdfa1c000"})
        )

        assert response.status_code == 404


class TestAddProduct:
    def test_owner_adds_trimmed_product(self, auth_client, seller, shop):
        response = auth_client(seller).post(
            products_url(shop),
            {"name": "  Palm Oil ", "price": "4.75", "category": " foods "},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["message"] == "Product added successfully"
        product = shop.products.get(name="Palm Oil")
        assert product.category == "foods"
        assert product.price == Decimal("4.75")

    @pytest.mark.parametrize("payload, message", [
        ({"name": "", "price": 3, "category": "foods"}, "Product name is required"),
        ({"name": "Rice", "price": 3, "category": "   "}, "Category is required"),
        ({"name": "Rice", "price": "cheap", "category": "foods"}, "Please enter a valid price"),
        ({"name": "Rice", "price": 0, "category": "foods"}, "Price must be positive"),
        ({"name": "Rice", "price": -2, "category": "foods"}, "Price must be positive"),
    ])
    def test_invalid_product_is_rejected(self, auth_client, seller, shop, payload, message):
        response = auth_client(seller).post(products_url(shop), payload, format="json")

        assert response.status_code == 400
        assert response.data["message"] == message
        assert shop.products.count() == 1

    def test_other_seller_cannot_add(self, auth_client, make_user, shop):
        response = auth_client(make_user("seller")).post(
            products_url(shop), {"name": "Rice", "price": 3, "category": "foods"}, format="json"
        )

        assert response.status_code == 403
        assert shop.products.count() == 1

    def test_buyer_cannot_add(self, auth_client, buyer, shop):
        response = auth_client(buyer).post(
            products_url(shop), {"name": "Rice", "price": 3, "category": "foods"}, format="json"
        )

        assert response.status_code == 403
        assert response.data["message"] == "Only sellers can manage shops"


class TestProductDetail:
    def test_partial_update(self, auth_client, seller, shop):
        product = shop.products.get()

        response = auth_client(seller).patch(product_url(shop, product), {"price": 12}, format="json")

        assert response.status_code == 200
        product.refresh_from_db()
        assert product.price == Decimal("12.00")
        assert product.name == "Garri"

    def test_update_validates_price(self, auth_client, seller, shop):
        product = shop.products.get()

        response = auth_client(seller).put(product_url(shop, product), {"price": -1}, format="json")

        assert response.status_code == 400
        product.refresh_from_db()
        assert product.price == Decimal("10.00")

    def test_product_must_belong_to_the_shop(self, auth_client, seller, make_user, make_shop, shop):
        other_shop = make_shop(make_user("seller"), products=[("Rice", 30, "foods")])
        foreign = other_shop.products.get()

        response = auth_client(seller).put(product_url(shop, foreign), {"price": 1}, format="json")

        assert response.status_code == 404
        foreign.refresh_from_db()
        assert foreign.price == Decimal("30.00")

    def test_owner_deletes_product(self, auth_client, seller, shop):
        product = shop.products.get()

        response = auth_client(seller).delete(product_url(shop, product))

        assert response.status_code == 200
        assert not Product.objects.filter(id=product.id).exists()

    def test_non_owner_cannot_delete(self, auth_client, make_user, shop):
        product = shop.products.get()

        response = auth_client(make_user("seller")).delete(product_url(shop, product))

        assert response.status_code == 403
        assert response.data["message"] == "You do not own this shop"
        assert Product.objects.filter(id=product.id).exists()
