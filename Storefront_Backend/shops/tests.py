import pytest
from io import StringIO
from django.core.management import call_command
from django.urls import reverse
from shops.models import Shop
from shops.utils import haversine_km
from shops.views import ShopListCreateView
from users.models import CustomUser
from products.models import Product
from ratings.models import Review

pytestmark = pytest.mark.django_db

LAGOS = (6.5244, 3.3792)
IKEJA = (6.6018, 3.3515)
ABUJA = (9.0765, 7.3986)


def shop_payload(**overrides):
    payload = {
        "shop_name": "Mama Put Stores",
        "location": "Yaba, Lagos",
        "products": [
            {"name": "Garri", "price": 12.5, "category": "foods"},
            {"name": "Ankara Dress", "price": "40.00", "category": "fashion"},
        ],
    }
    payload.update(overrides)
    return payload


class TestShopList:
    def test_lists_shops_with_products_and_rating(self, api_client, seller, make_user, make_shop):
        shop = make_shop(seller, products=[("Garri", "12.50", "foods")])
        for rating in (4, 5):
            reviewer = make_user("buyer")
            Review.objects.create(shop=shop, user=reviewer, user_name=reviewer.name, rating=rating, comment="Lovely shop indeed")

        response = api_client.get(reverse("shop-list"))

        assert response.status_code == 200
        [data] = response.data["data"]
        assert data["shop_name"] == shop.shop_name
        assert data["products"][0]["name"] == "Garri"
        assert data["products"][0]["price"] == 12.5
        assert data["average_rating"] == 4.5
        assert data["review_count"] == 2
        assert data["distance_km"] is None

    def test_filter_by_location_is_case_insensitive(self, api_client, make_user, make_shop):
        make_shop(make_user("seller"), location="Ikeja, Lagos")
        make_shop(make_user("seller"), location="Wuse, Abuja")

        response = api_client.get(reverse("shop-list"), {"location": "lagos"})

        assert [shop["location"] for shop in response.data["data"]] == ["Ikeja, Lagos"]

    def test_search_matches_products_without_duplicates(self, api_client, make_user, make_shop):
        make_shop(
            make_user("seller"), shop_name="Corner Shop",
            products=[("Red Shoes", 10, "fashion"), ("Blue Shoes", 12, "fashion")],
        )
        make_shop(make_user("seller"), shop_name="Food Hub", products=[("Rice", 30, "foods")])

        response = api_client.get(reverse("shop-list"), {"search": "SHOES"})

        assert [shop["shop_name"] for shop in response.data["data"]] == ["Corner Shop"]

    def test_search_by_category(self, api_client, make_user, make_shop):
        make_shop(make_user("seller"), shop_name="Corner Shop", products=[("Rice", 30, "foods")])
        make_shop(make_user("seller"), shop_name="Gadget Hub", products=[("Charger", 5, "gadget")])

        response = api_client.get(reverse("shop-list"), {"search": "gadg"})

        assert [shop["shop_name"] for shop in response.data["data"]] == ["Gadget Hub"]

    def test_nearby_shops_are_ordered_by_distance(self, api_client, make_user, make_shop):
        make_shop(make_user("seller"), shop_name="Ikeja", latitude=IKEJA[0], longitude=IKEJA[1])
        make_shop(make_user("seller"), shop_name="Lagos Island", latitude=LAGOS[0] + 0.001, longitude=LAGOS[1])
        make_shop(make_user("seller"), shop_name="Abuja", latitude=ABUJA[0], longitude=ABUJA[1])
        make_shop(make_user("seller"), shop_name="Nowhere")

        response = api_client.get(reverse("shop-list"), {"lat": LAGOS[0], "lng": LAGOS[1]})

        assert response.status_code == 200
        names = [shop["shop_name"] for shop in response.data["data"]]
        assert names == ["Lagos Island", "Ikeja"]
        distances = [shop["distance_km"] for shop in response.data["data"]]
        assert distances[0] < distances[1] < 25

    def test_nearby_radius_can_be_widened(self, api_client, make_user, make_shop):
        make_shop(make_user("seller"), shop_name="Abuja", latitude=ABUJA[0], longitude=ABUJA[1])

        response = api_client.get(reverse("shop-list"), {"lat": LAGOS[0], "lng": LAGOS[1], "radius": 1000})

        assert [shop["shop_name"] for shop in response.data["data"]] == ["Abuja"]

    @pytest.mark.parametrize("params", [
        {"lat": 6.5},
        {"lng": 3.3},
        {"lat": "north", "lng": 3.3},
        {"lat": 91, "lng": 3.3},
        {"lat": 6.5, "lng": 3.3, "radius": 0},
    ])
    def test_bad_coordinates_are_rejected(self, api_client, params):
        response = api_client.get(reverse("shop-list"), params)

        assert response.status_code == 400
        assert response.data["status"] == "error"


class TestShopCreate:
    def test_seller_creates_shop_with_products(self, auth_client, seller):
        response = auth_client(seller).post(reverse("shop-list"), shop_payload(), format="json")

        assert response.status_code == 201
        data = response.data["data"]
        assert data["owner"] == seller.id
        assert [p["name"] for p in data["products"]] == ["Garri", "Ankara Dress"]
        assert Product.objects.filter(shop__owner=seller).count() == 2

    def test_shop_may_start_without_products(self, auth_client, seller):
        response = auth_client(seller).post(
            reverse("shop-list"), shop_payload(products=[]), format="json"
        )

        assert response.status_code == 201
        assert response.data["data"]["products"] == []

    def test_seller_owns_at_most_one_shop(self, auth_client, seller, make_shop):
        make_shop(seller)

        response = auth_client(seller).post(reverse("shop-list"), shop_payload(), format="json")

        assert response.status_code == 400
        assert response.data["message"] == "You already have a shop"

    def test_concurrent_second_shop_hits_the_constraint(self, auth_client, seller, make_shop, monkeypatch):
        make_shop(seller, products=[("Garri", 10, "foods")])
        # the other request commits its shop after this one checked
        monkeypatch.setattr(ShopListCreateView, "has_shop", lambda self, user: False)

        response = auth_client(seller).post(reverse("shop-list"), shop_payload(), format="json")

        assert response.status_code == 400
        assert response.data["message"] == "You already have a shop"
        assert Shop.objects.count() == 1
        assert Product.objects.count() == 1

    def test_buyers_cannot_create_shops(self, auth_client, buyer):
        response = auth_client(buyer).post(reverse("shop-list"), shop_payload(), format="json")

        assert response.status_code == 403
        assert not Shop.objects.exists()

    def test_anonymous_cannot_create_shops(self, api_client):
        response = api_client.post(reverse("shop-list"), shop_payload(), format="json")

        assert response.status_code == 401

    @pytest.mark.parametrize("overrides, message", [
        ({"shop_name": "A"}, "Shop name must be at least 2 characters"),
        ({"location": " "}, "Location is required"),
        ({"products": [{"name": "Garri", "price": -1, "category": "foods"}]}, "Price must be positive"),
        ({"products": [{"name": " ", "price": 3, "category": "foods"}]}, "Product name is required"),
        ({"latitude": 6.5}, "Both latitude and longitude are required"),
    ])
    def test_invalid_shop_is_rejected(self, auth_client, seller, overrides, message):
        response = auth_client(seller).post(reverse("shop-list"), shop_payload(**overrides), format="json")

        assert response.status_code == 400
        assert response.data["message"] == message
        assert not Shop.objects.exists()


class TestMyShop:
    def test_returns_own_shop(self, auth_client, seller, make_user, make_shop):
        make_shop(make_user("seller"), shop_name="Someone Else")
        shop = make_shop(seller)

        response = auth_client(seller).get(reverse("my-shop"))

        assert response.status_code == 200
        assert response.data["data"]["id"] == str(shop.id)

    def test_not_found_before_the_shop_exists(self, auth_client, seller):
        response = auth_client(seller).get(reverse("my-shop"))

        assert response.status_code == 404
        assert response.data["message"] == "Shop not found"


class TestShopDetail:
    def test_anyone_can_view_a_shop(self, api_client, seller, make_shop):
        shop = make_shop(seller)

        response = api_client.get(reverse("shop-detail", args=[shop.id]))

        assert response.status_code == 200
        assert response.data["data"]["owner_name"] == seller.name

    def test_owner_updates_details(self, auth_client, seller, make_shop):
        shop = make_shop(seller, products=[("Garri", 10, "foods")])

        response = auth_client(seller).put(
            reverse("shop-detail", args=[shop.id]),
            {"shop_name": "  New Name  ", "latitude": 6.5, "longitude": 3.3},
            format="json",
        )

        assert response.status_code == 200
        shop.refresh_from_db()
        assert shop.shop_name == "New Name"
        assert shop.location == "Lagos"
        assert shop.has_coordinates
        assert len(response.data["data"]["products"]) == 1

    def test_products_list_replaces_catalog(self, auth_client, seller, make_shop):
        shop = make_shop(seller, products=[("Garri", 10, "foods")])

        response = auth_client(seller).patch(
            reverse("shop-detail", args=[shop.id]),
            {"products": [{"name": "Rice", "price": 30, "category": "foods"}]},
            format="json",
        )

        assert response.status_code == 200
        assert [p["name"] for p in response.data["data"]["products"]] == ["Rice"]
        assert list(shop.products.values_list("name", flat=True)) == ["Rice"]

    def test_other_sellers_cannot_update(self, auth_client, seller, make_user, make_shop):
        shop = make_shop(seller)

        response = auth_client(make_user("seller")).put(
            reverse("shop-detail", args=[shop.id]), {"shop_name": "Hijacked"}, format="json"
        )

        assert response.status_code == 403
        assert response.data["message"] == "You do not own this shop"

    def test_delete_cascades(self, auth_client, seller, buyer, make_shop):
        shop = make_shop(seller, products=[("Garri", 10, "foods")])
        Review.objects.create(shop=shop, user=buyer, user_name=buyer.name, rating=3, comment="Fair prices overall")

        response = auth_client(seller).delete(reverse("shop-detail", args=[shop.id]))

        assert response.status_code == 200
        assert not Shop.objects.exists()
        assert not Product.objects.exists()
        assert not Review.objects.exists()

    def test_missing_shop(self, api_client):
        response = api_client.get(reverse("shop-detail", args=["6f1c9f52-6f0b-4a51-9a57-2d9bdfa1c000"]))

        assert response.status_code == 404


def test_haversine_known_distance():
    # Lagos to Abuja is roughly 525 km as the crow flies
    assert 500 < haversine_km(*LAGOS, *ABUJA) < 550
    assert haversine_km(*LAGOS, *LAGOS) == 0


class TestSeedCommand:
    def test_seeds_sellers_shops_and_reviews(self):
        out = StringIO()

        call_command("seed_db", sellers=2, buyers=3, seed=1, stdout=out)

        assert CustomUser.objects.filter(user_type="seller").count() == 2
        assert CustomUser.objects.filter(user_type="buyer").count() == 3
        assert Shop.objects.count() == 2
        assert Shop.objects.filter(latitude__isnull=False, longitude__isnull=False).count() == 2
        # two categories of three products per shop
        assert Product.objects.count() == 12
        assert Review.objects.count() == 6
        for buyer in CustomUser.objects.filter(user_type="buyer"):
            shop_ids = list(buyer.reviews.values_list("shop_id", flat=True))
            assert len(shop_ids) == len(set(shop_ids)) == 2
        assert "2 sellers" in out.getvalue()

    def test_reseeding_replaces_previous_data(self, make_user):
        superuser = CustomUser.objects.create_superuser(email="admin@mail.com", password="secret123", name="Admin")
        make_user("buyer")

        call_command("seed_db", sellers=1, buyers=1, seed=7, stdout=StringIO())
        call_command("seed_db", sellers=1, buyers=1, seed=7, stdout=StringIO())

        assert CustomUser.objects.filter(is_superuser=False).count() == 2
        assert CustomUser.objects.filter(id=superuser.id).exists()
        assert Shop.objects.count() == 1

    def test_seeded_users_can_log_in(self, api_client):
        call_command("seed_db", sellers=1, buyers=1, seed=3, stdout=StringIO())

        response = api_client.post(
            reverse("login"), {"email": "seller0@mail.com", "password": "TestPass123"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["data"]["user"]["user_type"] == "seller"
