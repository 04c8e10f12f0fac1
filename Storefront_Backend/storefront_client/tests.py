import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest
import requests
from rest_framework.test import RequestsClient

from storefront_client import APIError, FormError, SessionStore, StorefrontAPI, filter_shops
from storefront_client.dashboards import (
    AuthView, BuyerDashboard, HomeView, LocationUnavailable, SellerDashboard,
    ShopManagement, landing_route,
)
from storefront_client.forms import ProductForm, ReviewForm, ShopForm, SignupForm, validate_form
from storefront_client.models import Product, Shop, User
from storefront_client.session import decode_user

BASE_URL = "http://testserver/api/v1"
PASSWORD = "secret123"
SIGNING_KEY = "storefront-client-tests-signing-key"


def make_token(user_type="buyer", expires_in=timedelta(hours=1), **claims):
    now = datetime.now(timezone.utc)
    user = {"id": "7d3c1c0e-3f0e-4a34-9a4a-8d1f0a0b0c01", "name": "Ada", "email": "ada@mail.com", "user_type": user_type}
    user.update(claims)
    return jwt.encode({"user": user, "iat": now, "exp": now + expires_in}, SIGNING_KEY, algorithm="HS256")


@pytest.fixture
def session_path(tmp_path):
    return tmp_path / "session.json"


@pytest.fixture
def api(session_path):
    return StorefrontAPI(BASE_URL, SessionStore(session_path), http=RequestsClient())


def sign_in(api, user):
    return api.auth.login({"email": user.email, "password": PASSWORD})


def shop_record(shop_name, location, products=()):
    return Shop(
        id=shop_name, owner="owner", shop_name=shop_name, location=location,
        products=[Product(name=name, price=1, category=category) for name, category in products],
    )


class TestForms:
    def test_signup_form_normalises_input(self):
        form = validate_form(SignupForm, {
            "name": " Ada ", "email": " Ada@Mail.com ", "password": "secret", "user_type": "seller"
        })

        assert form.name == "Ada"
        assert form.email == "ada@mail.com"

    @pytest.mark.parametrize("field, value, message", [
        ("name", "A", "Name must be at least 2 characters"),
        ("email", "ada.mail.com", "Invalid email address"),
        ("password", "12345", "Password must be at least 6 characters"),
        ("user_type", "admin", "Please select a role"),
    ])
    def test_signup_form_messages(self, field, value, message):
        data = {"name": "Ada", "email": "ada@mail.com", "password": "secret", "user_type": "buyer"}
        data[field] = value

        with pytest.raises(FormError) as exc_info:
            validate_form(SignupForm, data)

        assert exc_info.value.errors == {field: message}
        assert exc_info.value.message == message

    @pytest.mark.parametrize("price, message", [
        ("abc", "Please enter a valid price"),
        (None, "Please enter a valid price"),
        ("0", "Price must be positive"),
        (-3, "Price must be positive"),
        ("NaN", "Please enter a valid price"),
        ("19.999", "Ensure that there are no more than 2 decimal places."),
        ("123456789", "Ensure that there are no more than 8 digits before the decimal point."),
    ])
    def test_product_form_rejects_bad_prices(self, price, message):
        with pytest.raises(FormError) as exc_info:
            validate_form(ProductForm, {"name": "Rice", "price": price, "category": "foods"})

        assert exc_info.value.errors["price"] == message

    @pytest.mark.parametrize("price, expected", [
        ("12.5", 12.5),
        (" 7 ", 7.0),
        (19.99, 19.99),
        ("99999999.99", 99999999.99),
    ])
    def test_product_form_accepts_prices_the_backend_accepts(self, price, expected):
        assert validate_form(ProductForm, {"name": "Rice", "price": price, "category": "foods"}).price == expected

    def test_shop_form_needs_a_product(self):
        with pytest.raises(FormError) as exc_info:
            validate_form(ShopForm, {"shop_name": "Corner", "location": "Lagos"})

        assert exc_info.value.errors == {"products": "At least one product is required"}

    def test_shop_form_reports_nested_product_errors(self):
        with pytest.raises(FormError) as exc_info:
            validate_form(ShopForm, {
                "shop_name": "Corner", "location": "Lagos",
                "products": [{"name": "Rice", "price": 3, "category": ""}],
            })

        assert exc_info.value.errors == {"products.0.category": "Category is required"}

    @pytest.mark.parametrize("data, field", [
        ({"rating": 0, "comment": "Lovely place to shop"}, "rating"),
        ({"rating": True, "comment": "Lovely place to shop"}, "rating"),
        ({"rating": 4, "comment": "  Nice     "}, "comment"),
    ])
    def test_review_form(self, data, field):
        with pytest.raises(FormError) as exc_info:
            validate_form(ReviewForm, data)

        assert list(exc_info.value.errors) == [field]


class TestFilterShops:
    shops = [
        shop_record("Corner Shop", "Ikeja, Lagos", [("Red Shoes", "fashion")]),
        shop_record("Food Hub", "Wuse, Abuja", [("Rice", "foods")]),
    ]

    @pytest.mark.parametrize("query, expected", [
        ("", ["Corner Shop", "Food Hub"]),
        ("   ", ["Corner Shop", "Food Hub"]),
        ("hub", ["Food Hub"]),
        ("LAGOS", ["Corner Shop"]),
        ("shoe", ["Corner Shop"]),
        ("FOODS", ["Food Hub"]),
        ("gadget", []),
    ])
    def test_matches_name_location_and_products(self, query, expected):
        assert [shop.shop_name for shop in filter_shops(self.shops, query)] == expected


class TestSessionStore:
    def test_login_persists_and_reloads(self, session_path):
        store = SessionStore(session_path)
        user = store.login(make_token("seller"))

        assert user.is_seller
        assert json.loads(session_path.read_text())["token"] == store.token

        restored = SessionStore(session_path)
        assert restored.is_authenticated
        assert restored.user == user

    def test_expired_session_is_dropped(self, session_path):
        session_path.write_text(json.dumps({"token": make_token(expires_in=timedelta(minutes=-5))}))

        store = SessionStore(session_path)

        assert not store.is_authenticated
        assert not session_path.exists()

    def test_unreadable_session_is_ignored(self, session_path):
        session_path.write_text("{not json")

        assert not SessionStore(session_path).is_authenticated

    def test_token_without_user_is_discarded(self, session_path):
        token = jwt.encode({"sub": "someone"}, SIGNING_KEY, algorithm="HS256")
        session_path.write_text(json.dumps({"token": token}))

        store = SessionStore(session_path)

        assert store.token is None
        assert not session_path.exists()

    def test_logout_clears_memory_and_file(self, session_path):
        store = SessionStore(session_path)
        store.login(make_token())

        store.logout()

        assert store.user is None
        assert not session_path.exists()

    def test_in_memory_session(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STOREFRONT_SESSION_FILE", str(tmp_path / "unused.json"))
        store = SessionStore(persist=False)
        store.login(make_token())

        assert store.path is None
        assert store.is_authenticated
        assert not (tmp_path / "unused.json").exists()

    def test_decode_user_reads_claims(self):
        assert decode_user(make_token(name="Grace")).name == "Grace"


class TestLandingRoute:
    def test_routes(self):
        seller = User(id="1", name="S", email="s@mail.com", user_type="seller")
        buyer = User(id="2", name="B", email="b@mail.com", user_type="buyer")

        assert landing_route(None) == "/login"
        assert landing_route(seller) == "/seller"
        assert landing_route(buyer) == "/buyer"


class UnreachableHTTP:
    def __init__(self, error):
        self.error = error

    def request(self, *args, **kwargs):
        raise self.error


class TestTransportErrors:
    @pytest.mark.parametrize("error, message", [
        (requests.exceptions.ConnectTimeout(), "The server took too long to respond"),
        (requests.exceptions.ConnectionError(), "Could not reach the server"),
    ])
    def test_transport_failures_become_api_errors(self, session_path, error, message):
        api = StorefrontAPI(BASE_URL, SessionStore(session_path), http=UnreachableHTTP(error))

        with pytest.raises(APIError) as exc_info:
            api.shops.get_shops()

        assert exc_info.value.status_code is None
        assert exc_info.value.message == message

    def test_home_view_turns_failures_into_notices(self, session_path):
        api = StorefrontAPI(BASE_URL, SessionStore(session_path), http=UnreachableHTTP(requests.exceptions.ConnectionError()))
        view = HomeView(api)

        assert view.fetch_shops("Lagos") == []
        assert view.last_notice.message == "Failed to fetch shops"
        assert not view.is_loading


@pytest.mark.django_db
class TestAuthFlow:
    def test_signup_signs_in_and_persists(self, api, session_path):
        response = api.auth.signup({
            "name": "Ada", "email": "Ada@Mail.com", "password": PASSWORD, "user_type": "seller"
        })

        assert response.user.email == "ada@mail.com"
        assert api.session.is_authenticated
        assert session_path.exists()
        assert api.auth.me() == response.user

    def test_duplicate_signup_shows_backend_message(self, api, buyer):
        view = AuthView(api)

        route = view.signup({"name": "Ada", "email": buyer.email, "password": PASSWORD, "user_type": "buyer"})

        assert route is None
        assert view.last_notice.message == "User with this email already exists"

    def test_bad_credentials(self, api, buyer):
        with pytest.raises(APIError) as exc_info:
            api.auth.login({"email": buyer.email, "password": "wrong-password"})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid email or password"
        assert not api.session.is_authenticated

    def test_visitors_can_browse_without_an_account(self, api):
        view = AuthView(api)

        assert view.entry_route() is None
        assert view.browse_shops() == "/home"

    def test_login_routes_by_role(self, api, seller):
        view = AuthView(api)

        assert view.entry_route() is None
        assert view.login({"email": seller.email, "password": PASSWORD}) == "/seller"
        assert view.entry_route() == "/seller"

    def test_form_errors_never_reach_the_server(self, api):
        view = AuthView(api)

        assert view.login({"email": "not-an-email", "password": PASSWORD}) is None
        assert view.last_notice.message == "Invalid email address"

    def test_logout(self, api, buyer, session_path):
        sign_in(api, buyer)
        view = BuyerDashboard(api)

        assert view.logout() == "/login"
        assert not api.session.is_authenticated
        assert not session_path.exists()


@pytest.mark.django_db
class TestShopManagementFlow:
    def test_seller_builds_a_catalog(self, api, seller):
        sign_in(api, seller)
        view = ShopManagement(api)

        assert view.fetch_my_shop() is None
        assert view.notices == []

        shop = view.create_shop("Corner Shop", "Yaba, Lagos")
        assert shop.shop_name == "Corner Shop"
        assert shop.products == []

        shop = view.add_product("Rice", "30", "foods")
        [product] = shop.products
        assert product.price == 30

        shop = view.update_product(product.id, "Brown Rice", 32.5, "foods")
        assert [(p.name, p.price) for p in shop.products] == [("Brown Rice", 32.5)]

        shop = view.update_shop("Corner Store", "Yaba, Lagos")
        assert shop.shop_name == "Corner Store"

        assert view.delete_product(product.id, confirm=lambda message: False).products
        assert view.delete_product(product.id).products == []
        assert view.last_notice.message == "Product deleted successfully!"

    def test_incomplete_inputs_are_reported(self, api, seller):
        sign_in(api, seller)
        view = ShopManagement(api)

        assert view.create_shop("", "Lagos") is None
        assert view.last_notice.message == "Please fill in all fields"

        view.create_shop("Corner Shop", "Lagos")
        assert view.add_product("Rice", "", "foods") is None
        assert view.last_notice.message == "Please fill in all product fields"
        assert view.add_product("Rice", "free", "foods") is None
        assert view.last_notice.message == "Please enter a valid price"
        assert view.add_product("Rice", "19.999", "foods") is None
        assert view.last_notice.message == "Ensure that there are no more than 2 decimal places."
        assert view.shop.products == []
        assert api.shops.get_my_shop().products == []

    def test_update_shop_replaces_catalog(self, api, seller):
        sign_in(api, seller)
        shop = api.shops.create_shop({
            "shop_name": "Corner Shop", "location": "Lagos",
            "products": [{"name": "Rice", "price": "30", "category": "foods"}],
        })

        updated = api.shops.update_shop(shop.id, {
            "location": "Ikeja, Lagos",
            "products": [
                {"name": " Beans ", "price": "12.50", "category": "foods"},
                {"name": "Sandals", "price": 20, "category": "fashion"},
            ],
        })

        assert updated.location == "Ikeja, Lagos"
        assert [(p.name, p.price) for p in updated.products] == [("Beans", 12.5), ("Sandals", 20.0)]

    def test_update_shop_validates_products_locally(self, api, seller):
        sign_in(api, seller)
        shop = api.shops.create_shop({"shop_name": "Corner Shop", "location": "Lagos"})

        with pytest.raises(FormError) as exc_info:
            api.shops.update_shop(shop.id, {"products": [{"name": "Rice", "price": "0", "category": "foods"}]})

        assert exc_info.value.message == "Price must be positive"

    def test_delete_shop(self, api, seller):
        sign_in(api, seller)
        shop = api.shops.create_shop({"shop_name": "Corner Shop", "location": "Lagos"})

        assert api.shops.delete_shop(shop.id) is None
        assert api.shops.get_my_shop() is None
        with pytest.raises(APIError) as exc_info:
            api.shops.get_shop(shop.id)
        assert exc_info.value.is_not_found

    def test_other_seller_cannot_delete_shop(self, api, seller, make_user, make_shop):
        shop = make_shop(make_user("seller"))
        sign_in(api, seller)

        with pytest.raises(APIError) as exc_info:
            api.shops.delete_shop(shop.id)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "You do not own this shop"

    def test_buyer_cannot_open_a_shop(self, api, buyer):
        sign_in(api, buyer)
        view = ShopManagement(api)

        assert view.create_shop("Corner Shop", "Lagos") is None
        assert view.last_notice.message == "Only sellers can manage shops"

    def test_seller_dashboard_requires_products(self, api, seller):
        sign_in(api, seller)
        view = SellerDashboard(api)

        assert view.create_shop({"shop_name": "Corner Shop", "location": "Lagos"}) is None
        assert view.last_notice.message == "At least one product is required"

        shop = view.create_shop({
            "shop_name": "Corner Shop", "location": "Lagos",
            "products": [{"name": "Rice", "price": "30", "category": "foods"}],
        })
        assert [p.name for p in shop.products] == ["Rice"]
        assert api.shops.get_my_shop().id == shop.id

    def test_unknown_shop_is_not_found(self, api):
        with pytest.raises(APIError) as exc_info:
            api.shops.get_shop("6f1c9f52-6f0b-4a51-9a57-2d9bdfa1c000")

        assert exc_info.value.is_not_found


@pytest.mark.django_db
class TestBrowsingFlow:
    @pytest.fixture
    def shops(self, make_user, make_shop):
        return [
            make_shop(
                make_user("seller"), shop_name="Corner Shop", location="Ikeja, Lagos",
                latitude=6.6018, longitude=3.3515, products=[("Red Shoes", 10, "fashion")],
            ),
            make_shop(
                make_user("seller"), shop_name="Food Hub", location="Wuse, Abuja",
                latitude=9.0765, longitude=7.3986, products=[("Rice", 30, "foods")],
            ),
        ]

    def test_browse_filter_and_search(self, api, shops):
        view = HomeView(api)

        assert len(view.fetch_shops()) == 2
        view.search_query = "shoes"
        assert [shop.shop_name for shop in view.filtered_shops] == ["Corner Shop"]

        assert [shop.shop_name for shop in view.fetch_shops("abuja")] == ["Food Hub"]
        assert [shop.shop_name for shop in api.shops.get_shops(search="rice")] == ["Food Hub"]

    def test_nearby_shops(self, api, shops):
        view = HomeView(api)

        nearby = view.use_my_location(lambda: (6.5244, 3.3792))

        assert [shop.shop_name for shop in nearby] == ["Corner Shop"]
        assert nearby[0].distance_km < 25
        assert view.last_notice.message == "Location detected! Showing nearby shops"

    def test_location_failures(self, api, shops):
        view = HomeView(api)

        def denied():
            raise LocationUnavailable()

        view.use_my_location(None)
        assert view.last_notice.message == "Geolocation is not supported on this device"
        view.use_my_location(denied)
        assert view.last_notice.message == "Unable to access your location"

    def test_review_requires_login(self, api, shops):
        view = HomeView(api)
        view.open_shop(view.fetch_shops()[0])

        assert view.submit_review(5, "Great shop, will return") == "/login"
        assert view.last_notice.message == "Please login to submit a review"

    def test_buyer_reviews_a_shop(self, api, buyer, shops):
        sign_in(api, buyer)
        view = HomeView(api)
        shop = view.fetch_shops()[0]
        assert view.open_shop(shop) == []

        assert view.submit_review(4, "Short") is None
        assert view.last_notice.message == "Review must be at least 10 characters long"

        view.submit_review(4, "Great shop, will return")
        assert [review.user_name for review in view.reviews] == [buyer.name]

        view.submit_review(5, "Changed my mind, it is perfect")
        assert view.last_notice.message == "You have already reviewed this shop"

        summary = api.reviews.get_reviews(shop.id)
        assert summary.average_rating == 4.0
        api.reviews.delete_review(summary.reviews[0].id)
        assert api.reviews.get_reviews(shop.id).review_count == 0

        view.close_shop()
        assert view.selected_shop is None

    def test_buyer_dashboard(self, api, buyer, shops):
        sign_in(api, buyer)

        assert len(BuyerDashboard(api).fetch_shops()) == 2
