import logging
import os

import requests

from .exceptions import APIError
from .forms import (
    LoginForm, ProductForm, ReviewForm, ShopDetailsForm, SignupForm,
    validate_form,
)
from .models import AuthResponse, Product, Review, ReviewSummary, Shop, User
from .session import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8000/api/v1"
AUTH_TOKEN_HEADER = "x-auth-token"
DEFAULT_TIMEOUT = (5, 15)  # 5s connect, 15s read


def _as_form(form_class, data):
    if isinstance(data, form_class):
        return data
    return validate_form(form_class, data)


class StorefrontAPI:
    """
    HTTP client for the storefront backend.

    Every request carries the session token in the x-auth-token header.
    Responses are unwrapped from the {status, message, data} envelope;
    any non-2xx answer raises APIError with the backend's message.
    """
    def __init__(self, base_url=None, session_store=None, http=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = (base_url or os.getenv("STOREFRONT_API_URL", DEFAULT_API_URL)).rstrip("/")
        self.session = session_store if session_store is not None else SessionStore()
        self.http = http or requests.Session()
        self.timeout = timeout

        self.auth = AuthAPI(self)
        self.shops = ShopAPI(self)
        self.reviews = ReviewAPI(self)


    def _headers(self):
        headers = {"Content-Type": "application/json"}
        if self.session.token:
            headers[AUTH_TOKEN_HEADER] = self.session.token
        return headers
    

    def request(self, method, path, params=None, json=None):
        """Send one request and return the unwrapped data"""
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            res = self.http.request(
                method, url, params=params, json=json,
                headers=self._headers(), timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            logger.error(f"{method} {url} timed out")
            raise APIError(None, "The server took too long to respond")
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise APIError(None, "Could not reach the server")

        try:
            body = res.json() if res.content else {}
        except ValueError:
            body = {}

        if not res.ok:
            message = body.get("message") or res.reason or "Request failed"
            logger.info(f"{method} {url} returned {res.status_code}: {message}")
            raise APIError(res.status_code, message, body.get("errors"))
        return body.get("data")
    

    def get(self, path, params=None):
        return self.request("GET", path, params=params)

    def post(self, path, json=None):
        return self.request("POST", path, json=json)

    def put(self, path, json=None):
        return self.request("PUT", path, json=json)

    def delete(self, path):
        return self.request("DELETE", path)


class AuthAPI:
    """Signup and login; a successful call signs the session in"""
    def __init__(self, client):
        self.client = client

    def _sign_in(self, data) -> AuthResponse:
        token = data["token"]
        user = self.client.session.login(token)
        return AuthResponse(token=token, user=user)

    def signup(self, data) -> AuthResponse:
        form = _as_form(SignupForm, data)
        return self._sign_in(self.client.post("auth/signup/", json=form.model_dump()))

    def login(self, data) -> AuthResponse:
        form = _as_form(LoginForm, data)
        return self._sign_in(self.client.post("auth/login/", json=form.model_dump()))

    def me(self) -> User:
        return User(**self.client.get("auth/me/"))

    def logout(self):
        self.client.session.logout()


class ShopAPI:
    def __init__(self, client):
        self.client = client

    def get_shops(self, location=None, latitude=None, longitude=None, search=None, radius=None):
        """Browse shops by location text, search text, or proximity to a point"""
        params = {}
        if location:
            params["location"] = location
        if search:
            params["search"] = search
        if latitude is not None and longitude is not None:
            params["lat"] = latitude
            params["lng"] = longitude
            if radius is not None:
                params["radius"] = radius
        return [Shop(**shop) for shop in self.client.get("shop/", params=params)]

    def get_shop(self, shop_id) -> Shop:
        return Shop(**self.client.get(f"shop/{shop_id}/"))

    def create_shop(self, data) -> Shop:
        """data may carry an initial products list"""
        form = _as_form(ShopDetailsForm, data)
        payload = form.model_dump(exclude_none=True)
        products = data.get("products", []) if isinstance(data, dict) else getattr(data, "products", [])
        payload["products"] = [_as_form(ProductForm, product).model_dump() for product in products]
        return Shop(**self.client.post("shop/", json=payload))

    def update_shop(self, shop_id, data) -> Shop:
        """Partial update; pass products to replace the whole catalog"""
        payload = dict(data)
        if "products" in payload:
            payload["products"] = [
                _as_form(ProductForm, product).model_dump() for product in payload["products"]
            ]
        return Shop(**self.client.put(f"shop/{shop_id}/", json=payload))

    def delete_shop(self, shop_id):
        return self.client.delete(f"shop/{shop_id}/")

    def get_my_shop(self):
        """The seller's own shop, or None if they have not opened one yet"""
        try:
            return Shop(**self.client.get("shop/my-shop/"))
        except APIError as e:
            if e.is_not_found:
                return None
            raise

    def add_product(self, shop_id, product) -> Product:
        form = _as_form(ProductForm, product)
        return Product(**self.client.post(f"shop/{shop_id}/products/", json=form.model_dump()))

    def update_product(self, shop_id, product_id, product) -> Product:
        form = _as_form(ProductForm, product)
        return Product(**self.client.put(f"shop/{shop_id}/products/{product_id}/", json=form.model_dump()))

    def delete_product(self, shop_id, product_id):
        return self.client.delete(f"shop/{shop_id}/products/{product_id}/")


class ReviewAPI:
    def __init__(self, client):
        self.client = client

    def get_reviews(self, shop_id) -> ReviewSummary:
        return ReviewSummary(**self.client.get(f"reviews/shop/{shop_id}/"))

    def add_review(self, shop_id, data) -> Review:
        """The reviewer is whoever the session belongs to"""
        form = _as_form(ReviewForm, data)
        payload = {"shop_id": str(shop_id), **form.model_dump()}
        return Review(**self.client.post("reviews/", json=payload))

    def delete_review(self, review_id):
        return self.client.delete(f"reviews/{review_id}/")
