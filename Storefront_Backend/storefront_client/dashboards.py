"""
Controllers for the storefront screens.

Each controller follows the same loop: validate the user's input,
make one API call, update its own state. Failures never propagate to
the caller; they are recorded as notices, the way the screens show
them to the user. Methods that would navigate return the route.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .exceptions import APIError, FormError
from .filters import filter_shops
from .forms import ProductForm, ShopDetailsForm, ShopForm, validate_form
from .models import Review, Shop, User

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"
HOME_ROUTE = "/home"
BUYER_ROUTE = "/buyer"
SELLER_ROUTE = "/seller"


class LocationUnavailable(Exception):
    """The locator could not determine the current position"""


def landing_route(user: Optional[User]) -> str:
    """Where a user lands after signing in"""
    if user is None:
        return LOGIN_ROUTE
    return SELLER_ROUTE if user.is_seller else BUYER_ROUTE


@dataclass
class Notice:
    level: str
    message: str


class BaseView:
    def __init__(self, api):
        self.api = api
        self.notices: List[Notice] = []
        self.is_loading = False

    @property
    def user(self) -> Optional[User]:
        return self.api.session.user

    @property
    def is_authenticated(self) -> bool:
        return self.api.session.is_authenticated

    @property
    def last_notice(self) -> Optional[Notice]:
        return self.notices[-1] if self.notices else None

    def notify_success(self, message):
        self.notices.append(Notice("success", message))

    def notify_error(self, message):
        logger.warning(f"{self.__class__.__name__}: {message}")
        self.notices.append(Notice("error", message))

    def notify_failure(self, error, fallback):
        """Show the backend's message when there is one"""
        if isinstance(error, (APIError, FormError)) and error.message:
            self.notify_error(error.message)
        else:
            self.notify_error(fallback)

    def logout(self) -> str:
        self.api.auth.logout()
        self.notify_success("Logged out successfully")
        return LOGIN_ROUTE


class AuthView(BaseView):
    """Signup and login screens"""

    def signup(self, data) -> Optional[str]:
        try:
            response = self.api.auth.signup(data)
        except (APIError, FormError) as e:
            self.notify_failure(e, "Signup failed. Please try again.")
            return None
        self.notify_success("Account created successfully!")
        return landing_route(response.user)

    def login(self, data) -> Optional[str]:
        try:
            response = self.api.auth.login(data)
        except (APIError, FormError) as e:
            self.notify_failure(e, "Login failed. Please try again.")
            return None
        self.notify_success("Logged in successfully!")
        return landing_route(response.user)

    def entry_route(self) -> Optional[str]:
        """Signed-in visitors skip the landing page"""
        if self.is_authenticated:
            return landing_route(self.user)
        return None

    def browse_shops(self) -> str:
        """Anyone may browse shops without an account"""
        return HOME_ROUTE


class HomeView(BaseView):
    """Public browsing: location filter, nearby shops, search and reviews"""

    def __init__(self, api):
        super().__init__(api)
        self.shops: List[Shop] = []
        self.search_query = ""
        self.location_query = ""
        self.selected_shop: Optional[Shop] = None
        self.reviews: List[Review] = []

    @property
    def filtered_shops(self) -> List[Shop]:
        return filter_shops(self.shops, self.search_query)

    def fetch_shops(self, location=None):
        if location is not None:
            self.location_query = location
        self.is_loading = True
        try:
            self.shops = self.api.shops.get_shops(location=self.location_query or None)
        except APIError as e:
            logger.debug(f"fetch_shops failed: {e}")
            self.notify_error("Failed to fetch shops")
        finally:
            self.is_loading = False
        return self.shops

    def use_my_location(self, locate: Optional[Callable[[], Tuple[float, float]]]):
        """Ask the locator for coordinates and show the shops around them"""
        if locate is None:
            self.notify_error("Geolocation is not supported on this device")
            return self.shops
        try:
            latitude, longitude = locate()
        except LocationUnavailable:
            self.notify_error("Unable to access your location")
            return self.shops
        self.notify_success("Location detected! Showing nearby shops")
        return self.fetch_nearby_shops(latitude, longitude)

    def fetch_nearby_shops(self, latitude, longitude):
        self.is_loading = True
        try:
            self.shops = self.api.shops.get_shops(latitude=latitude, longitude=longitude)
        except APIError as e:
            logger.debug(f"fetch_nearby_shops failed: {e}")
            self.notify_error("Failed to fetch nearby shops")
        finally:
            self.is_loading = False
        return self.shops

    def open_shop(self, shop: Shop) -> List[Review]:
        self.selected_shop = shop
        try:
            self.reviews = self.api.reviews.get_reviews(shop.id).reviews
        except APIError:
            self.reviews = []
        return self.reviews

    def close_shop(self):
        self.selected_shop = None
        self.reviews = []

    def submit_review(self, rating, comment) -> Optional[str]:
        """Returns the login route when the visitor must sign in first"""
        if not self.is_authenticated:
            self.notify_error("Please login to submit a review")
            return LOGIN_ROUTE
        if self.selected_shop is None:
            return None

        try:
            self.api.reviews.add_review(self.selected_shop.id, {"rating": rating, "comment": comment})
        except (APIError, FormError) as e:
            self.notify_failure(e, "Failed to submit review")
            return None

        self.notify_success("Review submitted successfully!")
        self.open_shop(self.selected_shop)
        return None


class BuyerDashboard(BaseView):
    def __init__(self, api):
        super().__init__(api)
        self.shops: List[Shop] = []

    def fetch_shops(self):
        self.is_loading = True
        try:
            self.shops = self.api.shops.get_shops()
        except APIError:
            self.notify_error("Failed to fetch shops")
        finally:
            self.is_loading = False
        return self.shops


class SellerDashboard(BaseView):
    """Opening a shop together with its first products"""

    def create_shop(self, data) -> Optional[Shop]:
        try:
            form = validate_form(ShopForm, data)
            shop = self.api.shops.create_shop(form)
        except (APIError, FormError) as e:
            self.notify_failure(e, "Failed to create shop")
            return None
        self.notify_success("Shop created successfully!")
        return shop


class ShopManagement(BaseView):
    """A seller's own shop: fetch or create it, then edit its catalog"""

    def __init__(self, api):
        super().__init__(api)
        self.shop: Optional[Shop] = None

    def fetch_my_shop(self) -> Optional[Shop]:
        self.is_loading = True
        try:
            self.shop = self.api.shops.get_my_shop()
        except APIError:
            self.notify_error("Failed to fetch shop details")
        finally:
            self.is_loading = False
        return self.shop

    def _shop_details(self, shop_name, location):
        try:
            return validate_form(ShopDetailsForm, {"shop_name": shop_name, "location": location})
        except FormError:
            self.notify_error("Please fill in all fields")
            return None

    def _product_form(self, name, price, category):
        if not (name or "").strip() or price in (None, "") or not (category or "").strip():
            self.notify_error("Please fill in all product fields")
            return None
        try:
            return validate_form(ProductForm, {"name": name, "price": price, "category": category})
        except FormError as e:
            self.notify_failure(e, "Please enter a valid price")
            return None

    def create_shop(self, shop_name, location) -> Optional[Shop]:
        details = self._shop_details(shop_name, location)
        if details is None:
            return None
        try:
            self.api.shops.create_shop(details)
        except APIError as e:
            self.notify_failure(e, "Failed to create shop")
            return None
        self.notify_success("Shop created successfully!")
        return self.fetch_my_shop()

    def update_shop(self, shop_name, location) -> Optional[Shop]:
        if self.shop is None:
            self.notify_error("Please fill in all fields")
            return None
        details = self._shop_details(shop_name, location)
        if details is None:
            return None
        try:
            self.api.shops.update_shop(self.shop.id, details.model_dump(exclude_none=True))
        except APIError as e:
            self.notify_failure(e, "Failed to update shop")
            return None
        self.notify_success("Shop updated successfully!")
        return self.fetch_my_shop()

    def add_product(self, name, price, category) -> Optional[Shop]:
        if self.shop is None:
            return None
        form = self._product_form(name, price, category)
        if form is None:
            return None
        try:
            self.api.shops.add_product(self.shop.id, form)
        except APIError as e:
            self.notify_failure(e, "Failed to add product")
            return None
        self.notify_success("Product added successfully!")
        return self.fetch_my_shop()

    def update_product(self, product_id, name, price, category) -> Optional[Shop]:
        if self.shop is None or not product_id:
            return None
        form = self._product_form(name, price, category)
        if form is None:
            return None
        try:
            self.api.shops.update_product(self.shop.id, product_id, form)
        except APIError as e:
            self.notify_failure(e, "Failed to update product")
            return None
        self.notify_success("Product updated successfully!")
        return self.fetch_my_shop()

    def delete_product(self, product_id, confirm: Callable[[str], bool] = lambda message: True) -> Optional[Shop]:
        if self.shop is None:
            return None
        if not confirm("Are you sure you want to delete this product?"):
            return self.shop
        try:
            self.api.shops.delete_product(self.shop.id, product_id)
        except APIError as e:
            self.notify_failure(e, "Failed to delete product")
            return None
        self.notify_success("Product deleted successfully!")
        return self.fetch_my_shop()
