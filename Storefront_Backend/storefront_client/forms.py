"""
Client-side validation for the storefront forms.

Each form is checked before any request is made, so the user gets the
same messages the backend would return without a round trip.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import FormError

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
PRICE_MAX_DIGITS = 10
PRICE_DECIMAL_PLACES = 2
MIN_REVIEW_LENGTH = 10

FormT = TypeVar("FormT", bound=BaseModel)


def _required_text(value, message, min_length=1):
    if not isinstance(value, str) or len(value.strip()) < min_length:
        raise ValueError(message)
    return value.strip()


def _valid_email(value):
    value = _required_text(value, "Invalid email address")
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value.lower()


class SignupForm(BaseModel):
    name: str
    email: str
    password: str
    user_type: Literal["buyer", "seller"]

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value):
        return _required_text(value, "Name must be at least 2 characters", min_length=2)

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value):
        return _valid_email(value)

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value):
        if not isinstance(value, str) or len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError("Password must be at least 6 characters")
        return value

    @field_validator("user_type", mode="before")
    @classmethod
    def check_user_type(cls, value):
        if value not in ("buyer", "seller"):
            raise ValueError("Please select a role")
        return value


class LoginForm(BaseModel):
    email: str
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value):
        return _valid_email(value)

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value):
        if not value:
            raise ValueError("Password is required")
        return value


class ProductForm(BaseModel):
    name: str
    price: float
    category: str

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value):
        return _required_text(value, "Product name is required")

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, value):
        # prices arrive from text inputs as often as from numbers
        try:
            price = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise ValueError("Please enter a valid price")
        if not price.is_finite():
            raise ValueError("Please enter a valid price")
        if price <= 0:
            raise ValueError("Price must be positive")
        if price.as_tuple().exponent < -PRICE_DECIMAL_PLACES:
            raise ValueError(
                f"Ensure that there are no more than {PRICE_DECIMAL_PLACES} decimal places."
            )
        if price.adjusted() + 1 > PRICE_MAX_DIGITS - PRICE_DECIMAL_PLACES:
            raise ValueError(
                f"Ensure that there are no more than "
                f"{PRICE_MAX_DIGITS - PRICE_DECIMAL_PLACES} digits before the decimal point."
            )
        return float(price)

    @field_validator("category", mode="before")
    @classmethod
    def check_category(cls, value):
        return _required_text(value, "Category is required")


class ShopDetailsForm(BaseModel):
    """Name and location of a shop, as edited on the management page"""
    shop_name: str
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("shop_name", mode="before")
    @classmethod
    def check_shop_name(cls, value):
        return _required_text(value, "Shop name must be at least 2 characters", min_length=2)

    @field_validator("location", mode="before")
    @classmethod
    def check_location(cls, value):
        return _required_text(value, "Location is required", min_length=2)


class ShopForm(ShopDetailsForm):
    """A new shop opened from the seller dashboard, with its first products"""
    products: List[ProductForm] = Field(default_factory=list, validate_default=True)

    @field_validator("products")
    @classmethod
    def check_products(cls, value):
        if not value:
            raise ValueError("At least one product is required")
        return value


class ReviewForm(BaseModel):
    rating: int
    comment: str

    @field_validator("rating", mode="before")
    @classmethod
    def check_rating(cls, value):
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
            raise ValueError("Rating must be between 1 and 5")
        return value

    @field_validator("comment", mode="before")
    @classmethod
    def check_comment(cls, value):
        return _required_text(
            value, "Review must be at least 10 characters long", min_length=MIN_REVIEW_LENGTH
        )


def _error_message(error):
    context = error.get("ctx") or {}
    if "error" in context:
        return str(context["error"])
    return error["msg"]


def validate_form(form_class: Type[FormT], data: Dict[str, Any]) -> FormT:
    """Build form_class from data, raising FormError with per-field messages"""
    try:
        return form_class(**data)
    except ValidationError as exc:
        errors = {}
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "__all__"
            errors.setdefault(field, _error_message(error))
        raise FormError(errors) from exc
