"""
Records returned by the storefront API.

These mirror the JSON the backend serializes; unknown keys are
ignored so the client keeps working when the API grows new fields.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class User(Record):
    id: str
    name: str
    email: str
    user_type: Literal["buyer", "seller"]

    @property
    def is_seller(self) -> bool:
        return self.user_type == "seller"


class Product(Record):
    id: Optional[str] = None
    name: str
    price: float
    category: str


class Shop(Record):
    id: str
    owner: str
    owner_name: Optional[str] = None
    shop_name: str
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    products: List[Product] = []
    average_rating: float = 0.0
    review_count: int = 0
    distance_km: Optional[float] = None


class Review(Record):
    id: str
    shop_id: str
    user_id: str
    user_name: str
    rating: int
    comment: str
    created_at: Optional[str] = None
    time_since_review: Optional[str] = None


class ReviewSummary(Record):
    reviews: List[Review] = []
    average_rating: float = 0.0
    review_count: int = 0


class AuthResponse(Record):
    token: str
    user: User
