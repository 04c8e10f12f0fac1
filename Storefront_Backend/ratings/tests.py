import pytest
from datetime import timedelta
from django.urls import reverse
from django.utils import timezone
from ratings.models import Review
from ratings.views import ReviewCreateView

pytestmark = pytest.mark.django_db


@pytest.fixture
def shop(seller, make_shop):
    return make_shop(seller)


@pytest.fixture
def make_review(shop):
    def _make_review(user, rating=4, comment="Great service and fair prices", **kwargs):
        return Review.objects.create(
            shop=kwargs.pop("target", shop), user=user, user_name=user.name,
            rating=rating, comment=comment, **kwargs
        )

    return _make_review


def review_payload(shop, **overrides):
    payload = {"shop_id": str(shop.id), "rating": 5, "comment": "  Friendly seller, quick delivery  "}
    payload.update(overrides)
    return payload


class TestAddReview:
    def test_buyer_reviews_a_shop(self, auth_client, buyer, shop):
        response = auth_client(buyer).post(reverse("add-review"), review_payload(shop), format="json")

        assert response.status_code == 201
        data = response.data["data"]
        assert data["shop_id"] == str(shop.id)
        assert data["user_id"] == str(buyer.id)
        assert data["user_name"] == buyer.name
        assert data["comment"] == "Friendly seller, quick delivery"
        assert data["time_since_review"] == "Just now"

    def test_reviewer_identity_comes_from_the_token(self, auth_client, buyer, make_user, shop):
        someone_else = make_user("buyer")

        auth_client(buyer).post(
            reverse("add-review"),
            review_payload(shop, user_id=str(someone_else.id), user_name="Impostor"),
            format="json",
        )

        review = Review.objects.get()
        assert review.user == buyer
        assert review.user_name == buyer.name

    def test_other_sellers_may_review(self, auth_client, make_user, shop):
        response = auth_client(make_user("seller")).post(
            reverse("add-review"), review_payload(shop), format="json"
        )

        assert response.status_code == 201

    def test_anonymous_cannot_review(self, api_client, shop):
        response = api_client.post(reverse("add-review"), review_payload(shop), format="json")

        assert response.status_code == 401
        assert not Review.objects.exists()

    @pytest.mark.parametrize("overrides, message", [
        ({"rating": 0}, "Rating must be between 1 and 5"),
        ({"rating": 6}, "Rating must be between 1 and 5"),
        ({"comment": "   Too short   "}, "Review must be at least 10 characters long"),
        ({"comment": ""}, "Review must be at least 10 characters long"),
        ({"shop_id": "6f1c9f52-6f0b-4a51-9a57-2d9bdfa1c000"}, "Shop not found"),
    ])
    def test_invalid_review_is_rejected(self, auth_client, buyer, shop, overrides, message):
        response = auth_client(buyer).post(
            reverse("add-review"), review_payload(shop, **overrides), format="json"
        )

        assert response.status_code == 400
        assert response.data["message"] == message
        assert not Review.objects.exists()

    def test_owner_cannot_review_own_shop(self, auth_client, seller, shop):
        response = auth_client(seller).post(reverse("add-review"), review_payload(shop), format="json")

        assert response.status_code == 403
        assert response.data["message"] == "You cannot review your own shop"

    def test_one_review_per_shop(self, auth_client, buyer, shop, make_review):
        make_review(buyer)

        response = auth_client(buyer).post(reverse("add-review"), review_payload(shop), format="json")

        assert response.status_code == 400
        assert response.data["message"] == "You have already reviewed this shop"
        assert Review.objects.count() == 1

    def test_concurrent_duplicate_hits_the_constraint(self, auth_client, buyer, shop, make_review, monkeypatch):
        make_review(buyer)
        # the other request saved its review after this one checked
        monkeypatch.setattr(ReviewCreateView, "has_reviewed", lambda self, user, shop: False)

        response = auth_client(buyer).post(reverse("add-review"), review_payload(shop), format="json")

        assert response.status_code == 400
        assert response.data["message"] == "You have already reviewed this shop"
        assert Review.objects.count() == 1


class TestShopReviews:
    def test_lists_newest_first_with_summary(self, api_client, make_user, shop, make_review):
        older = make_review(make_user("buyer"), rating=5, created_at=timezone.now() - timedelta(days=3))
        newer = make_review(make_user("buyer"), rating=4)
        make_review(make_user("buyer"), rating=4, created_at=timezone.now() - timedelta(days=400))

        response = api_client.get(reverse("shop-reviews", kwargs={"shop_id": shop.id}))

        assert response.status_code == 200
        data = response.data["data"]
        assert [r["id"] for r in data["reviews"][:2]] == [str(newer.id), str(older.id)]
        assert data["average_rating"] == 4.3
        assert data["review_count"] == 3
        assert data["reviews"][1]["time_since_review"] == "3 days ago"
        assert data["reviews"][2]["time_since_review"] == "1 year ago"

    def test_empty_shop(self, api_client, shop):
        response = api_client.get(reverse("shop-reviews", kwargs={"shop_id": shop.id}))

        assert response.data["data"] == {"reviews": [], "average_rating": 0.0, "review_count": 0}

    def test_unknown_shop(self, api_client):
        response = api_client.get(
            reverse("shop-reviews", kwargs={"shop_id": "6f1c9f52-6f0b-4a51-9a57-2d9bdfa1c000"})
        )

        assert response.status_code == 404


class TestReviewDetail:
    def test_anyone_can_view(self, api_client, buyer, make_review):
        review = make_review(buyer)

        response = api_client.get(reverse("review-detail", kwargs={"review_id": review.id}))

        assert response.status_code == 200
        assert response.data["data"]["rating"] == 4

    def test_author_deletes(self, auth_client, buyer, make_review):
        review = make_review(buyer)

        response = auth_client(buyer).delete(reverse("review-detail", kwargs={"review_id": review.id}))

        assert response.status_code == 200
        assert not Review.objects.exists()

    def test_staff_deletes(self, auth_client, buyer, make_user, make_review):
        review = make_review(buyer)
        moderator = make_user("buyer", is_staff=True)

        response = auth_client(moderator).delete(reverse("review-detail", kwargs={"review_id": review.id}))

        assert response.status_code == 200

    def test_others_cannot_delete(self, auth_client, buyer, seller, make_review):
        review = make_review(buyer)

        response = auth_client(seller).delete(reverse("review-detail", kwargs={"review_id": review.id}))

        assert response.status_code == 403
        assert Review.objects.filter(id=review.id).exists()
