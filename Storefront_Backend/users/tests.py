from datetime import timedelta
import jwt
import pytest
from django.conf import settings
from django.urls import reverse
from django.utils import timezone
from users.models import CustomUser
from users.utils import decode_token, generate_token_for_user

pytestmark = pytest.mark.django_db


def signup_payload(**overrides):
    payload = {
        "name": "Ada Obi",
        "email": "ada@mail.com",
        "password": "secret123",
        "user_type": "seller",
    }
    payload.update(overrides)
    return payload


class TestSignup:
    def test_signup_returns_token_carrying_the_user(self, api_client):
        response = api_client.post(reverse("signup"), signup_payload(), format="json")

        assert response.status_code == 201
        data = response.data["data"]
        assert data["user"]["email"] == "ada@mail.com"
        assert data["user"]["user_type"] == "seller"

        claims = decode_token(data["token"])["user"]
        assert claims == data["user"]
        assert CustomUser.objects.get(email="ada@mail.com").check_password("secret123")

    def test_email_is_stored_lowercase_and_unique(self, api_client):
        api_client.post(reverse("signup"), signup_payload(email="Ada@Mail.com"), format="json")
        response = api_client.post(reverse("signup"), signup_payload(email="ada@mail.com"), format="json")

        assert response.status_code == 400
        assert response.data["status"] == "error"
        assert response.data["message"] == "User with this email already exists"
        assert CustomUser.objects.filter(email="ada@mail.com").count() == 1

    @pytest.mark.parametrize("field, value, message", [
        ("name", "A", "Name must be at least 2 characters"),
        ("email", "not-an-email", "Invalid email address"),
        ("password", "12345", "Password must be at least 6 characters"),
        ("user_type", "admin", "Please select a role"),
    ])
    def test_invalid_fields_are_rejected(self, api_client, field, value, message):
        response = api_client.post(reverse("signup"), signup_payload(**{field: value}), format="json")

        assert response.status_code == 400
        assert response.data["message"] == message
        assert field in response.data["errors"]


class TestLogin:
    def test_login_with_valid_credentials(self, api_client, make_user):
        user = make_user("buyer", email="buyer@mail.com")

        response = api_client.post(
            reverse("login"), {"email": "BUYER@mail.com", "password": "secret123"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["data"]["user"]["id"] == str(user.id)
        user.refresh_from_db()
        assert user.last_login is not None

    @pytest.mark.parametrize("email, password", [
        ("buyer@mail.com", "wrong-password"),
        ("nobody@mail.com", "secret123"),
    ])
    def test_bad_credentials_share_one_message(self, api_client, make_user, email, password):
        make_user("buyer", email="buyer@mail.com")

        response = api_client.post(reverse("login"), {"email": email, "password": password}, format="json")

        assert response.status_code == 400
        assert response.data["message"] == "Invalid email or password"


class TestTokenAuthentication:
    def test_me_accepts_x_auth_token(self, auth_client, buyer):
        response = auth_client(buyer).get(reverse("current-user"))

        assert response.status_code == 200
        assert response.data["data"]["email"] == buyer.email

    def test_me_accepts_bearer_token(self, api_client, buyer):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {generate_token_for_user(buyer)}")

        response = api_client.get(reverse("current-user"))

        assert response.status_code == 200

    def test_anonymous_request_is_unauthorized(self, api_client):
        response = api_client.get(reverse("current-user"))

        assert response.status_code == 401

    def test_expired_token(self, api_client, buyer):
        past = timezone.now() - timedelta(days=2)
        token = jwt.encode(
            {"user": {"id": str(buyer.id)}, "iat": past, "exp": past + timedelta(hours=1)},
            settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        api_client.credentials(HTTP_X_AUTH_TOKEN=token)

        response = api_client.get(reverse("current-user"))

        assert response.status_code == 401
        assert response.data["message"] == "Token has expired"

    def test_tampered_token(self, api_client, buyer):
        token = jwt.encode({"user": {"id": str(buyer.id)}}, "a-different-signing-key-for-tampering", algorithm="HS256")
        api_client.credentials(HTTP_X_AUTH_TOKEN=token)

        response = api_client.get(reverse("current-user"))

        assert response.status_code == 401
        assert response.data["message"] == "Invalid token"

    def test_token_of_deleted_user(self, api_client, buyer):
        token = generate_token_for_user(buyer)
        buyer.delete()
        api_client.credentials(HTTP_X_AUTH_TOKEN=token)

        response = api_client.get(reverse("current-user"))

        assert response.status_code == 401
        assert response.data["message"] == "User not found"
