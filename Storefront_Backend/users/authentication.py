import logging
from rest_framework.authentication import BaseAuthentication
from rest_framework import exceptions
from django.core.exceptions import ValidationError
from django.conf import settings
import jwt
from .utils import decode_token

logger = logging.getLogger(__name__)


class HeaderTokenAuthentication(BaseAuthentication):
    """
    Authenticate DRF requests using the access token sent in the
    x-auth-token header, or as a Bearer token in Authorization.
    """
    keyword = "Bearer"

    def get_token(self, request):
        # 1. Storefront client header
        token = request.headers.get(settings.AUTH_TOKEN_HEADER)
        if token:
            return token.strip()

        # 2. Fallback to Authorization header
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith(f"{self.keyword} "):
            return auth_header.split(" ", 1)[1].strip()
        return None


    def authenticate(self, request):
        from .models import CustomUser
        token = self.get_token(request)

        if not token:
            return None  # no token, DRF treats the request as anonymous

        try:
            payload = decode_token(token)
        except jwt.ExpiredSignatureError:
            raise exceptions.AuthenticationFailed("Token has expired")
        except jwt.InvalidTokenError:
            raise exceptions.AuthenticationFailed("Invalid token")

        user_id = (payload.get("user") or {}).get("id")
        if not user_id:
            raise exceptions.AuthenticationFailed("Invalid token")

        try:
            user = CustomUser.objects.get(id=user_id)
        except (CustomUser.DoesNotExist, ValueError, ValidationError):
            logger.warning(f"Token presented for unknown user {user_id}")
            raise exceptions.AuthenticationFailed("User not found")

        if not user.is_active:
            raise exceptions.AuthenticationFailed("User account is disabled")

        return (user, token)
    

    def authenticate_header(self, request):
        """Makes DRF answer 401 (not 403) for failed authentication"""
        return self.keyword
