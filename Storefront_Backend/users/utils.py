from datetime import timedelta
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _
from django.utils import timezone
from django.conf import settings
import jwt


MIN_PASSWORD_LENGTH = 6


def validate_password_length(password):
    """Enforce the minimum password length"""
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            _("Password must be at least %(min)d characters") % {"min": MIN_PASSWORD_LENGTH}
        )
    return password


def user_claims(user):
    """The public identity of a user as embedded in tokens and responses"""
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "user_type": user.user_type,
    }


def generate_token_for_user(user):
    """Generate a signed access token carrying the user's identity"""
    issued_at = timezone.now()
    payload = {
        "user": user_claims(user),
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.JWT_ACCESS_TOKEN_LIFETIME_MINUTES),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    """
    Verify and decode an access token.
    Raises jwt.ExpiredSignatureError or jwt.InvalidTokenError
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
