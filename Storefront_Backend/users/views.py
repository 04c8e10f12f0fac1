import logging
from django.utils.timezone import now
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework import status
from drf_yasg.utils import swagger_auto_schema
from products.utility import BaseResponseMixin
from .models import CustomUser
from .serializers import CustomUserSerializer, SignupSerializer, LoginSerializer
from .utils import generate_token_for_user, user_claims

logger = logging.getLogger(__name__)


class AuthResponseMixin(BaseResponseMixin):
    """Shared shape of the signup and login responses"""

    def get_auth_response(self, status_code, message, user):
        """Return the token alongside the decoded identity"""
        return self.get_response(
            status_code,
            message,
            {
                "token": generate_token_for_user(user),
                "user": user_claims(user),
            }
        )


class SignupView(GenericAPIView, AuthResponseMixin):
    """API endpoint to register buyers and sellers"""
    queryset = CustomUser.objects.all()
    serializer_class = SignupSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    @swagger_auto_schema(request_body=SignupSerializer)
    def post(self, request, *args, **kwargs):
        """
        Registers the user and signs them in straight away
        """
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        user.last_login = now()
        user.save(update_fields=['last_login'])

        logger.info(f"New {user.user_type} registered: {user.email}")
        return self.get_auth_response(
            status.HTTP_201_CREATED,
            "User registered successfully",
            user
        )
    

class LoginView(GenericAPIView, AuthResponseMixin):
    """API endpoint to log users in"""
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    @swagger_auto_schema(request_body=LoginSerializer)
    def post(self, request, *args, **kwargs):
        """Validate credentials and issue an access token"""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]

        user.last_login = now()
        user.save(update_fields=['last_login'])

        logger.info(f"User logged in: {user.email}")
        return self.get_auth_response(
            status.HTTP_200_OK,
            "Login successful",
            user
        )
    

class CurrentUserView(GenericAPIView, BaseResponseMixin):
    """Returns the user the presented token belongs to"""
    serializer_class = CustomUserSerializer
    permission_classes = [IsAuthenticated]

    def get(self, request, *args, **kwargs):
        serializer = self.get_serializer(request.user)
        return self.get_response(
            status.HTTP_200_OK,
            "User retrieved successfully",
            serializer.data
        )
