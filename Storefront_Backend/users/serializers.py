from rest_framework import serializers
from django.contrib.auth import authenticate
from django.utils.translation import gettext_lazy as _
from .models import CustomUser
from .utils import MIN_PASSWORD_LENGTH


class CustomUserSerializer(serializers.ModelSerializer):
    """Serializer for the public view of a user"""
    class Meta:
        model = CustomUser
        fields = ["id", "name", "email", "user_type", "created_at"]
        read_only_fields = fields


class SignupSerializer(serializers.ModelSerializer):
    """Serializer for user registration as buyer or seller"""
    name = serializers.CharField(
        min_length=2,
        max_length=255,
        error_messages={"min_length": _("Name must be at least 2 characters")}
    )
    email = serializers.EmailField(
        error_messages={"invalid": _("Invalid email address")}
    )
    password = serializers.CharField(
        write_only=True,
        min_length=MIN_PASSWORD_LENGTH,
        error_messages={"min_length": _("Password must be at least 6 characters")}
    )
    user_type = serializers.ChoiceField(
        choices=CustomUser.UserType.choices,
        error_messages={
            "required": _("Please select a role"),
            "invalid_choice": _("Please select a role"),
        }
    )

    class Meta:
        model = CustomUser
        fields = ["id", "name", "email", "password", "user_type"]
        read_only_fields = ["id"]


    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError(_("Name must be at least 2 characters"))
        return value
    

    def validate_email(self, value):
        """Emails are unique regardless of case"""
        value = value.strip().lower()
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError(_("User with this email already exists"))
        return value
    

    def create(self, validated_data):
        """Hash the password before saving"""
        return CustomUser.objects.create_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    """Serializer for user login"""
    email = serializers.EmailField(
        error_messages={"invalid": _("Invalid email address")}
    )
    password = serializers.CharField(write_only=True)


    def validate(self, attrs):
        """Validate the login credentials"""
        email = attrs.get('email').strip().lower()
        password = attrs.get('password')

        user = authenticate(
            request=self.context.get('request'),
            email=email,
            password=password
        )
        if not user:
            raise serializers.ValidationError(_("Invalid email or password"))

        attrs['user'] = user
        return attrs
