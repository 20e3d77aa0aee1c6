from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from permissions.roles import ROLE_CHOICES, ROLE_USER

User = get_user_model()

PASSWORD_MIN_LENGTH = 6


def _unique_email():
    return UniqueValidator(
        queryset=User.objects.all(),
        lookup="iexact",
        message="A user with this email already exists",
    )


def _unique_username():
    return UniqueValidator(
        queryset=User.objects.all(),
        lookup="iexact",
        message="A user with this username already exists",
    )


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(min_length=3, max_length=50, validators=[_unique_username()])
    email = serializers.EmailField(validators=[_unique_email()])
    password = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LENGTH,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    role = serializers.ChoiceField(choices=ROLE_CHOICES, required=False, default=ROLE_USER)

    def validate_username(self, value):
        return value.strip()

    def validate_email(self, value):
        return value.strip().lower()

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            email=validated_data["email"],
            password=validated_data["password"],
            role=validated_data.get("role", ROLE_USER),
        )


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.
    """

    username = serializers.CharField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


# ---------------- PROFILE ----------------
class ProfileUpdateSerializer(serializers.ModelSerializer):
    username = serializers.CharField(
        min_length=3, max_length=50, required=False, validators=[_unique_username()]
    )
    email = serializers.EmailField(required=False, validators=[_unique_email()])

    class Meta:
        model = User
        fields = ["username", "email"]

    def validate_username(self, value):
        return value.strip()

    def validate_email(self, value):
        return value.strip().lower()


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(write_only=True, style={"input_type": "password"})
    newPassword = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LENGTH,
        validators=[validate_password],
        style={"input_type": "password"},
    )


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, allow_blank=True)


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption (never the password).
    """

    isActive = serializers.BooleanField(source="is_active", read_only=True)
    lastLogin = serializers.DateTimeField(source="last_login", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "role",
            "isActive",
            "lastLogin",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields
