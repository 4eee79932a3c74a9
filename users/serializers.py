from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework.exceptions import AuthenticationFailed
from django.contrib.auth import authenticate

from .models import User


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    username_field = 'email'

    def validate(self, attrs):
        email = attrs.get("email")
        password = attrs.get("password")

        if email and password:
            user = authenticate(request=self.context.get('request'), email=email, password=password)
            if not user:
                raise AuthenticationFailed("Invalid credentials", code='authorization')
        else:
            raise AuthenticationFailed("Missing credentials", code='authorization')

        data = super().validate(attrs)
        data["user_id"] = user.id
        data["email"] = user.email
        data["has_community_access"] = user.has_community_access
        return data


class RegisterSerializer(serializers.Serializer):
    # email uniqueness is left to the database constraint
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    password = serializers.CharField(min_length=8, write_only=True)

    def validate_email(self, value):
        return value.lower()


class UserSerializer(serializers.ModelSerializer):
    created_at = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'name', 'avatar', 'membership_type', 'created_at',
            'has_community_access', 'has_consult_access',
        ]
