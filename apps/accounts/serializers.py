from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    display_name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'display_name',
            'avatar',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserMinimalSerializer(serializers.ModelSerializer):
    """Public user info (for displaying in jars, offenses, balances)."""

    display_name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'display_name', 'avatar']
        read_only_fields = fields


class GoogleTokenLoginSerializer(serializers.Serializer):
    """Serializer for signing in with a Google ID token."""

    id_token = serializers.CharField(required=True, trim_whitespace=True)
