"""
Authz serializers for the current user and the practitioner directory.
"""
from rest_framework import serializers
from apps.authz.models import User


class MeSerializer(serializers.ModelSerializer):
    """Profile of the authenticated user (GET /api/v1/me/)."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'first_name',
            'last_name',
            'role',
            'created_at',
        ]
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    """
    Compact user reference embedded in appointments and the public
    practitioner directory.
    """
    name = serializers.CharField(source='full_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = fields
