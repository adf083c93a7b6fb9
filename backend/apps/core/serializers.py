from __future__ import annotations

from rest_framework import serializers

from .models import UserProfile


class PublicProfileSerializer(serializers.Serializer):
    """Renders apps.core.projection.PublicProfile values."""

    user_id = serializers.IntegerField(source="principal_id", read_only=True)
    handle = serializers.CharField(read_only=True)
    display_name = serializers.CharField(read_only=True, allow_null=True)
    avatar_url = serializers.CharField(read_only=True, allow_null=True)


class ProfileSerializer(serializers.ModelSerializer):
    """The owner's full record, including private columns."""

    class Meta:
        model = UserProfile
        fields = ["user_id", "provider_id", "handle", "email", "display_name", "avatar_url", "created_at", "updated_at"]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.Serializer):
    display_name = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=200)
    avatar_url = serializers.URLField(required=False, allow_null=True, allow_blank=True, max_length=500)
    email = serializers.EmailField(required=False, allow_null=True, allow_blank=True)
    # Accepted so that attempts to change them are rejected explicitly rather than ignored
    user_id = serializers.IntegerField(required=False)
    provider_id = serializers.CharField(required=False)
    handle = serializers.CharField(required=False)

    def validate(self, attrs):
        for name in ("display_name", "avatar_url", "email"):
            if name in attrs and attrs[name] == "":
                attrs[name] = None
        return attrs


class PrincipalCreatedSerializer(serializers.Serializer):
    principal_id = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    claims = serializers.DictField(required=False, default=dict)
