from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import connection, transaction
from django.http import HttpResponse
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from .models import UserProfile
from .profiles import get_own, get_public_profile, list_all_public_profiles, update_own
from .projection import exclude_principal
from .provisioning import verify_hook_signature
from .serializers import (
    PrincipalCreatedSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    PublicProfileSerializer,
)
from .signals import principal_created

logger = logging.getLogger(__name__)
User = get_user_model()


class PrincipalCreatedHookView(APIView):
    """
    Called by the authentication provider after it creates a principal.
    Authenticated by an HMAC-SHA256 signature of the raw body (X-Hook-Signature).
    Provisioning problems never fail the event; the response reports whether a
    profile exists afterwards.
    """

    authentication_classes = []
    permission_classes = [permissions.AllowAny]
    throttle_scope = "auth-hook"

    def post(self, request):
        body = request.body
        if not verify_hook_signature(body, request.headers.get("X-Hook-Signature", "")):
            logger.warning("principal-created hook with bad signature from %s", request.META.get("REMOTE_ADDR"))
            return Response({"detail": "invalid signature"}, status=status.HTTP_403_FORBIDDEN)

        serializer = PrincipalCreatedSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        with transaction.atomic():
            user, created = User.objects.get_or_create(
                username=data["principal_id"], defaults={"email": data["email"]}
            )
            if created:
                user.set_unusable_password()
                user.save(update_fields=["password"])

        principal_created.send(sender=User, user=user, claims=data["claims"])
        provisioned = UserProfile.objects.filter(pk=user.pk).exists()
        return Response({"user_id": user.pk, "created": created, "profile_provisioned": provisioned})


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(ProfileSerializer(get_own(request.user)).data)

    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        profile = update_own(request.user, **serializer.validated_data)
        return Response(ProfileSerializer(profile).data)


class DirectoryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        profiles = list_all_public_profiles(request.user)
        if request.query_params.get("exclude_self") == "1":
            profiles = exclude_principal(profiles, request.user.pk)
        return Response({"results": PublicProfileSerializer(profiles, many=True).data})


class PublicProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, id: int):
        return Response(PublicProfileSerializer(get_public_profile(request.user, id)).data)


# Observability endpoints

class HealthzView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        return Response({"status": "ok"})


class ReadinessView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        try:
            connection.ensure_connection()
        except Exception:
            logger.exception("readiness check failed: database unavailable")
            return Response({"status": "unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"status": "ready"})


class MetricsView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request):
        data = generate_latest()
        return HttpResponse(data, content_type=CONTENT_TYPE_LATEST)
