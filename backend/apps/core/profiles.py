from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import Q

from .exceptions import Conflict, NotFound
from .guards import ROLE_AUTHENTICATED, allow_roles
from .models import UserProfile
from .projection import PUBLIC_PROFILE_FIELDS, PublicProfile, project

logger = logging.getLogger(__name__)


def create_if_absent(
    principal,
    provider_id: str,
    handle: str,
    claims: Optional[dict] = None,
) -> Tuple[UserProfile, bool]:
    """
    Insert the identity record for `principal` unless one exists.
    Returns (profile, created). A handle or provider id already owned by a
    different principal raises Conflict and writes nothing.
    """
    claims = claims or {}
    existing = UserProfile.objects.filter(pk=principal.pk).first()
    if existing:
        return existing, False

    email = claims.get("email") or principal.email or None
    profile = UserProfile(
        user=principal,
        provider_id=provider_id,
        handle=handle,
        email=email,
        display_name=claims.get("full_name") or email or handle,
        avatar_url=claims.get("avatar_url") or None,
    )
    try:
        with transaction.atomic():
            profile.save(force_insert=True)
    except IntegrityError as exc:
        # Concurrent provisioning of the same principal wins the race: not a conflict
        existing = UserProfile.objects.filter(pk=principal.pk).first()
        if existing:
            return existing, False
        taken = UserProfile.objects.filter(Q(handle=handle) | Q(provider_id=provider_id)).first()
        field = "handle" if taken and taken.handle == handle else "provider_id"
        raise Conflict(f"{field} already belongs to another user", field=field) from exc
    return profile, True


def get_own(principal) -> UserProfile:
    try:
        return UserProfile.objects.get(pk=principal.pk)
    except UserProfile.DoesNotExist:
        raise NotFound("profile not provisioned")


def update_own(principal, **changes) -> UserProfile:
    """
    Apply `changes` to the caller's own record.
    Only display_name, avatar_url and email are writable; changing user_id,
    provider_id or handle raises ImmutableFieldViolation.
    """
    unknown = set(changes) - set(UserProfile.EDITABLE_FIELDS) - set(UserProfile.IMMUTABLE_FIELDS)
    if unknown:
        raise ValueError(f"unknown profile fields: {', '.join(sorted(unknown))}")

    with transaction.atomic():
        profile = UserProfile.objects.select_for_update().filter(pk=principal.pk).first()
        if profile is None:
            raise NotFound("profile not provisioned")
        for name, value in changes.items():
            setattr(profile, name, value)
        # guarded_save rejects immutable changes before the UPDATE is issued
        profile.save()
    logger.info("profile updated user_id=%s fields=%s", profile.user_id, sorted(changes))
    return profile


@allow_roles(ROLE_AUTHENTICATED)
def list_all_public_profiles(caller) -> List[PublicProfile]:
    """
    Directory listing across all principals, ordered by handle.
    Selects the public columns only and returns projected values, never model
    instances.
    """
    rows = UserProfile.objects.only(*PUBLIC_PROFILE_FIELDS).order_by("handle")
    return [project(row) for row in rows]


@allow_roles(ROLE_AUTHENTICATED)
def get_public_profile(caller, principal_id) -> PublicProfile:
    row = UserProfile.objects.filter(pk=principal_id).only(*PUBLIC_PROFILE_FIELDS).first()
    if row is None:
        raise NotFound("profile not found")
    return project(row)


def public_profiles_for(principal_ids: Iterable) -> Dict[int, PublicProfile]:
    """
    Projected identities for rows that reference principals (votes, points, stars).
    Not role-gated: those listings are public, and only projected values leave here.
    Selects the public columns only; unknown ids are simply absent from the result.
    """
    ids = {pk for pk in principal_ids if pk is not None}
    if not ids:
        return {}
    rows = UserProfile.objects.filter(pk__in=ids).only(*PUBLIC_PROFILE_FIELDS)
    return {row.user_id: project(row) for row in rows}
