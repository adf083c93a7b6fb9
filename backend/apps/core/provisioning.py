from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Optional

from django.conf import settings

from .exceptions import Conflict, MissingRequiredClaim
from .metrics import profiles_provisioned_total
from .models import UserProfile
from .profiles import create_if_absent

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("provider_id", "name")


def validate_claims(user, claims: dict) -> None:
    for claim in REQUIRED_CLAIMS:
        if not claims.get(claim):
            raise MissingRequiredClaim(claim, principal_id=user.pk)


def provision_principal(user, claims: Optional[dict]) -> Optional[UserProfile]:
    """
    Create the identity record for a newly created principal from provider claims.

    Runs once per principal-created event and never fails the event itself:
    - missing provider_id/name: logged, no profile, returns None
    - handle/provider_id owned by another principal: logged, returns None
    - already provisioned (redelivered event): no-op, returns the existing record
    """
    claims = dict(claims or {})
    try:
        validate_claims(user, claims)
    except MissingRequiredClaim as exc:
        profiles_provisioned_total.labels(outcome="missing_claim").inc()
        logger.error("provisioning skipped for user_id=%s: %s", user.pk, exc.message)
        return None

    try:
        profile, created = create_if_absent(
            user,
            provider_id=str(claims["provider_id"]),
            handle=str(claims["name"]),
            claims=claims,
        )
    except Conflict as exc:
        profiles_provisioned_total.labels(outcome="conflict").inc()
        logger.warning("provisioning conflict for user_id=%s: %s", user.pk, exc.message)
        return None

    profiles_provisioned_total.labels(outcome="created" if created else "exists").inc()
    if created:
        logger.info("provisioned profile user_id=%s handle=%s", profile.user_id, profile.handle)
    return profile


def sign_hook_payload(body: bytes, secret: Optional[str] = None) -> str:
    key = (secret if secret is not None else settings.AUTH_HOOK_SECRET).encode("utf-8")
    return hmac.new(key=key, msg=body, digestmod=hashlib.sha256).hexdigest()


def verify_hook_signature(body: bytes, signature: str) -> bool:
    return hmac.compare_digest(sign_hook_payload(body), (signature or "").strip())
