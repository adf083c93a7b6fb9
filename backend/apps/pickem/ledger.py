"""
Vote ledger: one vote per (principal, match), writable by its owner until the
match locks.

A match is locked once its scheduled start has passed or a winner is recorded.
Reads are public; stats count only votes that still reference a team.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count

from apps.core.exceptions import AlreadyLocked, NotFound
from apps.core.guards import requires_authenticated
from apps.core.metrics import vote_rejections_total, votes_total
from apps.core.models import UserProfile

from .models import Match, Team, Vote

logger = logging.getLogger(__name__)

PERCENT_QUANTUM = Decimal("0.01")


def _get_match(match_id, lock: bool = False) -> Match:
    qs = Match.objects.all()
    if lock:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=match_id)
    except (Match.DoesNotExist, ValidationError, ValueError):
        raise NotFound("match not found")


def _reject_if_locked(match: Match) -> None:
    if match.is_locked():
        vote_rejections_total.labels(reason="locked").inc()
        raise AlreadyLocked("voting for this match is closed")


def is_locked(match_id) -> bool:
    return _get_match(match_id).is_locked()


@requires_authenticated
def cast_or_update(principal, match_id, team_id) -> Tuple[Vote, bool]:
    """
    Record the caller's pick for a match, replacing any earlier pick.
    Returns (vote, created). The team must be one of the two playing.
    """
    with transaction.atomic():
        match = _get_match(match_id, lock=True)
        _reject_if_locked(match)

        try:
            team = Team.objects.get(pk=team_id)
        except (Team.DoesNotExist, ValidationError, ValueError):
            vote_rejections_total.labels(reason="unknown_team").inc()
            raise NotFound("team not found")
        if team.pk not in match.team_ids:
            vote_rejections_total.labels(reason="not_playing").inc()
            raise NotFound("team is not playing in this match")

        if not UserProfile.objects.filter(pk=principal.pk).exists():
            raise NotFound("profile not provisioned")

        vote, created = Vote.objects.update_or_create(
            user_id=principal.pk,
            match=match,
            defaults={"vote_team": team},
        )

    votes_total.labels(action="cast" if created else "update").inc()
    logger.info(
        "vote %s user_id=%s match=%s team=%s",
        "cast" if created else "updated",
        principal.pk,
        match.pk,
        team.pk,
    )
    return vote, created


@requires_authenticated
def retract(principal, match_id) -> bool:
    """Delete the caller's vote on an open match. Returns whether a vote existed."""
    with transaction.atomic():
        match = _get_match(match_id, lock=True)
        _reject_if_locked(match)
        deleted, _ = Vote.objects.filter(user_id=principal.pk, match=match).delete()

    if deleted:
        votes_total.labels(action="retract").inc()
        logger.info("vote retracted user_id=%s match=%s", principal.pk, match.pk)
    return bool(deleted)


def own_vote(principal, match_id) -> Optional[Vote]:
    match = _get_match(match_id)
    return Vote.objects.filter(user_id=principal.pk, match=match).select_related("vote_team").first()


def list_for_match(match_id) -> List[Vote]:
    match = _get_match(match_id)
    return list(
        Vote.objects.filter(match=match).select_related("vote_team").order_by("created_at")
    )


def stats(match_id) -> Dict[object, dict]:
    """
    Per-team vote counts and percentages for a match.
    Votes whose team was deleted are ignored; percentages are rounded half-up
    to two places and are relative to the counted votes only.
    """
    match = _get_match(match_id)
    rows = list(
        Vote.objects.filter(match=match, vote_team__isnull=False)
        .values("vote_team_id")
        .annotate(count=Count("id"))
        .order_by("vote_team_id")
    )
    total = sum(row["count"] for row in rows)
    result = {}
    for row in rows:
        percentage = (Decimal(row["count"]) * 100 / Decimal(total)).quantize(
            PERCENT_QUANTUM, rounding=ROUND_HALF_UP
        )
        result[row["vote_team_id"]] = {"count": row["count"], "percentage": percentage}
    return result
