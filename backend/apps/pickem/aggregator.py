"""
Leaderboard aggregator: per-contest points totals and their regional breakdowns.

Totals are always the sum of the breakdown rows under them. Writes come from the
trusted ingestion side only (staff users, celery tasks, management commands);
everyone may read.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Sum

from apps.core.exceptions import NotFound
from apps.core.guards import requires_backend_role
from apps.core.metrics import points_recomputed_total
from apps.core.models import UserProfile
from apps.core.profiles import public_profiles_for

from .models import REGION_CHOICES, BreakdownPoints, Contest, Points, Star, normalize_region

logger = logging.getLogger(__name__)


def get_contest(contest_id) -> Contest:
    try:
        return Contest.objects.get(pk=contest_id)
    except (Contest.DoesNotExist, ValidationError, ValueError):
        raise NotFound("contest not found")


def _get_profile(principal_id) -> UserProfile:
    try:
        return UserProfile.objects.get(pk=principal_id)
    except (UserProfile.DoesNotExist, ValidationError, ValueError):
        raise NotFound("profile not found")


def _sum_into(points: Points) -> int:
    # Caller holds the row lock on `points`
    total = points.breakdowns.aggregate(total=Sum("nr_points"))["total"] or 0
    if total != points.nr_points:
        points.nr_points = total
        points.save(update_fields=["nr_points"])
    points_recomputed_total.inc()
    return total


@requires_backend_role
def upsert_breakdown(actor, principal_id, contest_id, region: str, points: int) -> BreakdownPoints:
    """Set the points a principal scored in one region of a contest."""
    region = normalize_region(region)
    if region not in dict(REGION_CHOICES):
        raise ValueError(f"unknown region: {region}")
    with transaction.atomic():
        profile = _get_profile(principal_id)
        contest = get_contest(contest_id)
        parent, _ = Points.objects.select_for_update().get_or_create(user=profile, contest=contest)
        breakdown, created = BreakdownPoints.objects.update_or_create(
            points=parent,
            region=region,
            defaults={"nr_points": int(points)},
        )
    logger.info(
        "breakdown %s user_id=%s contest=%s region=%s points=%s by=%s",
        "created" if created else "updated",
        profile.user_id,
        contest.pk,
        region,
        points,
        actor.pk,
    )
    return breakdown


@requires_backend_role
def recompute_total(actor, principal_id, contest_id) -> int:
    """Recompute and store a principal's contest total from its breakdowns."""
    with transaction.atomic():
        profile = _get_profile(principal_id)
        contest = get_contest(contest_id)
        parent, _ = Points.objects.select_for_update().get_or_create(user=profile, contest=contest)
        total = _sum_into(parent)
    logger.info("recomputed user_id=%s contest=%s total=%s by=%s", profile.user_id, contest.pk, total, actor.pk)
    return total


def recompute_contest(contest_id) -> int:
    """
    Recompute every total in a contest. Used by the background task and the
    recompute_points command, which run as the backend itself.
    Returns the number of totals recomputed.
    """
    contest = get_contest(contest_id)
    count = 0
    for points_id in Points.objects.filter(contest=contest).values_list("id", flat=True):
        with transaction.atomic():
            parent = Points.objects.select_for_update().filter(pk=points_id).first()
            if parent is None:
                continue
            _sum_into(parent)
        count += 1
    logger.info("recomputed %s totals for contest=%s", count, contest.pk)
    return count


def get_total(principal_id, contest_id) -> int:
    total = (
        Points.objects.filter(user_id=principal_id, contest_id=contest_id)
        .values_list("nr_points", flat=True)
        .first()
    )
    return total or 0


def breakdowns_for(principal_id, contest_id) -> List[BreakdownPoints]:
    return list(
        BreakdownPoints.objects.filter(points__user_id=principal_id, points__contest_id=contest_id).order_by("region")
    )


def list_leaderboard(contest_id) -> List[dict]:
    """Unordered rows: one per principal holding a total in the contest."""
    contest = get_contest(contest_id)
    rows = list(Points.objects.filter(contest=contest).values("user_id", "nr_points"))
    profiles = public_profiles_for(row["user_id"] for row in rows)
    result = []
    for row in rows:
        profile = profiles.get(row["user_id"])
        if profile is None:
            continue
        result.append(
            {
                "principal_id": profile.principal_id,
                "handle": profile.handle,
                "display_name": profile.display_name,
                "avatar_url": profile.avatar_url,
                "points": row["nr_points"],
            }
        )
    return result


def rank_leaderboard(rows: Iterable[dict]) -> List[dict]:
    """Order by points desc then handle, with dense ranks (ties share a rank)."""
    ordered = sorted(rows, key=lambda r: (-r["points"], r["handle"]))
    results = []
    rank = 0
    last_points = None
    for row in ordered:
        if row["points"] != last_points:
            rank += 1
            last_points = row["points"]
        results.append({"rank": rank, **row})
    return results


@requires_backend_role
def award_star(actor, principal_id, contest_id, category: str) -> Star:
    if category not in dict(Star.CATEGORY_CHOICES):
        raise ValueError(f"unknown star category: {category}")
    with transaction.atomic():
        profile = _get_profile(principal_id)
        contest = get_contest(contest_id)
        star = Star.objects.create(user=profile, contest=contest, category=category)
    logger.info("star %s awarded user_id=%s contest=%s by=%s", category, profile.user_id, contest.pk, actor.pk)
    return star


def stars_for_contest(contest_id, category: Optional[str] = None) -> List[Star]:
    contest = get_contest(contest_id)
    qs = Star.objects.filter(contest=contest).order_by("created_at")
    if category:
        qs = qs.filter(category=category)
    return list(qs)
