from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from django.utils import timezone

from apps.core.exceptions import NotFound

from . import aggregator, ledger
from .models import Points, Vote

logger = logging.getLogger(__name__)


def _group_send(group: str, message: dict) -> None:
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(group, message)
    except Exception:
        # Best effort
        logger.warning("broadcast to %s failed", group, exc_info=True)


def broadcast_vote_stats(match_id) -> None:
    try:
        counts = ledger.stats(match_id)
    except NotFound:
        return
    payload = [
        {"team_id": str(team_id), "vote_count": row["count"], "percentage": float(row["percentage"])}
        for team_id, row in counts.items()
    ]
    _group_send(
        f"votes.{match_id}",
        {"type": "votes.update", "payload": {"as_of": timezone.now().isoformat(), "results": payload}},
    )


def broadcast_leaderboard(contest_id) -> None:
    try:
        rows = aggregator.rank_leaderboard(aggregator.list_leaderboard(contest_id))
    except NotFound:
        return
    _group_send(
        f"leaderboard.{contest_id}",
        {"type": "leaderboard.update", "payload": {"as_of": timezone.now().isoformat(), "results": rows}},
    )


@receiver(post_save, sender=Vote)
@receiver(post_delete, sender=Vote)
def broadcast_vote_change(sender, instance: Vote, **kwargs):
    match_id = instance.match_id
    transaction.on_commit(lambda: broadcast_vote_stats(match_id))


@receiver(post_save, sender=Points)
def broadcast_points_change(sender, instance: Points, **kwargs):
    contest_id = instance.contest_id
    transaction.on_commit(lambda: broadcast_leaderboard(contest_id))
