from __future__ import annotations

import logging

from celery import shared_task

from apps.core.exceptions import NotFound

from .aggregator import recompute_contest

logger = logging.getLogger(__name__)


@shared_task
def recompute_contest_totals(contest_id: str) -> int:
    """
    Rebuild every points total of a contest from its breakdowns.
    Queued by the ingestion side after a batch of breakdown updates.
    """
    try:
        return recompute_contest(contest_id)
    except NotFound:
        logger.warning("recompute skipped: contest %s does not exist", contest_id)
        return 0
