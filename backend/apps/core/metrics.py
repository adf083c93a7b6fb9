from __future__ import annotations

from prometheus_client import Counter

# Provisioning outcomes: created | exists | missing_claim | conflict
profiles_provisioned_total = Counter(
    "pickem_profiles_provisioned_total",
    "Profile provisioning attempts by outcome",
    labelnames=("outcome",),
)

# Guarded writes rejected because an immutable field changed
immutable_violations_total = Counter(
    "pickem_immutable_violations_total",
    "Writes rejected for touching an immutable field",
    labelnames=("model",),
)

# Vote ledger
votes_total = Counter(
    "pickem_votes_total",
    "Vote ledger mutations",
    labelnames=("action",),
)
vote_rejections_total = Counter(
    "pickem_vote_rejections_total",
    "Vote mutations rejected",
    labelnames=("reason",),
)

# Leaderboard
points_recomputed_total = Counter(
    "pickem_points_recomputed_total",
    "Points totals recomputed from breakdowns",
)
