from __future__ import annotations

import uuid
from datetime import datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db import models
from django.db.models.functions import Lower
from django.utils import timezone
from django.utils.text import slugify

from apps.core.guards import insert_only
from apps.core.models import GuardedModel, TimestampedModel, UserProfile

REGION_AMERICAS = "americas"
REGION_EMEA = "emea"
REGION_PACIFIC = "pacific"
REGION_CHINA = "china"
REGION_INTERNATIONAL = "international"
REGION_CHOICES = [
    (REGION_AMERICAS, "Americas"),
    (REGION_EMEA, "EMEA"),
    (REGION_PACIFIC, "Pacific"),
    (REGION_CHINA, "China"),
    (REGION_INTERNATIONAL, "International"),
]


def normalize_region(region: Optional[str]) -> str:
    # Regions compare case-insensitively; store them lower-case
    return (region or "").strip().lower()


class Team(TimestampedModel):
    IMMUTABLE_FIELDS = ("external_source", "external_id", "created_at")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    short_name = models.CharField(max_length=32)
    slug = models.SlugField(max_length=120, blank=True)
    logo_path = models.CharField(max_length=300, blank=True, default="")
    external_id = models.CharField(max_length=120, null=True, blank=True)
    external_source = models.CharField(max_length=32, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    last_scraped_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(Lower("short_name"), name="pickem_team_short_name_uniq"),
            models.UniqueConstraint(Lower("slug"), name="pickem_team_slug_uniq"),
            models.UniqueConstraint(fields=["external_source", "external_id"], name="pickem_team_external_uniq"),
        ]
        indexes = [models.Index(fields=["name"], name="pickem_team_name_idx")]

    def __str__(self) -> str:
        return self.short_name

    def save(self, *args, **kwargs):
        if not self.slug:
            # "LEVIATÁN" -> "leviatan"
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)


class Contest(TimestampedModel):
    KIND_KICKOFF = "kickoff"
    KIND_MASTERS = "masters"
    KIND_CHAMPIONS = "champions"
    KIND_CHOICES = [
        (KIND_KICKOFF, "Kickoff"),
        (KIND_MASTERS, "Masters"),
        (KIND_CHAMPIONS, "Champions"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    kind = models.CharField(max_length=32, choices=KIND_CHOICES)
    location = models.CharField(max_length=200, blank=True, default="")
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    ongoing = models.BooleanField(default=False)
    bracket_type = models.CharField(max_length=64, blank=True, default="")
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        indexes = [
            models.Index(fields=["name"], name="pickem_contest_name_idx"),
            models.Index(fields=["kind"], name="pickem_contest_kind_idx"),
            models.Index(fields=["year"], name="pickem_contest_year_idx"),
            models.Index(fields=["ongoing"], name="pickem_contest_ongoing_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class SubContest(TimestampedModel):
    IMMUTABLE_FIELDS = ("contest_id", "external_source", "external_id", "created_at")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contest = models.ForeignKey(Contest, on_delete=models.CASCADE, related_name="sub_contests")
    region = models.CharField(max_length=32)
    match_url = models.URLField(max_length=500, blank=True, default="")
    pickem_url = models.URLField(max_length=500, blank=True, default="")
    external_id = models.CharField(max_length=120, null=True, blank=True)
    external_source = models.CharField(max_length=32, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["external_source", "external_id"], name="pickem_subcontest_external_uniq"),
        ]
        indexes = [models.Index(fields=["region"], name="pickem_subcontest_region_idx")]

    def __str__(self) -> str:
        return f"{self.contest_id} / {self.region}"

    def save(self, *args, **kwargs):
        self.region = normalize_region(self.region)
        super().save(*args, **kwargs)


class Match(TimestampedModel):
    IMMUTABLE_FIELDS = ("contest_id", "external_source", "external_id", "created_at")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    contest = models.ForeignKey(Contest, on_delete=models.CASCADE, related_name="matches")
    sub_contest = models.ForeignKey(
        SubContest, null=True, blank=True, on_delete=models.SET_NULL, related_name="matches"
    )
    team1 = models.ForeignKey(Team, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    team2 = models.ForeignKey(Team, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    winner = models.ForeignKey(Team, null=True, blank=True, on_delete=models.SET_NULL, related_name="+")
    region = models.CharField(max_length=32, blank=True, default="")
    phase = models.CharField(max_length=64, blank=True, default="")
    match_type = models.CharField(max_length=16, blank=True, default="")  # bo1, bo3, bo5
    match_date = models.DateField(null=True, blank=True)
    match_time = models.TimeField(null=True, blank=True)
    playoff_bracket_id = models.CharField(max_length=64, blank=True, default="")
    external_id = models.CharField(max_length=120, null=True, blank=True)
    external_source = models.CharField(max_length=32, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["external_source", "external_id"], name="pickem_match_external_uniq"),
        ]
        indexes = [
            models.Index(fields=["match_date"], name="pickem_match_date_idx"),
            models.Index(fields=["region"], name="pickem_match_region_idx"),
            models.Index(fields=["phase"], name="pickem_match_phase_idx"),
            models.Index(fields=["team1", "team2"], name="pickem_match_teams_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.team1_id} vs {self.team2_id} ({self.match_date})"

    @property
    def team_ids(self) -> tuple:
        return tuple(t for t in (self.team1_id, self.team2_id) if t is not None)

    @property
    def starts_at(self) -> Optional[datetime]:
        """
        Scheduled start, interpreted in PICKEM_SCHEDULE_TZ.
        A date without a time starts at midnight; no date means unscheduled.
        """
        if self.match_date is None:
            return None
        tz = ZoneInfo(settings.PICKEM_SCHEDULE_TZ)
        return datetime.combine(self.match_date, self.match_time or time.min, tzinfo=tz)

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        if self.winner_id is not None:
            return True
        start = self.starts_at
        if start is None:
            return False
        return (now or timezone.now()) >= start


class Vote(TimestampedModel):
    IMMUTABLE_FIELDS = ("user_id", "match_id", "created_at")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="votes")
    match = models.ForeignKey(Match, on_delete=models.CASCADE, related_name="votes")
    vote_team = models.ForeignKey(Team, null=True, blank=True, on_delete=models.SET_NULL, related_name="votes")
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "match"], name="pickem_vote_user_match_uniq"),
        ]
        indexes = [models.Index(fields=["match", "vote_team"], name="pickem_vote_match_team_idx")]

    def __str__(self) -> str:
        return f"Vote {self.user_id} on {self.match_id} -> {self.vote_team_id}"


class Points(TimestampedModel):
    """Per-user, per-contest pick'em total; nr_points is the sum of its breakdowns."""

    IMMUTABLE_FIELDS = ("user_id", "contest_id", "created_at")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="points")
    contest = models.ForeignKey(Contest, on_delete=models.CASCADE, related_name="points")
    nr_points = models.IntegerField(default=0)
    external_id = models.CharField(max_length=120, null=True, blank=True)
    external_source = models.CharField(max_length=32, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name_plural = "points"
        constraints = [
            models.UniqueConstraint(fields=["user", "contest"], name="pickem_points_user_contest_uniq"),
        ]
        indexes = [models.Index(fields=["contest", "-nr_points"], name="pickem_points_rank_idx")]

    def __str__(self) -> str:
        return f"{self.user_id} @ {self.contest_id}: {self.nr_points}"


class BreakdownPoints(TimestampedModel):
    IMMUTABLE_FIELDS = ("points_id", "region", "created_at")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    points = models.ForeignKey(Points, on_delete=models.CASCADE, related_name="breakdowns")
    region = models.CharField(max_length=32, choices=REGION_CHOICES)
    nr_points = models.IntegerField(default=0)
    source_handle = models.CharField(max_length=150, blank=True, default="")
    external_id = models.CharField(max_length=120, null=True, blank=True)
    external_source = models.CharField(max_length=32, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name_plural = "breakdown points"
        constraints = [
            models.UniqueConstraint(fields=["points", "region"], name="pickem_breakdown_points_region_uniq"),
        ]

    def __str__(self) -> str:
        return f"{self.points_id} {self.region}: {self.nr_points}"


class Star(GuardedModel):
    CATEGORY_KICKOFF_WINNER = "kickoff_winner"
    CATEGORY_MASTERS_WINNER = "masters_winner"
    CATEGORY_CHAMPIONS_WINNER = "champions_winner"
    CATEGORY_CHOICES = [
        (CATEGORY_KICKOFF_WINNER, "Kickoff winner"),
        (CATEGORY_MASTERS_WINNER, "Masters winner"),
        (CATEGORY_CHAMPIONS_WINNER, "Champions winner"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(UserProfile, on_delete=models.CASCADE, related_name="stars")
    contest = models.ForeignKey(Contest, on_delete=models.CASCADE, related_name="stars")
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES)
    created_at = models.DateTimeField(default=timezone.now, editable=False)

    class Meta:
        indexes = [models.Index(fields=["category"], name="pickem_star_category_idx")]

    def __str__(self) -> str:
        return f"{self.category} for {self.user_id}"

    @insert_only
    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
