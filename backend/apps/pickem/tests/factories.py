from __future__ import annotations

from datetime import date, time, timedelta

from django.contrib.auth import get_user_model

from apps.core.models import UserProfile
from apps.pickem.models import Contest, Match, Team

User = get_user_model()


def make_profile(handle: str, staff: bool = False, **extra) -> UserProfile:
    user = User.objects.create_user(
        username=handle, email=f"{handle}@example.com", password="verysecurepass", is_staff=staff
    )
    return UserProfile.objects.create(
        user=user,
        provider_id=extra.pop("provider_id", f"discord-{handle}"),
        handle=handle,
        email=user.email,
        **extra,
    )


def make_contest(name: str = "Kickoff 2025") -> Contest:
    return Contest.objects.create(name=name, kind=Contest.KIND_KICKOFF, year=2025, ongoing=True)


def make_match(contest: Contest, team1: Team, team2: Team, days_from_today: int = 2, **extra) -> Match:
    return Match.objects.create(
        contest=contest,
        team1=team1,
        team2=team2,
        match_date=date.today() + timedelta(days=days_from_today),
        match_time=extra.pop("match_time", time(18, 0)),
        **extra,
    )
