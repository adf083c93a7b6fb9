from __future__ import annotations

from datetime import date, time, timedelta

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.pickem.models import REGION_AMERICAS, REGION_EMEA, Contest, Match, SubContest, Team


TEAMS = [
    ("Sentinels", "SEN"),
    ("LEVIATÁN", "LEV"),
    ("Fnatic", "FNC"),
    ("Team Heretics", "TH"),
]


class Command(BaseCommand):
    help = "Seed demo data: a contest with regional sub-contests, teams and upcoming matches."

    def handle(self, *args, **options):
        contest, created = Contest.objects.get_or_create(
            name="Demo Kickoff",
            defaults={"kind": Contest.KIND_KICKOFF, "year": timezone.now().year, "ongoing": True},
        )
        if not created:
            self.stdout.write(self.style.WARNING("Demo contest already exists"))
            return

        teams = {}
        for name, short_name in TEAMS:
            team = Team.objects.filter(short_name__iexact=short_name).first()
            if team is None:
                team = Team.objects.create(name=name, short_name=short_name)
            teams[short_name] = team

        americas = SubContest.objects.create(contest=contest, region=REGION_AMERICAS)
        emea = SubContest.objects.create(contest=contest, region=REGION_EMEA)

        tomorrow = date.today() + timedelta(days=1)
        Match.objects.create(
            contest=contest,
            sub_contest=americas,
            team1=teams["SEN"],
            team2=teams["LEV"],
            region=REGION_AMERICAS,
            phase="group",
            match_type="bo3",
            match_date=tomorrow,
            match_time=time(18, 0),
        )
        Match.objects.create(
            contest=contest,
            sub_contest=emea,
            team1=teams["FNC"],
            team2=teams["TH"],
            region=REGION_EMEA,
            phase="group",
            match_type="bo3",
            match_date=tomorrow,
            match_time=time(15, 0),
        )

        self.stdout.write(self.style.SUCCESS(f"Created demo contest {contest.id}"))
        self.stdout.write(self.style.SUCCESS("Seed complete."))
