from __future__ import annotations

from unittest import mock

from django.test import TestCase

from apps.pickem import aggregator, ledger
from apps.pickem.models import Team

from .factories import make_contest, make_match, make_profile


class BroadcastTests(TestCase):
    def setUp(self):
        self.contest = make_contest()
        self.sen = Team.objects.create(name="Sentinels", short_name="SEN")
        self.loud = Team.objects.create(name="LOUD", short_name="LOUD")
        self.match = make_match(self.contest, self.sen, self.loud)
        self.alice = make_profile("alice")

    def test_vote_change_broadcasts_stats_after_commit(self):
        with mock.patch("apps.pickem.signals._group_send") as send:
            with self.captureOnCommitCallbacks(execute=True):
                ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        group, message = send.call_args.args
        self.assertEqual(group, f"votes.{self.match.id}")
        self.assertEqual(message["type"], "votes.update")
        self.assertEqual(
            message["payload"]["results"],
            [{"team_id": str(self.sen.id), "vote_count": 1, "percentage": 100.0}],
        )

    def test_points_change_broadcasts_ranked_leaderboard(self):
        staff = make_profile("ingest", staff=True).user
        with mock.patch("apps.pickem.signals._group_send") as send:
            with self.captureOnCommitCallbacks(execute=True):
                aggregator.upsert_breakdown(staff, self.alice.pk, self.contest.id, "emea", 30)
                aggregator.recompute_total(staff, self.alice.pk, self.contest.id)
        group, message = send.call_args.args
        self.assertEqual(group, f"leaderboard.{self.contest.id}")
        self.assertEqual(message["payload"]["results"][0]["rank"], 1)
        self.assertEqual(message["payload"]["results"][0]["points"], 30)

    def test_nothing_sent_before_commit(self):
        with mock.patch("apps.pickem.signals._group_send") as send:
            ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        send.assert_not_called()
