from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from apps.pickem import aggregator
from apps.pickem.models import BreakdownPoints, Points, Team, Vote

from .factories import make_contest, make_match, make_profile

User = get_user_model()


class VoteAdminTests(TestCase):
    def setUp(self):
        self.root = User.objects.create_superuser(username="root", email="root@example.com", password="verysecurepass")
        self.client.force_login(self.root)
        self.sen = Team.objects.create(name="Sentinels", short_name="SEN")
        self.loud = Team.objects.create(name="LOUD", short_name="LOUD")
        self.match = make_match(make_contest(), self.sen, self.loud, days_from_today=-1)
        self.vote = Vote.objects.create(user=make_profile("alice"), match=self.match, vote_team=self.sen)

    def test_change_form_rejects_writes(self):
        url = reverse("admin:pickem_vote_change", args=[self.vote.pk])
        r = self.client.post(url, {"vote_team": str(self.loud.pk)})
        self.assertEqual(r.status_code, 403)
        self.assertEqual(Vote.objects.get(pk=self.vote.pk).vote_team_id, self.sen.pk)

    def test_add_and_delete_rejected(self):
        self.assertEqual(self.client.get(reverse("admin:pickem_vote_add")).status_code, 403)
        r = self.client.post(reverse("admin:pickem_vote_delete", args=[self.vote.pk]), {"post": "yes"})
        self.assertEqual(r.status_code, 403)
        self.assertTrue(Vote.objects.filter(pk=self.vote.pk).exists())

    def test_changelist_still_readable(self):
        self.assertEqual(self.client.get(reverse("admin:pickem_vote_changelist")).status_code, 200)


class PointsAdminTests(TestCase):
    def setUp(self):
        self.root = User.objects.create_superuser(username="root", email="root@example.com", password="verysecurepass")
        self.client.force_login(self.root)
        self.contest = make_contest()
        self.alice = make_profile("alice")
        aggregator.upsert_breakdown(self.root, self.alice.pk, self.contest.id, "americas", 40)
        aggregator.recompute_total(self.root, self.alice.pk, self.contest.id)
        self.points = Points.objects.get(user=self.alice, contest=self.contest)
        self.breakdown = BreakdownPoints.objects.get(points=self.points, region="americas")
        self.url = reverse("admin:pickem_points_change", args=[self.points.pk])

    def _inline(self, rows):
        data = {
            "breakdowns-TOTAL_FORMS": str(len(rows)),
            "breakdowns-INITIAL_FORMS": "1",
            "breakdowns-MIN_NUM_FORMS": "0",
            "breakdowns-MAX_NUM_FORMS": "1000",
            "_save": "Save",
        }
        for i, row in enumerate(rows):
            data[f"breakdowns-{i}-id"] = row.get("id", "")
            data[f"breakdowns-{i}-points"] = str(self.points.pk)
            data[f"breakdowns-{i}-region"] = row["region"]
            data[f"breakdowns-{i}-nr_points"] = str(row["nr_points"])
            data[f"breakdowns-{i}-source_handle"] = ""
        return data

    def test_inline_edit_recomputes_total(self):
        r = self.client.post(
            self.url, self._inline([{"id": str(self.breakdown.pk), "region": "americas", "nr_points": 90}])
        )
        self.assertEqual(r.status_code, 302)
        self.breakdown.refresh_from_db()
        self.assertEqual(self.breakdown.nr_points, 90)
        self.assertEqual(aggregator.get_total(self.alice.pk, self.contest.id), 90)

    def test_inline_add_recomputes_total(self):
        r = self.client.post(
            self.url,
            self._inline(
                [
                    {"id": str(self.breakdown.pk), "region": "americas", "nr_points": 40},
                    {"region": "emea", "nr_points": 25},
                ]
            ),
        )
        self.assertEqual(r.status_code, 302)
        self.assertEqual(aggregator.get_total(self.alice.pk, self.contest.id), 65)

    def test_existing_region_cannot_be_changed(self):
        r = self.client.post(
            self.url, self._inline([{"id": str(self.breakdown.pk), "region": "emea", "nr_points": 40}])
        )
        self.assertEqual(r.status_code, 302)
        self.breakdown.refresh_from_db()
        self.assertEqual(self.breakdown.region, "americas")
        self.assertEqual(aggregator.get_total(self.alice.pk, self.contest.id), 40)
