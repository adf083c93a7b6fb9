from __future__ import annotations

from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from apps.pickem import aggregator
from apps.pickem.models import Contest, Match, Points, Team

from .factories import make_contest, make_match, make_profile


class LeaderboardApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.contest = make_contest()
        self.staff = make_profile("ingest", staff=True).user
        self.alice = make_profile("alice")
        self.bob = make_profile("bob")
        self.carol = make_profile("carol")
        for profile, pts in ((self.alice, 100), (self.bob, 100), (self.carol, 50)):
            aggregator.upsert_breakdown(self.staff, profile.pk, self.contest.id, "americas", pts)
            aggregator.recompute_total(self.staff, profile.pk, self.contest.id)

    def test_dense_ranking(self):
        r = self.client.get(f"/api/contests/{self.contest.id}/leaderboard")
        self.assertEqual(r.status_code, 200)
        rows = r.data["results"]
        self.assertEqual([row["handle"] for row in rows], ["alice", "bob", "carol"])
        self.assertEqual([row["rank"] for row in rows], [1, 1, 2])
        self.assertEqual(set(rows[0]), {"rank", "user_id", "handle", "display_name", "avatar_url", "points"})

    def test_points_detail(self):
        r = self.client.get(f"/api/contests/{self.contest.id}/points/{self.carol.pk}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["points"], 50)
        self.assertEqual(r.data["breakdowns"], [{"region": "americas", "points": 50}])

    def test_unknown_contest_404(self):
        r = self.client.get("/api/contests/00000000-0000-0000-0000-000000000000/leaderboard")
        self.assertEqual(r.status_code, 404)


class AdminPointsApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.contest = make_contest()
        self.staff = make_profile("ingest", staff=True).user
        self.staff_client = APIClient()
        self.staff_client.force_authenticate(user=self.staff)
        self.alice = make_profile("alice")
        self.alice_client = APIClient()
        self.alice_client.force_authenticate(user=self.alice.user)

    def test_breakdown_upsert_recomputes_total(self):
        url = "/api/admin/points/breakdown"
        body = {"user_id": self.alice.pk, "contest_id": str(self.contest.id), "region": "americas", "points": 40}
        r = self.staff_client.post(url, body, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["total"], 40)
        r = self.staff_client.post(url, {**body, "region": "EMEA", "points": 25}, format="json")
        self.assertEqual(r.data["region"], "emea")
        self.assertEqual(r.data["total"], 65)

    def test_recompute_endpoint(self):
        aggregator.upsert_breakdown(self.staff, self.alice.pk, self.contest.id, "china", 12)
        r = self.staff_client.post(
            "/api/admin/points/recompute",
            {"user_id": self.alice.pk, "contest_id": str(self.contest.id)},
            format="json",
        )
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["total"], 12)

    def test_non_staff_cannot_write_points(self):
        body = {"user_id": self.alice.pk, "contest_id": str(self.contest.id), "region": "americas", "points": 999}
        r = self.alice_client.post("/api/admin/points/breakdown", body, format="json")
        self.assertEqual(r.status_code, 403)
        r = self.alice_client.post(
            "/api/admin/stars",
            {"user_id": self.alice.pk, "contest_id": str(self.contest.id), "category": "kickoff_winner"},
            format="json",
        )
        self.assertEqual(r.status_code, 403)
        self.assertFalse(Points.objects.exists())

    def test_award_and_list_stars(self):
        r = self.staff_client.post(
            "/api/admin/stars",
            {"user_id": self.alice.pk, "contest_id": str(self.contest.id), "category": "masters_winner"},
            format="json",
        )
        self.assertEqual(r.status_code, 201)
        r = APIClient().get(f"/api/contests/{self.contest.id}/stars")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["results"][0]["category"], "masters_winner")
        self.assertEqual(r.data["results"][0]["user"]["handle"], "alice")
        self.assertNotIn("alice@example.com", str(r.data))


class AdminIngestionApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.client.force_authenticate(user=make_profile("ingest", staff=True).user)
        self.contest = make_contest()
        self.sen = Team.objects.create(name="Sentinels", short_name="SEN")
        self.loud = Team.objects.create(name="LOUD", short_name="LOUD")

    def test_create_team_generates_slug(self):
        r = self.client.post("/api/admin/teams", {"name": "LEVIATÁN", "short_name": "LEV"}, format="json")
        self.assertEqual(r.status_code, 201)
        self.assertEqual(r.data["slug"], "leviatan")

    def test_duplicate_short_name_conflict(self):
        r = self.client.post("/api/admin/teams", {"name": "Sentinels Academy", "short_name": "sen"}, format="json")
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.data["code"], "conflict")

    def test_match_contest_immutable(self):
        match = make_match(self.contest, self.sen, self.loud)
        other = make_contest("Masters Toronto")
        r = self.client.patch(f"/api/admin/matches/{match.id}", {"contest": str(other.id)}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "immutable_field")
        self.assertEqual(Match.objects.get(pk=match.pk).contest_id, self.contest.id)

    def test_set_winner(self):
        match = make_match(self.contest, self.sen, self.loud)
        r = self.client.patch(f"/api/admin/matches/{match.id}", {"winner": str(self.sen.id)}, format="json")
        self.assertEqual(r.status_code, 200)
        r = APIClient().get(f"/api/matches/{match.id}")
        self.assertTrue(r.data["locked"])

    def test_contests_cannot_be_deleted(self):
        r = self.client.delete(f"/api/admin/contests/{self.contest.id}")
        self.assertEqual(r.status_code, 405)
        self.assertTrue(Contest.objects.filter(pk=self.contest.pk).exists())

    def test_non_staff_rejected(self):
        anon = APIClient()
        r = anon.post("/api/admin/teams", {"name": "X", "short_name": "X"}, format="json")
        self.assertIn(r.status_code, (401, 403))
