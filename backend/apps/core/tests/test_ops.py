from __future__ import annotations

from django.test import TestCase
from rest_framework.test import APIClient


class OpsEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_healthz(self):
        r = self.client.get("/api/healthz")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["status"], "ok")

    def test_readiness(self):
        r = self.client.get("/api/readiness")
        self.assertEqual(r.status_code, 200)

    def test_metrics_exposes_counters(self):
        r = self.client.get("/api/metrics")
        self.assertEqual(r.status_code, 200)
        self.assertIn(b"pickem_votes", r.content)
