from __future__ import annotations

import uuid
from decimal import Decimal

from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied
from django.test import TestCase

from apps.core.exceptions import AlreadyLocked, NotFound
from apps.pickem import ledger
from apps.pickem.models import Match, Team, Vote

from .factories import make_contest, make_match, make_profile


class LedgerTests(TestCase):
    def setUp(self):
        self.contest = make_contest()
        self.sen = Team.objects.create(name="Sentinels", short_name="SEN")
        self.loud = Team.objects.create(name="LOUD", short_name="LOUD")
        self.fnc = Team.objects.create(name="Fnatic", short_name="FNC")
        self.match = make_match(self.contest, self.sen, self.loud)
        self.alice = make_profile("alice")
        self.bob = make_profile("bob")
        self.carol = make_profile("carol")

    def test_cast_then_update_keeps_single_row(self):
        vote, created = ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        self.assertTrue(created)
        again, created = ledger.cast_or_update(self.alice.user, self.match.id, self.loud.id)
        self.assertFalse(created)
        self.assertEqual(again.pk, vote.pk)
        self.assertEqual(Vote.objects.filter(user=self.alice, match=self.match).count(), 1)
        self.assertEqual(Vote.objects.get(pk=vote.pk).vote_team_id, self.loud.id)

    def test_team_not_playing_rejected(self):
        with self.assertRaises(NotFound):
            ledger.cast_or_update(self.alice.user, self.match.id, self.fnc.id)
        self.assertFalse(Vote.objects.exists())

    def test_unknown_match_and_team(self):
        with self.assertRaises(NotFound):
            ledger.cast_or_update(self.alice.user, uuid.uuid4(), self.sen.id)
        with self.assertRaises(NotFound):
            ledger.cast_or_update(self.alice.user, self.match.id, uuid.uuid4())

    def test_locked_match_rejects_cast_and_retract(self):
        ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        Match.objects.filter(pk=self.match.pk).update(winner=self.sen)
        with self.assertRaises(AlreadyLocked):
            ledger.cast_or_update(self.alice.user, self.match.id, self.loud.id)
        with self.assertRaises(AlreadyLocked):
            ledger.retract(self.alice.user, self.match.id)
        self.assertEqual(Vote.objects.get(user=self.alice).vote_team_id, self.sen.id)

    def test_started_match_is_locked(self):
        past = make_match(self.contest, self.sen, self.loud, days_from_today=-1)
        self.assertTrue(ledger.is_locked(past.id))
        with self.assertRaises(AlreadyLocked):
            ledger.cast_or_update(self.alice.user, past.id, self.sen.id)

    def test_retract(self):
        ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        self.assertTrue(ledger.retract(self.alice.user, self.match.id))
        self.assertFalse(ledger.retract(self.alice.user, self.match.id))
        self.assertFalse(Vote.objects.exists())

    def test_retract_only_touches_own_vote(self):
        ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        self.assertFalse(ledger.retract(self.bob.user, self.match.id))
        self.assertEqual(Vote.objects.count(), 1)

    def test_anonymous_cannot_vote(self):
        with self.assertRaises(PermissionDenied):
            ledger.cast_or_update(AnonymousUser(), self.match.id, self.sen.id)

    def test_stats_percentages(self):
        ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        ledger.cast_or_update(self.bob.user, self.match.id, self.sen.id)
        ledger.cast_or_update(self.carol.user, self.match.id, self.loud.id)
        stats = ledger.stats(self.match.id)
        self.assertEqual(stats[self.sen.id], {"count": 2, "percentage": Decimal("66.67")})
        self.assertEqual(stats[self.loud.id], {"count": 1, "percentage": Decimal("33.33")})

    def test_stats_ignore_votes_without_team(self):
        ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        ledger.cast_or_update(self.bob.user, self.match.id, self.loud.id)
        Vote.objects.filter(user=self.bob).update(vote_team=None)
        stats = ledger.stats(self.match.id)
        self.assertEqual(list(stats), [self.sen.id])
        self.assertEqual(stats[self.sen.id]["percentage"], Decimal("100.00"))

    def test_stats_empty(self):
        self.assertEqual(ledger.stats(self.match.id), {})

    def test_list_for_match(self):
        ledger.cast_or_update(self.alice.user, self.match.id, self.sen.id)
        ledger.cast_or_update(self.bob.user, self.match.id, self.loud.id)
        votes = ledger.list_for_match(self.match.id)
        self.assertEqual({v.user_id for v in votes}, {self.alice.pk, self.bob.pk})
