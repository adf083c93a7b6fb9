from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.core.exceptions import PermissionDenied
from django.test import TestCase
from rest_framework.test import APIClient

from apps.core.exceptions import NotFound
from apps.core.models import UserProfile
from apps.core.profiles import get_public_profile, list_all_public_profiles

User = get_user_model()


def provisioned(handle, **extra):
    user = User.objects.create_user(username=f"p-{handle}", email=f"{handle}@example.com", password="x")
    UserProfile.objects.create(user=user, provider_id=f"discord-{handle}", handle=handle, email=user.email, **extra)
    return user


class DirectoryServiceTests(TestCase):
    def setUp(self):
        self.carol = provisioned("carol")
        self.alice = provisioned("alice")
        self.bob = provisioned("bob")
        User.objects.create_user(username="p-pending", password="x")

    def test_sorted_by_handle_and_only_provisioned(self):
        rows = list_all_public_profiles(self.alice)
        self.assertEqual([p.handle for p in rows], ["alice", "bob", "carol"])

    def test_anonymous_rejected(self):
        with self.assertRaises(PermissionDenied):
            list_all_public_profiles(AnonymousUser())

    def test_single_public_profile(self):
        profile = get_public_profile(self.alice, self.bob.pk)
        self.assertEqual(profile.handle, "bob")
        self.assertFalse(hasattr(profile, "email"))
        with self.assertRaises(NotFound):
            get_public_profile(self.alice, 999999)
        with self.assertRaises(PermissionDenied):
            get_public_profile(AnonymousUser(), self.bob.pk)


class DirectoryApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.alice = provisioned("alice", display_name="Alice")
        self.bob = provisioned("bob")
        self.client = APIClient()
        self.client.force_authenticate(user=self.alice)

    def test_list_has_public_fields_only(self):
        r = self.client.get("/api/users")
        self.assertEqual(r.status_code, 200)
        self.assertEqual([row["handle"] for row in r.data["results"]], ["alice", "bob"])
        self.assertEqual(set(r.data["results"][0]), {"user_id", "handle", "display_name", "avatar_url"})
        self.assertNotIn("@example.com", str(r.data))

    def test_exclude_self(self):
        r = self.client.get("/api/users", {"exclude_self": "1"})
        self.assertEqual([row["handle"] for row in r.data["results"]], ["bob"])

    def test_anonymous_rejected(self):
        r = APIClient().get("/api/users")
        self.assertIn(r.status_code, (401, 403))

    def test_public_profile_lookup(self):
        r = self.client.get(f"/api/users/{self.bob.pk}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["handle"], "bob")
        self.assertEqual(self.client.get("/api/users/999999").status_code, 404)

    def test_public_profile_anonymous_rejected(self):
        r = APIClient().get(f"/api/users/{self.bob.pk}")
        self.assertIn(r.status_code, (401, 403))


class MeApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.alice = provisioned("alice")
        self.client = APIClient()
        self.client.force_authenticate(user=self.alice)

    def test_owner_sees_private_fields(self):
        r = self.client.get("/api/users/me")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["email"], "alice@example.com")
        self.assertEqual(r.data["provider_id"], "discord-alice")

    def test_patch_editable_fields(self):
        r = self.client.patch("/api/users/me", {"display_name": "Al", "avatar_url": ""}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["display_name"], "Al")
        self.assertIsNone(r.data["avatar_url"])

    def test_patch_handle_rejected(self):
        r = self.client.patch("/api/users/me", {"handle": "mallory"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["code"], "immutable_field")
        self.assertEqual(UserProfile.objects.get(pk=self.alice.pk).handle, "alice")
