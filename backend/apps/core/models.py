from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from .guards import guarded_save


class GuardedModel(models.Model):
    """
    Base for rows whose writes go through the guards in apps.core.guards.
    Keeps the values each instance was loaded with for old/new comparisons.
    """

    IMMUTABLE_FIELDS: tuple = ()

    class Meta:
        abstract = True

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_values = dict(zip(field_names, values))
        return instance


class TimestampedModel(GuardedModel):
    IMMUTABLE_FIELDS = ("created_at",)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        abstract = True

    @guarded_save
    def save(self, *args, **kwargs):
        self.updated_at = timezone.now()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "updated_at"}
        super().save(*args, **kwargs)


class UserProfile(TimestampedModel):
    """
    Identity record: one per authenticated principal, provisioned on signup.
    user_id, provider_id and handle never change after creation. Only the owner
    may edit display_name, avatar_url and email.
    """

    IMMUTABLE_FIELDS = ("user_id", "provider_id", "handle", "created_at")
    EDITABLE_FIELDS = ("display_name", "avatar_url", "email")

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL, primary_key=True, on_delete=models.CASCADE, related_name="profile"
    )
    provider_id = models.CharField(max_length=191, unique=True)
    handle = models.CharField(max_length=150, unique=True)
    email = models.EmailField(null=True, blank=True)
    display_name = models.CharField(max_length=200, null=True, blank=True)
    avatar_url = models.URLField(max_length=500, null=True, blank=True)

    class Meta:
        indexes = [models.Index(fields=["handle"], name="core_profile_handle_idx")]

    def __str__(self) -> str:
        return self.handle

    @property
    def principal_id(self):
        return self.user_id
