from __future__ import annotations

from django.dispatch import Signal, receiver

from .provisioning import provision_principal

# Sent by the auth provider hook once per upstream principal creation.
# kwargs: user, claims
principal_created = Signal()


@receiver(principal_created)
def provision_profile_on_principal_created(sender, user, claims=None, **kwargs):
    return provision_principal(user, claims)
