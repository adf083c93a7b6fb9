"""
Public projection of identity records.

Every identity record that leaves its owner goes through `project`; callers
never pick columns themselves. email and provider_id are not part of the
public shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

# Columns a cross-principal query may select
PUBLIC_PROFILE_FIELDS = ("user", "handle", "display_name", "avatar_url")


@dataclass(frozen=True)
class PublicProfile:
    principal_id: int
    handle: str
    display_name: Optional[str]
    avatar_url: Optional[str]


def project(record) -> PublicProfile:
    return PublicProfile(
        principal_id=record.user_id,
        handle=record.handle,
        display_name=record.display_name,
        avatar_url=record.avatar_url,
    )


def display_name_for(profile: PublicProfile) -> str:
    return profile.display_name or profile.handle


def avatar_fallback(profile: PublicProfile) -> str:
    name = display_name_for(profile)
    return name[0].upper() if name else "?"


def exclude_principal(profiles: Iterable[PublicProfile], principal_id) -> List[PublicProfile]:
    return [p for p in profiles if p.principal_id != principal_id]
