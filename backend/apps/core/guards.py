"""
Write guards shared by every store.

- Immutable fields: each guarded model lists the attnames that may never change
  once a row exists. The check compares the values the row was loaded with (or,
  for instances not loaded from the database, the persisted row) against the
  values about to be written, and rejects with ImmutableFieldViolation before
  anything reaches the database.
- Insert-only rows: any write to an existing row is rejected.
- Caller roles: operations declare which roles may invoke them; everything else
  is denied. The actor is always the authenticated request user.
"""

from __future__ import annotations

import functools
import logging
from typing import Iterable, Optional

from django.core.exceptions import PermissionDenied

from .exceptions import ImmutableFieldViolation, InsertOnlyViolation
from .metrics import immutable_violations_total

logger = logging.getLogger(__name__)

ROLE_ANONYMOUS = "anonymous"
ROLE_AUTHENTICATED = "authenticated"
ROLE_BACKEND = "backend"


def _persisted_values(instance, fields: Iterable[str]) -> Optional[dict]:
    fields = tuple(fields)
    loaded = getattr(instance, "_loaded_values", None)
    if loaded is not None and all(name in loaded for name in fields):
        return loaded
    pk_name = instance._meta.pk.attname
    pk = (loaded or {}).get(pk_name, instance.pk)
    if pk is None:
        return None
    return (
        type(instance)._base_manager.using(instance._state.db or "default")
        .filter(pk=pk)
        .values(*fields)
        .first()
    )


def snapshot(instance) -> None:
    """Remember the values just written so the next save compares against them."""
    instance._loaded_values = {
        f.attname: instance.__dict__[f.attname]
        for f in instance._meta.concrete_fields
        if f.attname in instance.__dict__
    }


def immutable_violation(instance, fields: Iterable[str]) -> Optional[ImmutableFieldViolation]:
    """
    Compare old/new values of `fields` and return the first violation, or None.
    New rows (nothing persisted yet) never violate.
    """
    fields = tuple(fields)
    if not fields:
        return None
    persisted = _persisted_values(instance, fields)
    if persisted is None:
        return None
    for name in fields:
        if name in persisted and persisted[name] != getattr(instance, name):
            return ImmutableFieldViolation(instance._meta.model_name, name)
    return None


def _reject(instance, violation: ImmutableFieldViolation):
    immutable_violations_total.labels(model=instance._meta.model_name).inc()
    logger.warning(
        "immutable field violation on %s pk=%s field=%s",
        instance._meta.model_name,
        instance.pk,
        violation.field,
    )
    raise violation


def guarded_save(save):
    """Wrap Model.save so immutable fields (cls.IMMUTABLE_FIELDS) are checked on every write."""

    @functools.wraps(save)
    def wrapper(self, *args, **kwargs):
        violation = immutable_violation(self, type(self).IMMUTABLE_FIELDS)
        if violation is not None:
            _reject(self, violation)
        result = save(self, *args, **kwargs)
        snapshot(self)
        return result

    return wrapper


def insert_only(save):
    """Wrap Model.save so only the initial insert is allowed."""

    @functools.wraps(save)
    def wrapper(self, *args, **kwargs):
        pk_name = self._meta.pk.attname
        if _persisted_values(self, (pk_name,)) is not None:
            _reject(self, InsertOnlyViolation(self._meta.model_name))
        result = save(self, *args, **kwargs)
        snapshot(self)
        return result

    return wrapper


def roles_of(actor) -> frozenset:
    if actor is None or not getattr(actor, "is_authenticated", False):
        return frozenset({ROLE_ANONYMOUS})
    roles = {ROLE_AUTHENTICATED}
    if getattr(actor, "is_staff", False):
        roles.add(ROLE_BACKEND)
    return frozenset(roles)


def allow_roles(*allowed: str):
    """
    Allow-list the caller roles of an operation whose first argument is the acting user.
    """
    allowed_set = frozenset(allowed)

    def decorator(func):
        @functools.wraps(func)
        def wrapper(actor, *args, **kwargs):
            if not roles_of(actor) & allowed_set:
                logger.warning(
                    "denied %s for actor=%s (allowed roles: %s)",
                    func.__name__,
                    getattr(actor, "pk", None),
                    ", ".join(sorted(allowed_set)),
                )
                raise PermissionDenied(f"{func.__name__} is not permitted for this caller")
            return func(actor, *args, **kwargs)

        return wrapper

    return decorator


requires_backend_role = allow_roles(ROLE_BACKEND)
requires_authenticated = allow_roles(ROLE_AUTHENTICATED)
