from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class PickemError(Exception):
    """
    Base class for rejected writes.
    Each subclass carries the HTTP status and stable machine code it is rendered with.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"

    def __init__(self, message: str = "", **details):
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details


class ImmutableFieldViolation(PickemError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "immutable_field"

    def __init__(self, model: str, field: str):
        super().__init__(f"{field} cannot be changed", model=model, field=field)
        self.model = model
        self.field = field


class InsertOnlyViolation(ImmutableFieldViolation):
    """Any write to an existing row of an insert-only model."""

    code = "insert_only"

    def __init__(self, model: str):
        PickemError.__init__(self, f"existing {model} rows cannot be changed", model=model)
        self.model = model
        self.field = None


class Conflict(PickemError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class AlreadyLocked(PickemError):
    status_code = status.HTTP_423_LOCKED
    code = "locked"


class NotFound(PickemError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class MissingRequiredClaim(PickemError):
    code = "missing_claim"

    def __init__(self, claim: str, principal_id=None):
        super().__init__(f"missing required claim '{claim}'", claim=claim, principal_id=principal_id)
        self.claim = claim


def api_exception_handler(exc, context):
    if isinstance(exc, PickemError):
        view = context.get("view")
        logger.info(
            "rejected write: %s (%s) in %s", exc.message, exc.code, view.__class__.__name__ if view else "-"
        )
        return Response({"detail": exc.message, "code": exc.code}, status=exc.status_code)
    return exception_handler(exc, context)
