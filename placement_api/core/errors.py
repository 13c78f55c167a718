"""
Error taxonomy.

Domain errors are HTTPExceptions, so services can raise them directly and
FastAPI routes them through the same handler as framework errors:

- ValidationError -> 400 (bad input, document link mismatch, eligibility)
- NotFoundError   -> 404
- ConflictError   -> 409 (duplicate identity, roll number, application)
- UpstreamError   -> 502 (external job search failure)
"""

from typing import Dict, Optional

from fastapi import HTTPException
from pymongo.errors import DuplicateKeyError


class PlacementError(HTTPException):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(status_code=self.status_code, detail=message)
        self.message = message
        self.details = details


class ValidationError(PlacementError):
    status_code = 400


class NotFoundError(PlacementError):
    status_code = 404


class ConflictError(PlacementError):
    status_code = 409

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message, details=details)
        self.field = field


class UpstreamError(PlacementError):
    status_code = 502


DEFAULT_DUPLICATE_MESSAGE = "Duplicate entry detected"


def _duplicate_field(exc: DuplicateKeyError, candidates) -> Optional[str]:
    details = exc.details or {}
    for key in ("keyPattern", "keyValue"):
        keys = details.get(key) or {}
        for field in candidates:
            if field in keys:
                return field
    # Older servers only report the index name in the message
    text = str(exc)
    for field in candidates:
        if field in text:
            return field
    return None


def conflict_from_duplicate_key(exc: DuplicateKeyError, messages: Dict[str, str]) -> ConflictError:
    """
    Translate a storage duplicate-key error into a ConflictError.

    `messages` maps a unique field name to the message shown when that field
    collided; the first field found in the error wins.
    """
    field = _duplicate_field(exc, list(messages))
    if field is None:
        return ConflictError(DEFAULT_DUPLICATE_MESSAGE, details=str(exc))
    return ConflictError(messages[field], field=field, details=str(exc))
