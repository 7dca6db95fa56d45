"""
ObjectId conversion helpers.

Quick conversions from hex strings to bson.ObjectId for use in custom
queries. A malformed string raises InvalidIdentifier unless the caller
explicitly opts into fallback, in which case a freshly generated ObjectId
is returned and a warning is logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bson import ObjectId
from bson.errors import InvalidId

from .exceptions import InvalidIdentifier

logger = logging.getLogger("mongoqb.identifiers")


def is_object_id(value: object) -> bool:
    """Return True if value is an ObjectId or a valid 24-char hex string."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and len(value) == 24 and ObjectId.is_valid(value)


def string_to_object_id(value: str | ObjectId, *, allow_fallback: bool = False) -> ObjectId:
    """
    Convert a hex string to an ObjectId.

    Args:
        value: 24-character hex string (an ObjectId is passed through)
        allow_fallback: Substitute a new ObjectId instead of raising

    Returns:
        The parsed ObjectId

    Raises:
        InvalidIdentifier: If value is not a valid ObjectId and
            allow_fallback is False
    """
    if isinstance(value, ObjectId):
        return value

    # ObjectId() also accepts 12-byte strings; only hex text is an identifier here
    if not isinstance(value, str) or len(value) != 24:
        return _fallback_or_raise(value, "expected a 24-character hex string", allow_fallback)

    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as e:
        return _fallback_or_raise(value, str(e), allow_fallback)


def strings_to_object_ids(
    values: Iterable[str | ObjectId], *, allow_fallback: bool = False
) -> list[ObjectId]:
    """Convert each value with string_to_object_id, preserving order."""
    return [string_to_object_id(v, allow_fallback=allow_fallback) for v in values]


def _fallback_or_raise(value: object, reason: str, allow_fallback: bool) -> ObjectId:
    if not allow_fallback:
        raise InvalidIdentifier(value, reason)
    substitute = ObjectId()
    logger.warning(
        f"Invalid ObjectId {value!r} ({reason}); substituting generated id {substitute}"
    )
    return substitute
