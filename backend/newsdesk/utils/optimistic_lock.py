"""
Optimistic locking for article writes.

Editors echo the ``updatedAt`` they last read in ``If-Unmodified-Since``.
A write is refused once the article has moved past that instant. Rewriting
the section tree leaves the article row untouched, so the services that do
it call ``touch`` to move the article's clock forward themselves.
"""
from datetime import timezone

from dateutil.parser import ParserError, parse
from flask import abort, request

from newsdesk.models.base import utc_now

LOCK_HEADER = "If-Unmodified-Since"


def normalize_ts(ts):
    """Timezone-aware (UTC when naive) and at HTTP-date, whole-second precision."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.replace(microsecond=0)


def client_timestamp():
    """The lock timestamp sent by the client, or ``None`` when no lock was asked for."""
    raw = request.headers.get(LOCK_HEADER)
    if not raw:
        return None
    try:
        return normalize_ts(parse(raw))
    except (ParserError, ValueError, OverflowError):
        abort(400, description=f"Invalid {LOCK_HEADER} header")


def enforce_optimistic_lock(article):
    """
    Refuse the write with 409 when the article changed after the client's copy.
    Accepts HTTP dates and ISO 8601 (the ``updatedAt`` the API returns).
    """
    client_ts = client_timestamp()
    if client_ts is None or article.updated_at is None:
        return

    if normalize_ts(article.updated_at) > client_ts:
        abort(
            409,
            description=f"Conflict detected. Article {article.id} has been modified."
        )


def touch(article):
    article.updated_at = utc_now()
    return article
