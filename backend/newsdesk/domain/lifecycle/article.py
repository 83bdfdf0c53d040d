from datetime import datetime, timezone
from typing import Set

from ..exceptions import IllegalTransition

DRAFT = "draft"
PUBLISHED = "published"
UNPUBLISHED = "unpublished"

# Explicit allowed state transitions
ALLOWED_ARTICLE_TRANSITIONS: dict[str, Set[str]] = {
    DRAFT: {PUBLISHED},
    PUBLISHED: {UNPUBLISHED},
    UNPUBLISHED: {PUBLISHED},
}


def article_status(article) -> str:
    if article.is_public:
        return PUBLISHED
    if article.published_at is not None:
        return UNPUBLISHED
    return DRAFT


def assert_article_transition(*, from_status: str, to_status: str) -> None:
    """
    Guards article publication changes.
    Featured is an independent flag and never goes through here.
    """
    allowed = ALLOWED_ARTICLE_TRANSITIONS.get(from_status, set())

    if to_status not in allowed:
        raise IllegalTransition(
            f"Illegal article transition: {from_status} → {to_status}"
        )


def set_public(article, is_public: bool) -> bool:
    """
    Move ``article`` to published/unpublished. Returns False when it is
    already in the requested visibility.
    """
    current = article_status(article)
    if bool(article.is_public) == bool(is_public):
        return False

    target = PUBLISHED if is_public else UNPUBLISHED
    assert_article_transition(from_status=current, to_status=target)

    article.is_public = bool(is_public)
    if is_public and article.published_at is None:
        article.published_at = datetime.now(timezone.utc)
    return True
