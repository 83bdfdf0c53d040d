from typing import Any, Dict, Optional

from newsdesk.domain.lifecycle.article import article_status
from .section import normalize_section


def author_display_name(user) -> Optional[str]:
    """Explicit display name, else "first last", else None."""
    if user is None:
        return None
    if user.display_name and user.display_name.strip():
        return user.display_name.strip()
    return user.full_name


def _iso(value):
    return value.isoformat() if value else None


def normalize_article(article, admin=False, include_sections=True) -> Dict[str, Any]:
    """
    API view of an article. The author relation is never exposed;
    only ``authorName`` is.
    """
    data = {
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "summary": article.summary,
        "imageUrl": article.image_url,
        "categoryId": article.category_id,
        "category": article.category.name if article.category else None,
        "isPublic": bool(article.is_public),
        "isFeatured": bool(article.is_featured),
        "publishedAt": _iso(article.published_at),
        "authorName": author_display_name(article.author),
        "createdAt": _iso(article.created_at),
        "updatedAt": _iso(article.updated_at),
    }

    if admin:
        data["status"] = article_status(article)
        data["authorId"] = article.author_id

    if include_sections:
        sections = sorted(article.sections, key=lambda s: s.order_index)
        data["sections"] = [
            normalize_section(s, admin=admin, include_children=True)
            for s in sections
        ]

    return data
