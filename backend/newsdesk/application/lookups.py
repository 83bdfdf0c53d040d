from typing import Optional

from sqlalchemy import func

from newsdesk.extensions import db
from newsdesk.models import Category


def resolve_category(ref: Optional[str]) -> Optional[Category]:
    """Find a category by id, then by name (case-insensitive), then by slug."""
    ref = (ref or "").strip()
    if not ref:
        return None

    category = db.session.get(Category, ref)
    if category:
        return category

    return (
        Category.query.filter(func.lower(Category.name) == ref.lower()).first()
        or Category.query.filter_by(slug=ref.lower()).first()
    )
