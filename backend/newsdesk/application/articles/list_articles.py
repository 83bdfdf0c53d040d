from dataclasses import replace
from typing import List, Tuple

from sqlalchemy import func, or_
from werkzeug.exceptions import BadRequest

from newsdesk.domain.inputs import ArticleListQuery
from newsdesk.models import Article, Category

MAX_LIMIT = 100
LATEST_LIMIT = 5

SORTABLE_COLUMNS = {
    "createdAt": Article.created_at,
    "updatedAt": Article.updated_at,
    "publishedAt": Article.published_at,
    "title": Article.title,
}


def _filtered_query(query: ArticleListQuery):
    q = Article.query

    if query.search:
        q = q.filter(Article.title.ilike(f"%{query.search.strip()}%"))

    if query.is_public is not None:
        q = q.filter(Article.is_public.is_(query.is_public))

    if query.is_featured is not None:
        q = q.filter(Article.is_featured.is_(query.is_featured))

    if query.category:
        ref = query.category.strip()
        q = q.outerjoin(Category, Article.category_id == Category.id).filter(
            or_(
                Article.category_id == ref,
                func.lower(Category.name) == ref.lower(),
                Category.slug == ref.lower(),
            )
        )

    return q


def _ordering(query: ArticleListQuery):
    column = SORTABLE_COLUMNS.get(query.sort_by)
    if column is None:
        raise BadRequest(
            f"Cannot sort by '{query.sort_by}'. Allowed: {', '.join(sorted(SORTABLE_COLUMNS))}"
        )
    if (query.sort_order or "desc").lower() == "asc":
        return column.asc(), Article.id.asc()
    return column.desc(), Article.id.desc()


def list_articles(query: ArticleListQuery) -> Tuple[List[Article], int, int, int]:
    """
    Filter, sort and paginate articles.

    Returns (items, total, page, limit) with page/limit normalised.
    """
    page = max(query.page or 1, 1)
    limit = min(max(query.limit or 10, 1), MAX_LIMIT)

    pagination = (
        _filtered_query(query)
        .order_by(*_ordering(query))
        .paginate(page=page, per_page=limit, error_out=False)
    )
    return pagination.items, pagination.total, page, limit


def list_public(query: ArticleListQuery):
    return list_articles(replace(query, is_public=True))


def list_featured(query: ArticleListQuery):
    # Only published articles are ever shown publicly, featured or not
    return list_articles(replace(query, is_featured=True, is_public=True))


def list_latest(query: ArticleListQuery):
    return list_articles(
        replace(
            query,
            is_public=True,
            page=1,
            limit=min(query.limit or LATEST_LIMIT, LATEST_LIMIT),
            sort_by="createdAt",
            sort_order="desc",
        )
    )
