from typing import Any, Callable, Dict, List


def normalize_pagination(
    items: List[Any],
    normalize_fn: Callable[[Any], Dict[str, Any]],
    *,
    page: int,
    limit: int,
    total: int,
) -> Dict[str, Any]:
    """
    Offset-paginated list response:
    {"items": [...], "pagination": {"page", "limit", "total", "totalPages"}}
    """
    return {
        "items": [normalize_fn(item) for item in items],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": (total + limit - 1) // limit if limit else 0,
        },
    }
