# newsdesk/api/v1/articles.py
import re

from flask import abort, current_app, jsonify, make_response, render_template_string, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from newsdesk.application.articles.create_article import create_article
from newsdesk.application.articles.delete_article import delete_article
from newsdesk.application.articles.get_article import get_article
from newsdesk.application.articles.list_articles import (
    list_articles,
    list_featured,
    list_latest,
    list_public,
)
from newsdesk.application.articles.toggle_article import toggle_featured, toggle_public
from newsdesk.application.articles.update_article import update_article
from newsdesk.extensions import db
from newsdesk.models import Article
from newsdesk.normalizers.article import normalize_article
from newsdesk.normalizers.pagination import normalize_pagination
from newsdesk.utils.decorators import current_role, roles_required
from newsdesk.utils.media import collect_uploads
from newsdesk.utils.optimistic_lock import enforce_optimistic_lock
from .forms import article_payload_from, list_query_from, read_body, uploads_by_field
from . import v1_bp


SHARE_DESCRIPTION_MAX = 300


def _is_admin() -> bool:
    return current_role() == "admin"


def _paginated(result, admin=False):
    items, total, page, limit = result
    return jsonify(
        normalize_pagination(
            items,
            lambda a: normalize_article(a, admin=admin, include_sections=False),
            page=page,
            limit=limit,
            total=total,
        )
    )


# ------------------------
# Listing
# ------------------------

@v1_bp.route("/articles", methods=["GET"])
def get_articles():
    query = list_query_from(request.args)
    admin = _is_admin()

    if not admin:
        # Visitors only ever see published articles
        return _paginated(list_public(query))

    return _paginated(list_articles(query), admin=True)


@v1_bp.route("/articles/public", methods=["GET"])
def get_public_articles():
    return _paginated(list_public(list_query_from(request.args)))


@v1_bp.route("/articles/featured", methods=["GET"])
def get_featured_articles():
    return _paginated(list_featured(list_query_from(request.args)))


@v1_bp.route("/articles/latest", methods=["GET"])
def get_latest_articles():
    return _paginated(list_latest(list_query_from(request.args)))


# ------------------------
# Single article
# ------------------------

@v1_bp.route("/articles/<article_id>", methods=["GET"])
def get_article_by_id(article_id):
    article = get_article(article_id)
    admin = _is_admin()

    if not article.is_public and not admin:
        abort(404, description=f"Article {article_id} not found")

    return jsonify(normalize_article(article, admin=admin))


@v1_bp.route("/articles", methods=["POST"])
@jwt_required()
@roles_required("admin")
def post_article():
    payload = article_payload_from(read_body())
    uploads = collect_uploads(uploads_by_field())

    article = create_article(
        payload=payload,
        uploads=uploads,
        actor_id=get_jwt_identity(),
    )

    return jsonify(normalize_article(article, admin=True)), 201


@v1_bp.route("/articles/<article_id>", methods=["PATCH", "PUT"])
@jwt_required()
@roles_required("admin")
def patch_article(article_id):
    # -----------------------
    # Optimistic Locking Check
    # -----------------------
    enforce_optimistic_lock(
        db.get_or_404(Article, article_id, description=f"Article {article_id} not found")
    )

    payload = article_payload_from(read_body())
    uploads = collect_uploads(uploads_by_field())

    article = update_article(article_id=article_id, payload=payload, uploads=uploads)

    return jsonify(normalize_article(article, admin=True)), 200


@v1_bp.route("/articles/<article_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def remove_article(article_id):
    delete_article(article_id=article_id)
    return jsonify({"message": "Article deleted successfully"}), 200


@v1_bp.route("/articles/<article_id>/toggle-featured", methods=["PATCH"])
@jwt_required()
@roles_required("admin")
def toggle_article_featured(article_id):
    article = toggle_featured(article_id=article_id)
    return jsonify(normalize_article(article, admin=True, include_sections=False)), 200


@v1_bp.route("/articles/<article_id>/toggle-public", methods=["PATCH"])
@jwt_required()
@roles_required("admin")
def toggle_article_public(article_id):
    article = toggle_public(article_id=article_id)
    return jsonify(normalize_article(article, admin=True, include_sections=False)), 200


# ------------------------
# Social share page (Open Graph / Twitter cards)
# ------------------------

SHARE_TEMPLATE = """<!doctype html>
<html lang="fr">
<head>
  <meta charset="utf-8" />
  <title>{{ title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <link rel="canonical" href="{{ canonical_url }}" />
  <meta property="og:title" content="{{ title }}" />
  <meta property="og:description" content="{{ description }}" />
  <meta property="og:image" content="{{ image_url }}" />
  <meta property="og:url" content="{{ canonical_url }}" />
  <meta property="og:type" content="article" />
  <meta name="twitter:card" content="summary_large_image" />
  <meta name="twitter:title" content="{{ title }}" />
  <meta name="twitter:description" content="{{ description }}" />
  <meta name="twitter:image" content="{{ image_url }}" />
  <meta http-equiv="refresh" content="0;url={{ canonical_url }}" />
</head>
<body>
  <a href="{{ canonical_url }}">{{ title }}</a>
</body>
</html>
"""


def _share_description(article) -> str:
    raw = article.summary or article.title or ""
    text = re.sub(r"\s+", " ", re.sub(r"<[^>]+>", " ", raw)).strip()
    if len(text) > SHARE_DESCRIPTION_MAX:
        text = text[: SHARE_DESCRIPTION_MAX - 1] + "…"
    return text


@v1_bp.route("/articles/<article_id>/share", methods=["GET"])
def share_article(article_id):
    article = get_article(article_id)
    if not article.is_public:
        abort(404, description=f"Article {article_id} not found")

    site_base = current_app.config["FRONTEND_URL"].rstrip("/")
    image_url = article.image_url or f"{site_base}/placeholder-blog.svg"
    if image_url.startswith("/"):
        image_url = f"{site_base}{image_url}"

    html = render_template_string(
        SHARE_TEMPLATE,
        title=article.title,
        description=_share_description(article),
        image_url=image_url,
        canonical_url=f"{site_base}/blog/{article.id}",
    )
    response = make_response(html, 200)
    response.headers["Content-Type"] = "text/html; charset=utf-8"
    return response
