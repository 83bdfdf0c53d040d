import logging
from typing import List, Sequence

from flask import current_app

from newsdesk.application.lookups import resolve_category
from newsdesk.domain.exceptions import ValidationFailure
from newsdesk.domain.inputs import ArticlePayload, UploadedFile
from newsdesk.domain.invariants.article import assert_article
from newsdesk.domain.lifecycle.article import set_public
from newsdesk.domain.validation import validate_article_payload
from newsdesk.extensions import db
from newsdesk.models import Article
from newsdesk.persistence.article_store import replace_children, section_image_urls
from newsdesk.utils.media import delete_many, recording_uploader
from newsdesk.utils.optimistic_lock import touch
from newsdesk.utils.placeholders import resolve_inline_images
from newsdesk.utils.transaction import transactional

logger = logging.getLogger(__name__)


def update_article(
    *,
    article_id: str,
    payload: ArticlePayload,
    uploads: Sequence[UploadedFile] = (),
) -> Article:
    """
    Partially update an article.

    Design rules:
    - Only fields present in the payload are validated and merged
    - ``sections`` replaces the whole tree (no merge)
    - ``replaceMainImage`` swaps the cover for the first uploaded file
    - Blobs that fall out of the article are removed after commit, best-effort
    """
    article = db.get_or_404(Article, article_id, description=f"Article {article_id} not found")

    report = validate_article_payload(
        payload,
        uploads,
        partial=True,
        category_lookup=resolve_category,
        max_image_size=current_app.config["MAX_IMAGE_SIZE"],
    )
    if not report.valid:
        logger.info("Article %s update rejected: %s", article_id, report.codes())
        raise ValidationFailure(report)

    folder = current_app.config["MEDIA_FOLDER"]
    uploaded: List[str] = []
    obsolete: List[str] = []
    upload = recording_uploader(uploaded)
    changed_fields: List[str] = []

    try:
        secondary = list(uploads)
        new_image_url = payload.image_url
        if payload.replace_main_image and secondary:
            new_image_url = upload(secondary.pop(0), folder)

        content = payload.content
        if secondary or (content and content.strip()):
            content = resolve_inline_images(
                content, secondary, folder=f"{folder}/inline", upload=upload
            )

        with transactional():
            if new_image_url and new_image_url != article.image_url:
                if article.image_url:
                    obsolete.append(article.image_url)
                article.image_url = new_image_url
                changed_fields.append("imageUrl")

            if payload.title is not None:
                article.title = payload.title.strip()
                changed_fields.append("title")

            if content is not None:
                article.content = content if content.strip() else None
                changed_fields.append("content")

            if payload.summary is not None:
                article.summary = payload.summary
                changed_fields.append("summary")

            if payload.category is not None:
                article.category_id = resolve_category(payload.category).id
                changed_fields.append("category")

            if payload.is_featured is not None:
                article.is_featured = payload.is_featured
                changed_fields.append("isFeatured")

            if payload.is_public is not None and set_public(article, payload.is_public):
                changed_fields.append("isPublic")

            if payload.sections is not None:
                previous_urls = set(section_image_urls(article.sections))
                article = touch(replace_children(article, payload.sections))
                kept_urls = set(section_image_urls(article.sections))
                obsolete.extend(sorted(previous_urls - kept_urls))
                changed_fields.append("sections")

            assert_article(article)

    except Exception:
        if uploaded:
            logger.warning(
                "Article %s update failed, removing %d uploaded file(s)",
                article_id,
                len(uploaded),
            )
            delete_many(uploaded)
        raise

    if obsolete:
        delete_many(obsolete)

    logger.info("Article %s updated: %s", article_id, changed_fields)
    return article
