import logging
from typing import List, Optional, Sequence

from flask import current_app

from newsdesk.application.lookups import resolve_category
from newsdesk.domain.exceptions import ValidationFailure
from newsdesk.domain.inputs import ArticlePayload, UploadedFile
from newsdesk.domain.invariants.article import assert_article
from newsdesk.domain.lifecycle.article import set_public
from newsdesk.domain.validation import validate_article_payload
from newsdesk.extensions import db
from newsdesk.models import Article, User
from newsdesk.persistence.article_store import create_tree
from newsdesk.utils.media import delete_many, recording_uploader
from newsdesk.utils.placeholders import resolve_inline_images
from newsdesk.utils.transaction import transactional

logger = logging.getLogger(__name__)


def create_article(
    *,
    payload: ArticlePayload,
    uploads: Sequence[UploadedFile] = (),
    actor_id: Optional[str] = None,
) -> Article:
    """
    Create an article together with its section tree.

    Responsibilities:
    - Validate the whole payload before any write
    - Cover image: explicit imageUrl, else the first uploaded file
    - Resolve {{IMAGE_n}} markers in legacy content against remaining files
    - Write the tree in one transaction
    - Remove blobs uploaded by this call if the write fails
    """
    report = validate_article_payload(
        payload,
        uploads,
        category_lookup=resolve_category,
        max_image_size=current_app.config["MAX_IMAGE_SIZE"],
    )
    if not report.valid:
        logger.info("Article create rejected: %s", report.codes())
        raise ValidationFailure(report)

    folder = current_app.config["MEDIA_FOLDER"]
    uploaded: List[str] = []
    upload = recording_uploader(uploaded)

    try:
        image_url = payload.image_url
        secondary = list(uploads)
        if not image_url and secondary:
            image_url = upload(secondary.pop(0), folder)

        content = payload.content if payload.content and payload.content.strip() else None
        if content or secondary:
            content = resolve_inline_images(
                content, secondary, folder=f"{folder}/inline", upload=upload
            )

        article = Article()
        article.title = payload.title.strip()
        article.content = content
        article.summary = payload.summary
        article.image_url = image_url
        article.category_id = resolve_category(payload.category).id
        article.is_public = False
        article.is_featured = bool(payload.is_featured)
        if actor_id and db.session.get(User, actor_id):
            article.author_id = actor_id
        if payload.is_public:
            set_public(article, True)

        with transactional():
            article = create_tree(article, payload.sections or [])

            # 🔒 Structural invariants on what was actually written
            assert_article(article)

    except Exception:
        if uploaded:
            logger.warning(
                "Article create failed, removing %d uploaded file(s)", len(uploaded)
            )
            delete_many(uploaded)
        raise

    logger.info(
        "Article %s created with %d section(s)", article.id, len(payload.sections or [])
    )
    return article
