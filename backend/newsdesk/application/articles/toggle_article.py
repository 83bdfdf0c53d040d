import logging

from newsdesk.domain.lifecycle.article import set_public
from newsdesk.extensions import db
from newsdesk.models import Article
from newsdesk.utils.transaction import transactional

logger = logging.getLogger(__name__)


def toggle_featured(*, article_id: str) -> Article:
    article = db.get_or_404(Article, article_id, description=f"Article {article_id} not found")

    with transactional():
        article.is_featured = not article.is_featured

    logger.info("Article %s featured=%s", article_id, article.is_featured)
    return article


def toggle_public(*, article_id: str) -> Article:
    """Publish a draft/unpublished article, or unpublish a published one."""
    article = db.get_or_404(Article, article_id, description=f"Article {article_id} not found")

    with transactional():
        set_public(article, not article.is_public)

    logger.info("Article %s public=%s", article_id, article.is_public)
    return article
