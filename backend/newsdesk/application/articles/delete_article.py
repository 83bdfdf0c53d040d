import logging

from flask import abort

from newsdesk.persistence.article_store import delete_tree, find_tree, storage_urls
from newsdesk.utils.media import delete_many
from newsdesk.utils.transaction import transactional

logger = logging.getLogger(__name__)


def delete_article(*, article_id: str) -> None:
    """
    Hard-delete an article and its whole tree.

    Notes:
    - Sections, paragraphs and images go through the database cascade
    - Cover and section images in object storage are removed after commit;
      a failed blob delete is logged and never fails the request
    """
    article = find_tree(article_id)
    if article is None:
        abort(404, description=f"Article {article_id} not found")

    media_to_cleanup = storage_urls(article)

    with transactional():
        delete_tree(article)

    # Cleanup media outside transaction
    deleted = delete_many(media_to_cleanup)
    logger.info(
        "Article %s deleted (%d/%d media file(s) removed)",
        article_id,
        deleted,
        len(media_to_cleanup),
    )
