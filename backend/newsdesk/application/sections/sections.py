import logging
from typing import List

from sqlalchemy.orm import selectinload

from newsdesk.domain.exceptions import ValidationFailure
from newsdesk.extensions import db
from newsdesk.models import Article, Section
from newsdesk.persistence.article_store import section_image_urls
from newsdesk.utils.media import delete_many
from newsdesk.utils.transaction import transactional

logger = logging.getLogger(__name__)


def get_section(section_id: str) -> Section:
    return db.get_or_404(Section, section_id, description=f"Section {section_id} not found")


def list_sections(article_id: str) -> List[Section]:
    db.get_or_404(Article, article_id, description=f"Article {article_id} not found")

    return (
        Section.query
        .options(selectinload(Section.paragraphs), selectinload(Section.images))
        .filter_by(article_id=article_id)
        .order_by(Section.order_index.asc(), Section.created_at.asc())
        .all()
    )


def reorder_section(*, section_id: str, order_index: int) -> Section:
    section = get_section(section_id)

    if not isinstance(order_index, int) or isinstance(order_index, bool) or order_index < 0:
        raise ValidationFailure.single(
            "orderIndex", "Order index must be a non-negative integer.", "ORDER_INDEX_INVALID"
        )

    with transactional():
        section.order_index = order_index

    return section


def delete_section(*, section_id: str) -> None:
    """Delete one section; its stored images are removed after commit, best-effort."""
    section = get_section(section_id)
    media_to_cleanup = section_image_urls([section])

    with transactional():
        db.session.delete(section)

    delete_many(media_to_cleanup)
    logger.info("Section %s deleted", section_id)
