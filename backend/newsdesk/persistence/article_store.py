"""
Persistence for the Article → Section → {Paragraph, SectionImage} tree.

Nothing here commits. Callers own the transaction (see
``newsdesk.utils.transaction.transactional``) so a tree is either written
completely or not at all.
"""
from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from newsdesk.domain.exceptions import TreeWriteError
from newsdesk.domain.inputs import SectionInput
from newsdesk.extensions import db
from newsdesk.models import Article, Paragraph, Section, SectionImage


def build_section(article_id: str, s_data: SectionInput) -> Section:
    section = Section()
    section.article_id = article_id
    section.title = s_data.title.strip()
    section.order_index = s_data.order_index

    db.session.add(section)
    db.session.flush()  # Ensure section.id

    for p_data in s_data.paragraphs:
        paragraph = Paragraph()
        paragraph.section_id = section.id
        paragraph.content = p_data.content
        paragraph.order_index = p_data.order_index
        db.session.add(paragraph)

    for i_data in s_data.images:
        image = SectionImage()
        image.section_id = section.id
        image.url = i_data.url.strip()
        image.alt = i_data.alt
        image.order_index = i_data.order_index
        db.session.add(image)

    return section


def _insert_sections(article_id: str, sections: Sequence[SectionInput]) -> None:
    for s_data in sections:
        build_section(article_id, s_data)
    db.session.flush()


def create_tree(article: Article, sections: Sequence[SectionInput] = ()) -> Article:
    try:
        db.session.add(article)
        db.session.flush()  # ensures article.id is available

        _insert_sections(article.id, sections)
    except SQLAlchemyError as exc:
        raise TreeWriteError(f"Failed to write article tree: {exc}") from exc

    return find_tree(article.id)


def replace_children(article: Article, sections: Sequence[SectionInput]) -> Article:
    """
    Drop every section of ``article`` (paragraphs and images go with them)
    and insert ``sections`` in their place. No merging: the caller sends
    the complete desired tree.
    """
    try:
        article.sections.clear()
        db.session.flush()

        _insert_sections(article.id, sections)
    except SQLAlchemyError as exc:
        raise TreeWriteError(f"Failed to replace sections of article {article.id}: {exc}") from exc

    return find_tree(article.id)


def find_tree(article_id: str) -> Optional[Article]:
    stmt = (
        select(Article)
        .where(Article.id == article_id)
        .options(
            selectinload(Article.sections).selectinload(Section.paragraphs),
            selectinload(Article.sections).selectinload(Section.images),
        )
        .execution_options(populate_existing=True)
    )
    return db.session.execute(stmt).unique().scalar_one_or_none()


def delete_tree(article: Article) -> None:
    try:
        db.session.delete(article)
        db.session.flush()
    except SQLAlchemyError as exc:
        raise TreeWriteError(f"Failed to delete article {article.id}: {exc}") from exc


def section_image_urls(sections: Sequence[Section]) -> List[str]:
    return [image.url for section in sections for image in section.images if image.url]


def storage_urls(article: Article) -> List[str]:
    """Every media URL referenced by the tree; callers filter to storage-hosted ones."""
    urls = [article.image_url] if article.image_url else []
    return urls + section_image_urls(article.sections)
