from typing import Optional

from newsdesk.domain.exceptions import ValidationFailure
from newsdesk.domain.validation import ValidationReport, validate_paragraph_content
from newsdesk.extensions import db
from newsdesk.models import Paragraph
from newsdesk.utils.transaction import transactional
from .sections import get_section


def _next_order_index(section) -> int:
    orders = [p.order_index for p in section.paragraphs]
    return max(orders) + 1 if orders else 0


def _validate(content: Optional[str], order_index: Optional[int]) -> None:
    report = ValidationReport()
    if content is not None:
        validate_paragraph_content(report, "content", content)
    if order_index is not None and (
        not isinstance(order_index, int) or isinstance(order_index, bool) or order_index < 0
    ):
        report.add("orderIndex", "Order index must be a non-negative integer.", "ORDER_INDEX_INVALID")
    if not report.valid:
        raise ValidationFailure(report)


def get_paragraph(section_id: str, paragraph_id: str) -> Paragraph:
    return Paragraph.query.filter_by(id=paragraph_id, section_id=section_id).first_or_404(
        description=f"Paragraph {paragraph_id} not found"
    )


def add_paragraph(*, section_id: str, content: str, order_index: Optional[int] = None) -> Paragraph:
    section = get_section(section_id)
    _validate(content or "", order_index)

    paragraph = Paragraph()
    paragraph.section_id = section.id
    paragraph.content = content
    paragraph.order_index = order_index if order_index is not None else _next_order_index(section)

    with transactional():
        db.session.add(paragraph)

    return paragraph


def update_paragraph(
    *,
    section_id: str,
    paragraph_id: str,
    content: Optional[str] = None,
    order_index: Optional[int] = None,
) -> Paragraph:
    paragraph = get_paragraph(section_id, paragraph_id)
    _validate(content, order_index)

    with transactional():
        if content is not None:
            paragraph.content = content
        if order_index is not None:
            paragraph.order_index = order_index

    return paragraph


def delete_paragraph(*, section_id: str, paragraph_id: str) -> None:
    paragraph = get_paragraph(section_id, paragraph_id)

    with transactional():
        db.session.delete(paragraph)
