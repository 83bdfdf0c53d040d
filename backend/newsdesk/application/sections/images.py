import logging
from typing import Optional

from flask import current_app

from newsdesk.domain.exceptions import ValidationFailure
from newsdesk.domain.inputs import UploadedFile
from newsdesk.domain.validation import ValidationReport, validate_section_image_url, validate_uploads
from newsdesk.extensions import db
from newsdesk.models import SectionImage
from newsdesk.utils.media import delete_by_url, upload_one
from newsdesk.utils.transaction import transactional
from .sections import get_section

logger = logging.getLogger(__name__)


def _next_order_index(section) -> int:
    orders = [image.order_index for image in section.images]
    return max(orders) + 1 if orders else 0


def _check_order_index(report: ValidationReport, order_index: Optional[int]) -> None:
    if order_index is not None and (
        not isinstance(order_index, int) or isinstance(order_index, bool) or order_index < 0
    ):
        report.add("orderIndex", "Order index must be a non-negative integer.", "ORDER_INDEX_INVALID")


def get_image(section_id: str, image_id: str) -> SectionImage:
    return SectionImage.query.filter_by(id=image_id, section_id=section_id).first_or_404(
        description=f"Section image {image_id} not found"
    )


def _insert_image(section, url: str, alt: Optional[str], order_index: Optional[int]) -> SectionImage:
    image = SectionImage()
    image.section_id = section.id
    image.url = url
    image.alt = alt
    image.order_index = order_index if order_index is not None else _next_order_index(section)

    with transactional():
        db.session.add(image)

    return image


def add_section_image(
    *,
    section_id: str,
    url: str,
    alt: Optional[str] = None,
    order_index: Optional[int] = None,
) -> SectionImage:
    section = get_section(section_id)

    report = ValidationReport()
    validate_section_image_url(report, "url", url)
    _check_order_index(report, order_index)
    if not report.valid:
        raise ValidationFailure(report)

    return _insert_image(section, url.strip(), alt, order_index)


def upload_section_image(
    *,
    section_id: str,
    upload: UploadedFile,
    alt: Optional[str] = None,
    order_index: Optional[int] = None,
) -> SectionImage:
    """Store the file under the section's folder, then record it."""
    section = get_section(section_id)

    report = ValidationReport()
    validate_uploads(report, [upload], current_app.config["MAX_IMAGE_SIZE"])
    _check_order_index(report, order_index)
    if not report.valid:
        raise ValidationFailure(report)

    folder = f"{current_app.config['MEDIA_FOLDER']}/sections/{section.id}"
    url = upload_one(upload, folder)

    try:
        return _insert_image(section, url, alt or "", order_index)
    except Exception:
        delete_by_url(url)
        raise


def update_section_image(
    *,
    section_id: str,
    image_id: str,
    url: Optional[str] = None,
    alt: Optional[str] = None,
    order_index: Optional[int] = None,
) -> SectionImage:
    image = get_image(section_id, image_id)

    report = ValidationReport()
    if url is not None:
        validate_section_image_url(report, "url", url)
    _check_order_index(report, order_index)
    if not report.valid:
        raise ValidationFailure(report)

    replaced_url = None
    with transactional():
        if url is not None and url.strip() != image.url:
            replaced_url = image.url
            image.url = url.strip()
        if alt is not None:
            image.alt = alt
        if order_index is not None:
            image.order_index = order_index

    if replaced_url:
        delete_by_url(replaced_url)

    return image


def delete_section_image(*, section_id: str, image_id: str) -> None:
    image = get_image(section_id, image_id)
    url = image.url

    with transactional():
        db.session.delete(image)

    # The row is authoritative; the blob is best-effort
    delete_by_url(url)
    logger.info("Section image %s deleted", image_id)
