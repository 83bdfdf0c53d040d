"""
Article payload validation.

``validate_article_payload`` never raises: it walks the whole payload and
returns every violation at once, keyed by field path, each paired with a
machine-readable code.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence
from urllib.parse import urlparse

from .inputs import ArticlePayload, SectionInput, UploadedFile

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 200
SECTION_TITLE_MIN_LENGTH = 3
PARAGRAPH_MIN_LENGTH = 10
DEFAULT_MAX_IMAGE_SIZE = 5 * 1024 * 1024
ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


def _text(value) -> str:
    """Stripped text, or an empty string for anything that is not a string."""
    return value.strip() if isinstance(value, str) else ""


@dataclass
class ValidationReport:
    errors: Dict[str, List[str]] = field(default_factory=dict)
    error_codes: Dict[str, List[str]] = field(default_factory=dict)

    def add(self, field_name: str, message: str, code: str) -> None:
        self.errors.setdefault(field_name, []).append(message)
        self.error_codes.setdefault(field_name, []).append(code)

    @property
    def valid(self) -> bool:
        return not self.errors

    def codes(self) -> List[str]:
        return [code for codes in self.error_codes.values() for code in codes]

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "errorCodes": self.error_codes,
        }


def is_valid_image_url(url: Optional[str]) -> bool:
    if not isinstance(url, str) or not url:
        return False
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return False
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    return parsed.path.lower().endswith(ALLOWED_IMAGE_EXTENSIONS)


def _validate_title(report: ValidationReport, title: Optional[str]) -> None:
    title = _text(title)
    if not title:
        report.add("title", "Title is required.", "TITLE_REQUIRED")
    elif len(title) < TITLE_MIN_LENGTH:
        report.add(
            "title",
            f"Title must be at least {TITLE_MIN_LENGTH} characters.",
            "TITLE_TOO_SHORT",
        )
    elif len(title) > TITLE_MAX_LENGTH:
        report.add(
            "title",
            f"Title must not exceed {TITLE_MAX_LENGTH} characters.",
            "TITLE_TOO_LONG",
        )


def _validate_order_index(report: ValidationReport, key: str, value) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        report.add(key, "Order index must be a non-negative integer.", "ORDER_INDEX_INVALID")


def validate_paragraph_content(report: ValidationReport, key: str, content: Optional[str]) -> None:
    if len(_text(content)) < PARAGRAPH_MIN_LENGTH:
        report.add(
            key,
            f"Paragraph must contain at least {PARAGRAPH_MIN_LENGTH} characters.",
            "PARAGRAPH_TOO_SHORT",
        )


def validate_section_image_url(report: ValidationReport, key: str, url: Optional[str]) -> None:
    if not is_valid_image_url(url):
        report.add(
            key,
            "Image URL must be http(s) and point to a jpg, jpeg, png or webp file.",
            "SECTION_IMAGE_URL_INVALID",
        )


def _validate_sections(report: ValidationReport, sections: Sequence[SectionInput]) -> None:
    for i, section in enumerate(sections):
        prefix = f"sections[{i}]"

        if len(_text(section.title)) < SECTION_TITLE_MIN_LENGTH:
            report.add(
                f"{prefix}.title",
                f"Section title must contain at least {SECTION_TITLE_MIN_LENGTH} characters.",
                "SECTION_TITLE_TOO_SHORT",
            )
        _validate_order_index(report, f"{prefix}.orderIndex", section.order_index)

        for j, paragraph in enumerate(section.paragraphs):
            key = f"{prefix}.paragraphs[{j}]"
            validate_paragraph_content(report, f"{key}.content", paragraph.content)
            _validate_order_index(report, f"{key}.orderIndex", paragraph.order_index)

        for k, image in enumerate(section.images):
            key = f"{prefix}.images[{k}]"
            validate_section_image_url(report, f"{key}.url", image.url)
            _validate_order_index(report, f"{key}.orderIndex", image.order_index)


def validate_uploads(
    report: ValidationReport,
    uploads: Sequence[UploadedFile],
    max_image_size: int = DEFAULT_MAX_IMAGE_SIZE,
) -> None:
    for n, upload in enumerate(uploads):
        key = f"files[{n}]"
        if not (upload.mimetype or "").startswith("image/"):
            report.add(key, f"File #{n + 1} is not an image.", "INVALID_MIME_TYPE")
        if upload.size > max_image_size:
            limit_mb = max_image_size // (1024 * 1024)
            report.add(key, f"File #{n + 1} exceeds {limit_mb} MB.", "IMAGE_TOO_LARGE")


def validate_article_payload(
    payload: ArticlePayload,
    uploads: Sequence[UploadedFile] = (),
    *,
    partial: bool = False,
    category_lookup: Optional[Callable[[str], object]] = None,
    max_image_size: int = DEFAULT_MAX_IMAGE_SIZE,
) -> ValidationReport:
    """
    Validate an article create (``partial=False``) or update body.

    ``category_lookup`` resolves a category id or name and returns ``None``
    when nothing matches. Without one, category existence is not checked.
    """
    report = ValidationReport()

    if not partial or payload.title is not None:
        _validate_title(report, payload.title)

    has_content = bool(_text(payload.content))
    has_sections = bool(payload.sections)
    if not partial and not has_content and not has_sections:
        report.add("content", "Either content or sections is required.", "CONTENT_REQUIRED")
        report.add("sections", "Either content or sections is required.", "SECTIONS_REQUIRED")

    if payload.sections:
        _validate_sections(report, payload.sections)

    if payload.image_url and not is_valid_image_url(payload.image_url):
        report.add(
            "imageUrl",
            "Cover image URL must be http(s) and point to a jpg, jpeg, png or webp file.",
            "IMAGE_URL_INVALID",
        )

    if not partial or payload.category is not None:
        category_ref = _text(payload.category)
        if not category_ref:
            report.add("category", "Category is required.", "CATEGORY_REQUIRED")
        elif category_lookup is not None and category_lookup(category_ref) is None:
            report.add("category", "The given category does not exist.", "CATEGORY_NOT_FOUND")

    validate_uploads(report, uploads, max_image_size)

    return report
