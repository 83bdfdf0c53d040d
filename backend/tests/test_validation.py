"""
Unit tests for article payload validation.
"""
import pytest

from newsdesk.domain.inputs import (
    ArticlePayload,
    ParagraphInput,
    SectionImageInput,
    SectionInput,
    UploadedFile,
)
from newsdesk.domain.validation import (
    ValidationReport,
    is_valid_image_url,
    validate_article_payload,
)

VALID_PARAGRAPH = "This paragraph is long enough."


def _payload(**overrides):
    fields = {
        "title": "A valid title",
        "content": "Some legacy content",
        "category": "diy",
    }
    fields.update(overrides)
    return ArticlePayload(**fields)


def _codes(report, key):
    return report.error_codes.get(key, [])


class TestTitle:
    """Title length boundaries."""

    @pytest.mark.parametrize("title, code", [
        ("", "TITLE_REQUIRED"),
        ("   ", "TITLE_REQUIRED"),
        ("abcd", "TITLE_TOO_SHORT"),
        ("x" * 201, "TITLE_TOO_LONG"),
    ])
    def test_invalid_titles(self, title, code):
        report = validate_article_payload(_payload(title=title))
        assert _codes(report, "title") == [code]

    @pytest.mark.parametrize("title", ["abcde", "x" * 200])
    def test_boundary_titles_accepted(self, title):
        report = validate_article_payload(_payload(title=title))
        assert "title" not in report.errors
        assert report.valid

    def test_title_is_trimmed_before_measuring(self):
        report = validate_article_payload(_payload(title="  abcd  "))
        assert _codes(report, "title") == ["TITLE_TOO_SHORT"]


class TestContentOrSections:
    def test_missing_both_reports_both_codes(self):
        report = validate_article_payload(_payload(content=None, sections=None))

        assert _codes(report, "content") == ["CONTENT_REQUIRED"]
        assert _codes(report, "sections") == ["SECTIONS_REQUIRED"]

    def test_empty_sections_list_counts_as_missing(self):
        report = validate_article_payload(_payload(content="   ", sections=[]))
        assert "CONTENT_REQUIRED" in report.codes()
        assert "SECTIONS_REQUIRED" in report.codes()

    def test_sections_alone_are_enough(self):
        payload = _payload(
            content=None,
            sections=[SectionInput(title="Intro", paragraphs=[ParagraphInput(VALID_PARAGRAPH)])],
        )
        assert validate_article_payload(payload).valid

    def test_content_and_sections_together_are_allowed(self):
        payload = _payload(sections=[SectionInput(title="Intro")])
        assert validate_article_payload(payload).valid


class TestSections:
    def test_nested_errors_are_keyed_by_path(self):
        payload = _payload(sections=[
            SectionInput(
                title="ab",
                order_index=0,
                paragraphs=[ParagraphInput(VALID_PARAGRAPH, 0), ParagraphInput("short", 1)],
                images=[SectionImageInput(url="https://cdn.example.com/a.gif")],
            ),
        ])

        report = validate_article_payload(payload)

        assert _codes(report, "sections[0].title") == ["SECTION_TITLE_TOO_SHORT"]
        assert _codes(report, "sections[0].paragraphs[1].content") == ["PARAGRAPH_TOO_SHORT"]
        assert _codes(report, "sections[0].images[0].url") == ["SECTION_IMAGE_URL_INVALID"]
        assert "sections[0].paragraphs[0].content" not in report.errors

    def test_every_violation_is_reported(self):
        payload = _payload(
            title="abc",
            category="",
            sections=[SectionInput(title="x"), SectionInput(title="y")],
        )

        report = validate_article_payload(payload)

        assert sorted(report.codes()) == sorted([
            "TITLE_TOO_SHORT",
            "CATEGORY_REQUIRED",
            "SECTION_TITLE_TOO_SHORT",
            "SECTION_TITLE_TOO_SHORT",
        ])

    @pytest.mark.parametrize("order_index", [-1, "first", None, True])
    def test_bad_order_index(self, order_index):
        payload = _payload(sections=[SectionInput(title="Intro", order_index=order_index)])
        report = validate_article_payload(payload)
        assert _codes(report, "sections[0].orderIndex") == ["ORDER_INDEX_INVALID"]


class TestCategoryAndCover:
    def test_category_required(self):
        report = validate_article_payload(_payload(category=None))
        assert _codes(report, "category") == ["CATEGORY_REQUIRED"]

    def test_unknown_category(self):
        report = validate_article_payload(_payload(category="gardening"), category_lookup=lambda ref: None)
        assert _codes(report, "category") == ["CATEGORY_NOT_FOUND"]

    def test_known_category(self):
        report = validate_article_payload(_payload(), category_lookup=lambda ref: object())
        assert report.valid

    def test_cover_url_must_be_an_image(self):
        report = validate_article_payload(_payload(image_url="https://example.com/page.html"))
        assert _codes(report, "imageUrl") == ["IMAGE_URL_INVALID"]


class TestNonStringFields:
    """Values that are not text are reported, never raised on."""

    def test_numeric_title_counts_as_missing(self):
        report = validate_article_payload(_payload(title=12345))
        assert _codes(report, "title") == ["TITLE_REQUIRED"]

    def test_numeric_category_counts_as_missing(self):
        report = validate_article_payload(_payload(category=7), category_lookup=lambda ref: object())
        assert _codes(report, "category") == ["CATEGORY_REQUIRED"]

    def test_non_text_content_counts_as_empty(self):
        report = validate_article_payload(_payload(content=["not", "text"]))
        assert _codes(report, "content") == ["CONTENT_REQUIRED"]

    def test_nested_non_text_values(self):
        payload = _payload(sections=[
            SectionInput(
                title=404,
                order_index=0,
                paragraphs=[ParagraphInput(content=1234567890123, order_index=0)],
                images=[SectionImageInput(url=42, alt=None, order_index=0)],
            )
        ])

        report = validate_article_payload(payload)

        assert _codes(report, "sections[0].title") == ["SECTION_TITLE_TOO_SHORT"]
        assert _codes(report, "sections[0].paragraphs[0].content") == ["PARAGRAPH_TOO_SHORT"]
        assert _codes(report, "sections[0].images[0].url") == ["SECTION_IMAGE_URL_INVALID"]


class TestUploads:
    def test_non_image_is_rejected(self):
        pdf = UploadedFile(filename="brochure.pdf", mimetype="application/pdf", data=b"%PDF")
        report = validate_article_payload(_payload(), [pdf])
        assert _codes(report, "files[0]") == ["INVALID_MIME_TYPE"]

    def test_oversized_image_is_rejected(self):
        small = UploadedFile(filename="a.png", mimetype="image/png", data=b"png")
        big = UploadedFile(filename="b.png", mimetype="image/png", data=b"", size=6 * 1024 * 1024)

        report = validate_article_payload(_payload(), [small, big])

        assert "files[0]" not in report.errors
        assert _codes(report, "files[1]") == ["IMAGE_TOO_LARGE"]

    def test_custom_size_limit(self):
        upload = UploadedFile(filename="a.png", mimetype="image/png", data=b"12345")
        report = validate_article_payload(_payload(), [upload], max_image_size=4)
        assert _codes(report, "files[0]") == ["IMAGE_TOO_LARGE"]


class TestPartial:
    def test_empty_update_is_valid(self):
        assert validate_article_payload(ArticlePayload(), partial=True).valid

    def test_only_sent_fields_are_checked(self):
        report = validate_article_payload(ArticlePayload(title="abc"), partial=True)
        assert report.codes() == ["TITLE_TOO_SHORT"]

    def test_clearing_sections_is_allowed(self):
        assert validate_article_payload(ArticlePayload(sections=[]), partial=True).valid


@pytest.mark.parametrize("url, expected", [
    ("https://cdn.example.com/a.jpg", True),
    ("http://cdn.example.com/path/b.JPEG", True),
    ("https://cdn.example.com/c.webp?w=400", True),
    ("https://cdn.example.com/d.gif", False),
    ("ftp://cdn.example.com/e.png", False),
    ("/relative/f.png", False),
    ("", False),
    (None, False),
    (42, False),
])
def test_is_valid_image_url(url, expected):
    assert is_valid_image_url(url) is expected


def test_report_to_dict():
    report = ValidationReport()
    report.add("title", "Title is required.", "TITLE_REQUIRED")

    assert report.to_dict() == {
        "valid": False,
        "errors": {"title": ["Title is required."]},
        "errorCodes": {"title": ["TITLE_REQUIRED"]},
    }
