"""
End-to-end tests for section, paragraph and section image endpoints.
"""
from io import BytesIO

import pytest

from newsdesk.extensions import db
from newsdesk.models import Paragraph, Section, SectionImage
from conftest import STORAGE_BASE


@pytest.fixture
def article(make_article):
    return make_article(
        is_public=True,
        sections=[
            {"title": "Intro", "paragraphs": ["First paragraph text", "Second paragraph text"]},
            {"title": "Gallery", "images": [f"{STORAGE_BASE}/news/sections/one.png"]},
        ],
    )


@pytest.fixture
def intro(article):
    return Section.query.filter_by(article_id=article.id, title="Intro").one()


@pytest.fixture
def gallery(article):
    return Section.query.filter_by(article_id=article.id, title="Gallery").one()


class TestSections:
    def test_list_sections_in_order(self, client, article):
        response = client.get(f"/api/v1/articles/{article.id}/sections")

        assert response.status_code == 200
        body = response.get_json()
        assert [s["title"] for s in body] == ["Intro", "Gallery"]
        assert [p["orderIndex"] for p in body[0]["paragraphs"]] == [0, 1]

    def test_sections_of_draft_are_hidden(self, client, make_article):
        draft = make_article(sections=[{"title": "Secret"}])

        assert client.get(f"/api/v1/articles/{draft.id}/sections").status_code == 404

    def test_get_section(self, client, intro):
        body = client.get(f"/api/v1/sections/{intro.id}").get_json()

        assert body["title"] == "Intro"
        assert body["articleId"] == intro.article_id

    def test_reorder(self, client, admin_headers, article, intro):
        response = client.post(
            f"/api/v1/sections/{intro.id}/reorder", json={"orderIndex": 5}, headers=admin_headers
        )

        assert response.status_code == 200
        titles = [s["title"] for s in client.get(f"/api/v1/articles/{article.id}/sections").get_json()]
        assert titles == ["Gallery", "Intro"]

    @pytest.mark.parametrize("body", [{"orderIndex": -1}, {"orderIndex": "top"}])
    def test_reorder_rejects_bad_index(self, client, admin_headers, intro, body):
        response = client.post(f"/api/v1/sections/{intro.id}/reorder", json=body, headers=admin_headers)

        assert response.status_code == 400
        assert response.get_json()["errorCodes"] == {"orderIndex": ["ORDER_INDEX_INVALID"]}

    def test_reorder_requires_index(self, client, admin_headers, intro):
        response = client.post(f"/api/v1/sections/{intro.id}/reorder", json={}, headers=admin_headers)
        assert response.status_code == 400

    def test_delete_section_cascades(self, client, admin_headers, article, gallery, s3_client):
        response = client.delete(f"/api/v1/sections/{gallery.id}", headers=admin_headers)

        assert response.status_code == 200
        assert Section.query.filter_by(article_id=article.id).count() == 1
        assert SectionImage.query.count() == 0
        s3_client.delete_object.assert_called_once_with(
            Bucket="newsdesk-test", Key="news/sections/one.png"
        )

    def test_writes_require_admin(self, client, reader_headers, intro):
        response = client.delete(f"/api/v1/sections/{intro.id}", headers=reader_headers)
        assert response.status_code == 403


class TestParagraphs:
    def test_add_paragraph_appends(self, client, admin_headers, intro):
        response = client.post(
            f"/api/v1/sections/{intro.id}/paragraphs",
            json={"content": "A brand new closing paragraph"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.get_json()
        assert body["orderIndex"] == 2
        assert body["sectionId"] == intro.id

    def test_short_paragraph_is_rejected(self, client, admin_headers, intro):
        response = client.post(
            f"/api/v1/sections/{intro.id}/paragraphs", json={"content": "tiny"}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.get_json()["errorCodes"] == {"content": ["PARAGRAPH_TOO_SHORT"]}

    def test_update_paragraph(self, client, admin_headers, intro):
        paragraph = Paragraph.query.filter_by(section_id=intro.id, order_index=0).one()

        response = client.patch(
            f"/api/v1/sections/{intro.id}/paragraphs/{paragraph.id}",
            json={"content": "Rewritten opening paragraph"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.get_json()["content"] == "Rewritten opening paragraph"

    def test_numeric_content_is_validated(self, client, admin_headers, intro):
        paragraph = Paragraph.query.filter_by(section_id=intro.id, order_index=0).one()

        response = client.patch(
            f"/api/v1/sections/{intro.id}/paragraphs/{paragraph.id}",
            json={"content": 12345},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.get_json()["errorCodes"] == {"content": ["PARAGRAPH_TOO_SHORT"]}

    def test_boolean_order_index_is_rejected(self, client, admin_headers, intro):
        response = client.post(
            f"/api/v1/sections/{intro.id}/paragraphs",
            json={"content": "A brand new closing paragraph", "orderIndex": True},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.get_json()["errorCodes"] == {"orderIndex": ["ORDER_INDEX_INVALID"]}
        assert Paragraph.query.filter_by(section_id=intro.id).count() == 2

    def test_paragraph_must_belong_to_section(self, client, admin_headers, intro, gallery):
        paragraph = Paragraph.query.filter_by(section_id=intro.id).first()

        response = client.patch(
            f"/api/v1/sections/{gallery.id}/paragraphs/{paragraph.id}",
            json={"content": "Moved somewhere else"},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_delete_paragraph(self, client, admin_headers, intro):
        paragraph = Paragraph.query.filter_by(section_id=intro.id, order_index=1).one()

        response = client.delete(
            f"/api/v1/sections/{intro.id}/paragraphs/{paragraph.id}", headers=admin_headers
        )

        assert response.status_code == 200
        assert Paragraph.query.filter_by(section_id=intro.id).count() == 1


class TestSectionImages:
    def test_add_image_by_url(self, client, admin_headers, gallery):
        response = client.post(
            f"/api/v1/sections/{gallery.id}/images",
            json={"url": "https://cdn.example.com/two.webp", "alt": "Second shot"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        body = response.get_json()
        assert body["orderIndex"] == 1
        assert body["alt"] == "Second shot"

    def test_invalid_image_url(self, client, admin_headers, gallery):
        response = client.post(
            f"/api/v1/sections/{gallery.id}/images",
            json={"url": "https://cdn.example.com/anim.gif"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.get_json()["errorCodes"] == {"url": ["SECTION_IMAGE_URL_INVALID"]}

    def test_boolean_order_index_is_rejected(self, client, admin_headers, gallery):
        response = client.post(
            f"/api/v1/sections/{gallery.id}/images",
            json={"url": "https://cdn.example.com/two.webp", "orderIndex": False},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.get_json()["errorCodes"] == {"orderIndex": ["ORDER_INDEX_INVALID"]}

    def test_object_url_is_a_bad_request(self, client, admin_headers, gallery, s3_client):
        image = SectionImage.query.filter_by(section_id=gallery.id).one()

        response = client.patch(
            f"/api/v1/sections/{gallery.id}/images/{image.id}",
            json={"url": {"href": "https://cdn.example.com/x.png"}},
            headers=admin_headers,
        )

        assert response.status_code == 400
        s3_client.delete_object.assert_not_called()

    def test_upload_image(self, client, admin_headers, gallery, s3_client):
        response = client.post(
            f"/api/v1/sections/{gallery.id}/images/upload",
            data={"file": (BytesIO(b"\x89PNG"), "shot.png", "image/png"), "alt": "Workbench"},
            headers=admin_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 201
        body = response.get_json()
        assert body["url"].startswith(f"{STORAGE_BASE}/news/sections/{gallery.id}/")
        assert body["alt"] == "Workbench"
        assert s3_client.put_object.call_args.kwargs["Key"].startswith(f"news/sections/{gallery.id}/")

    def test_upload_rejects_non_images(self, client, admin_headers, gallery, s3_client):
        response = client.post(
            f"/api/v1/sections/{gallery.id}/images/upload",
            data={"file": (BytesIO(b"%PDF"), "flyer.pdf", "application/pdf")},
            headers=admin_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 400
        assert response.get_json()["errorCodes"] == {"files[0]": ["INVALID_MIME_TYPE"]}
        s3_client.put_object.assert_not_called()

    def test_upload_requires_file(self, client, admin_headers, gallery):
        response = client.post(
            f"/api/v1/sections/{gallery.id}/images/upload",
            data={"alt": "Nothing attached"},
            headers=admin_headers,
            content_type="multipart/form-data",
        )

        assert response.status_code == 400

    def test_replacing_url_deletes_old_blob(self, client, admin_headers, gallery, s3_client):
        image = SectionImage.query.filter_by(section_id=gallery.id).one()

        response = client.patch(
            f"/api/v1/sections/{gallery.id}/images/{image.id}",
            json={"url": "https://cdn.example.com/replacement.jpg"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.get_json()["url"] == "https://cdn.example.com/replacement.jpg"
        s3_client.delete_object.assert_called_once_with(
            Bucket="newsdesk-test", Key="news/sections/one.png"
        )

    def test_alt_only_update_keeps_blob(self, client, admin_headers, gallery, s3_client):
        image = SectionImage.query.filter_by(section_id=gallery.id).one()

        response = client.patch(
            f"/api/v1/sections/{gallery.id}/images/{image.id}",
            json={"alt": "New caption"},
            headers=admin_headers,
        )

        assert response.get_json()["alt"] == "New caption"
        s3_client.delete_object.assert_not_called()

    def test_delete_image_survives_storage_failure(self, client, admin_headers, gallery, s3_client):
        image = SectionImage.query.filter_by(section_id=gallery.id).one()
        s3_client.delete_object.side_effect = Exception("S3 unavailable")

        response = client.delete(
            f"/api/v1/sections/{gallery.id}/images/{image.id}", headers=admin_headers
        )

        assert response.status_code == 200
        db.session.expire_all()
        assert SectionImage.query.filter_by(section_id=gallery.id).count() == 0
