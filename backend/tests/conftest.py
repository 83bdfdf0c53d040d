"""
Shared fixtures: an in-memory app with a mocked S3 client, an admin
account with a bearer token, and a category to file articles under.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from flask_jwt_extended import create_access_token

from newsdesk import create_app
from newsdesk.extensions import db
from newsdesk.models import Article, Category, Paragraph, Section, SectionImage, User
from newsdesk.storage.s3 import S3Storage

STORAGE_BASE = "https://newsdesk-test.s3.eu-west-3.amazonaws.com"


@pytest.fixture
def app():
    """Create the testing app with every table and a fake S3 client."""
    app = create_app("testing")
    S3Storage(client=MagicMock()).init_app(app)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def s3_client(app):
    """The MagicMock standing in for boto3's S3 client."""
    return app.extensions["storage"].client


@pytest.fixture
def admin_user(app):
    user = User(email="desk@example.com", display_name="Desk Editor", role="admin")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token(identity=admin_user.id, additional_claims={"role": "admin"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def reader_headers(app):
    token = create_access_token(identity="reader-1", additional_claims={"role": "user"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def category(app):
    category = Category(name="DIY", slug="diy")
    db.session.add(category)
    db.session.commit()
    return category


@pytest.fixture
def make_article(category):
    """Insert an article straight into the database, bypassing the API."""
    counter = {"n": 0}

    def _make(title=None, is_public=False, is_featured=False, sections=(), image_url=None):
        counter["n"] += 1
        n = counter["n"]

        article = Article(
            title=title or f"Article number {n}",
            content="Plain legacy body text",
            image_url=image_url,
            category_id=category.id,
            is_public=is_public,
            is_featured=is_featured,
            published_at=datetime(2024, 1, n, tzinfo=timezone.utc) if is_public else None,
            created_at=datetime(2024, 1, n, 12, 0, tzinfo=timezone.utc),
            updated_at=datetime(2024, 1, n, 12, 0, tzinfo=timezone.utc),
        )
        db.session.add(article)
        db.session.flush()

        for s_index, layout in enumerate(sections):
            section = Section(article_id=article.id, title=layout["title"], order_index=s_index)
            db.session.add(section)
            db.session.flush()
            for p_index, content in enumerate(layout.get("paragraphs", [])):
                db.session.add(Paragraph(section_id=section.id, content=content, order_index=p_index))
            for i_index, url in enumerate(layout.get("images", [])):
                db.session.add(SectionImage(section_id=section.id, url=url, alt=None, order_index=i_index))

        db.session.commit()
        return article

    return _make
