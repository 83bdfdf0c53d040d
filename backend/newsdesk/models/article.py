from newsdesk.extensions import db
from .base import BaseModel


class Article(BaseModel):
    __tablename__ = "articles"

    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=True)  # legacy free text, may embed <img> tags
    summary = db.Column(db.String(500), nullable=True)
    image_url = db.Column(db.String(1024), nullable=True)

    is_public = db.Column(db.Boolean, nullable=False, default=False, index=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False, index=True)
    published_at = db.Column(db.DateTime(timezone=True), nullable=True)

    category_id = db.Column(
        db.String(36),
        db.ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    author_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    category = db.relationship("Category", lazy="joined")
    author = db.relationship("User", lazy="joined")

    # Relationship to Sections (ordered, cascade deletes)
    sections = db.relationship(
        "Section",
        back_populates="article",
        order_by="Section.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
