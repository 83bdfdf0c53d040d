from newsdesk.extensions import db
from .base import BaseModel


class Section(BaseModel):
    __tablename__ = "sections"

    article_id = db.Column(
        db.String(36),
        db.ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    article = db.relationship("Article", back_populates="sections")

    paragraphs = db.relationship(
        "Paragraph",
        back_populates="section",
        order_by="Paragraph.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    images = db.relationship(
        "SectionImage",
        back_populates="section",
        order_by="SectionImage.order_index",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        db.Index("idx_section_article_order", "article_id", "order_index"),
    )
