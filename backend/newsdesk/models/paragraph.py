from newsdesk.extensions import db
from .base import BaseModel


class Paragraph(BaseModel):
    __tablename__ = "section_paragraphs"

    section_id = db.Column(
        db.String(36),
        db.ForeignKey("sections.id", ondelete="CASCADE"),
        nullable=False,
    )
    content = db.Column(db.Text, nullable=False)
    order_index = db.Column(db.Integer, nullable=False, default=0)

    section = db.relationship("Section", back_populates="paragraphs")

    __table_args__ = (
        db.Index("idx_paragraph_section_order", "section_id", "order_index"),
    )
