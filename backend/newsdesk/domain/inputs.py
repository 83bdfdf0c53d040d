"""
Typed request inputs.

The HTTP layer turns form/JSON bodies and werkzeug uploads into these
structures before anything in the application layer sees them.
"""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class UploadedFile:
    filename: str
    mimetype: str
    data: bytes
    size: Optional[int] = None

    def __post_init__(self):
        if self.size is None:
            self.size = len(self.data)


@dataclass
class ParagraphInput:
    content: str
    order_index: int = 0


@dataclass
class SectionImageInput:
    url: str
    alt: Optional[str] = None
    order_index: int = 0


@dataclass
class SectionInput:
    title: str
    order_index: int = 0
    paragraphs: List[ParagraphInput] = field(default_factory=list)
    images: List[SectionImageInput] = field(default_factory=list)


@dataclass
class ArticlePayload:
    """
    Create/update body. ``None`` means "not sent", which matters for
    partial updates: only sent fields are validated and merged.
    """
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    is_public: Optional[bool] = None
    is_featured: Optional[bool] = None
    sections: Optional[List[SectionInput]] = None
    replace_main_image: bool = False


@dataclass(frozen=True)
class ArticleListQuery:
    search: Optional[str] = None
    is_public: Optional[bool] = None
    is_featured: Optional[bool] = None
    category: Optional[str] = None
    page: int = 1
    limit: int = 10
    sort_by: str = "createdAt"
    sort_order: str = "desc"
