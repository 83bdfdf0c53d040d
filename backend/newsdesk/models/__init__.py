from .article import Article
from .section import Section
from .paragraph import Paragraph
from .section_image import SectionImage
from .category import Category
from .user import User

__all__ = ["Article", "Section", "Paragraph", "SectionImage", "Category", "User"]
