from .section import assert_section, assert_child_order
from ..exceptions import InvariantViolation


def assert_article(article):
    if not article.title or not article.title.strip():
        raise InvariantViolation("Article must have a title.")

    assert_child_order(article.sections, "Section")

    for section in article.sections:
        assert_section(section)
