from flask import abort

from newsdesk.models import Article
from newsdesk.persistence.article_store import find_tree


def get_article(article_id: str) -> Article:
    article = find_tree(article_id)
    if article is None:
        abort(404, description=f"Article {article_id} not found")
    return article
