from .image import normalize_image
from .paragraph import normalize_paragraph

def normalize_section(section, admin=False, include_children=True):
    data = {
        "id": section.id,
        "articleId": section.article_id,
        "title": section.title,
        "orderIndex": section.order_index,
    }

    if include_children:
        paragraphs = sorted(section.paragraphs, key=lambda p: p.order_index)
        images = sorted(section.images, key=lambda i: i.order_index)
        data["paragraphs"] = [normalize_paragraph(p, admin=admin) for p in paragraphs]
        data["images"] = [normalize_image(i, admin=admin) for i in images]

    return data
