def normalize_paragraph(paragraph, admin=False):
    base = {
        "id": paragraph.id,
        "sectionId": paragraph.section_id,
        "content": paragraph.content,
        "orderIndex": paragraph.order_index,
    }

    if admin:
        base["createdAt"] = paragraph.created_at.isoformat() if paragraph.created_at else None
        base["updatedAt"] = paragraph.updated_at.isoformat() if paragraph.updated_at else None

    return base
