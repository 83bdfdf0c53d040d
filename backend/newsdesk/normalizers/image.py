def normalize_image(image, admin=False):
    base = {
        "id": image.id,
        "sectionId": image.section_id,
        "url": image.url,
        "alt": image.alt,
        "orderIndex": image.order_index,
    }

    if admin:
        base["createdAt"] = image.created_at.isoformat() if image.created_at else None
        base["updatedAt"] = image.updated_at.isoformat() if image.updated_at else None

    return base
