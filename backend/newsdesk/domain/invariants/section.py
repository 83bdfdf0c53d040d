from ..exceptions import InvariantViolation


def assert_child_order(children, label):
    orders = [child.order_index for child in children]
    negative = [o for o in orders if o is None or o < 0]
    if negative:
        raise InvariantViolation(
            f"{label} order indices must be non-negative integers: {orders}"
        )


def assert_section(section):
    if not section.title or not section.title.strip():
        raise InvariantViolation("Section must have a title.")

    assert_child_order(section.paragraphs, "Paragraph")
    assert_child_order(section.images, "Image")

    for image in section.images:
        if not image.url:
            raise InvariantViolation("Section image must have a url set.")
