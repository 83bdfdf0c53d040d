# newsdesk/api/v1/sections.py
from flask import abort, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest

from newsdesk.application.sections.images import (
    add_section_image,
    delete_section_image,
    update_section_image,
    upload_section_image,
)
from newsdesk.application.sections.paragraphs import (
    add_paragraph,
    delete_paragraph,
    update_paragraph,
)
from newsdesk.application.sections.sections import (
    delete_section,
    get_section,
    list_sections,
    reorder_section,
)
from newsdesk.extensions import db
from newsdesk.models import Article
from newsdesk.normalizers.image import normalize_image
from newsdesk.normalizers.paragraph import normalize_paragraph
from newsdesk.normalizers.section import normalize_section
from newsdesk.utils.decorators import current_role, roles_required
from .forms import coerce_int, optional_text, parse_int, read_body, uploaded_file_from
from . import v1_bp


def _visible_or_404(article):
    if not article.is_public and current_role() != "admin":
        abort(404, description=f"Article {article.id} not found")


# ------------------------
# Sections
# ------------------------

@v1_bp.route("/articles/<article_id>/sections", methods=["GET"])
def get_article_sections(article_id):
    _visible_or_404(db.get_or_404(Article, article_id))
    sections = list_sections(article_id)
    return jsonify([normalize_section(s) for s in sections])


@v1_bp.route("/sections/<section_id>", methods=["GET"])
def get_section_by_id(section_id):
    section = get_section(section_id)
    _visible_or_404(section.article)
    return jsonify(normalize_section(section))


@v1_bp.route("/sections/<section_id>/reorder", methods=["POST"])
@jwt_required()
@roles_required("admin")
def post_section_reorder(section_id):
    data = read_body()
    if "orderIndex" not in data:
        raise BadRequest("'orderIndex' is required")

    section = reorder_section(
        section_id=section_id,
        order_index=coerce_int(data.get("orderIndex"), 0),
    )
    return jsonify(normalize_section(section)), 200


@v1_bp.route("/sections/<section_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def remove_section(section_id):
    delete_section(section_id=section_id)
    return jsonify({"message": "Section deleted successfully"}), 200


# ------------------------
# Paragraphs
# ------------------------

@v1_bp.route("/sections/<section_id>/paragraphs", methods=["POST"])
@jwt_required()
@roles_required("admin")
def post_paragraph(section_id):
    data = read_body()
    paragraph = add_paragraph(
        section_id=section_id,
        content=str(data.get("content") or ""),
        order_index=coerce_int(data.get("orderIndex"), None),
    )
    return jsonify(normalize_paragraph(paragraph)), 201


@v1_bp.route("/sections/<section_id>/paragraphs/<paragraph_id>", methods=["PATCH"])
@jwt_required()
@roles_required("admin")
def patch_paragraph(section_id, paragraph_id):
    data = read_body()
    paragraph = update_paragraph(
        section_id=section_id,
        paragraph_id=paragraph_id,
        content=optional_text(data.get("content"), "content"),
        order_index=coerce_int(data.get("orderIndex"), None),
    )
    return jsonify(normalize_paragraph(paragraph)), 200


@v1_bp.route("/sections/<section_id>/paragraphs/<paragraph_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def remove_paragraph(section_id, paragraph_id):
    delete_paragraph(section_id=section_id, paragraph_id=paragraph_id)
    return jsonify({"message": "Paragraph deleted successfully"}), 200


# ------------------------
# Images
# ------------------------

@v1_bp.route("/sections/<section_id>/images", methods=["POST"])
@jwt_required()
@roles_required("admin")
def post_section_image(section_id):
    data = read_body()
    image = add_section_image(
        section_id=section_id,
        url=str(data.get("url") or ""),
        alt=optional_text(data.get("alt"), "alt"),
        order_index=coerce_int(data.get("orderIndex"), None),
    )
    return jsonify(normalize_image(image)), 201


@v1_bp.route("/sections/<section_id>/images/upload", methods=["POST"])
@jwt_required()
@roles_required("admin")
def post_section_image_upload(section_id):
    storage = request.files.get("file")
    if not storage or not storage.filename:
        raise BadRequest("A 'file' upload is required")

    image = upload_section_image(
        section_id=section_id,
        upload=uploaded_file_from(storage),
        alt=request.form.get("alt"),
        order_index=parse_int(request.form.get("orderIndex"), "orderIndex"),
    )
    return jsonify(normalize_image(image)), 201


@v1_bp.route("/sections/<section_id>/images/<image_id>", methods=["PATCH"])
@jwt_required()
@roles_required("admin")
def patch_section_image(section_id, image_id):
    data = read_body()
    image = update_section_image(
        section_id=section_id,
        image_id=image_id,
        url=optional_text(data.get("url"), "url"),
        alt=optional_text(data.get("alt"), "alt"),
        order_index=coerce_int(data.get("orderIndex"), None),
    )
    return jsonify(normalize_image(image)), 200


@v1_bp.route("/sections/<section_id>/images/<image_id>", methods=["DELETE"])
@jwt_required()
@roles_required("admin")
def remove_section_image(section_id, image_id):
    delete_section_image(section_id=section_id, image_id=image_id)
    return jsonify({"message": "Section image deleted successfully"}), 200
