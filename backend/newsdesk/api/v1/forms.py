"""
Request parsing for the article endpoints.

Everything coming from Flask's ``request`` is turned into the typed inputs
of ``newsdesk.domain.inputs`` here; the application layer never sees
werkzeug objects.
"""
import json
import re
from typing import Any, Dict, List, Mapping, Optional

from flask import request
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest

from newsdesk.domain.inputs import (
    ArticleListQuery,
    ArticlePayload,
    ParagraphInput,
    SectionImageInput,
    SectionInput,
    UploadedFile,
)

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}

_BRACKET_TOKEN = re.compile(r"\[([^\[\]]*)\]")


def parse_bool(value, field_name: str) -> Optional[bool]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise BadRequest(f"'{field_name}' must be a boolean")


def coerce_int(value, default: int):
    """Best-effort int conversion; anything unparseable is returned as-is for the validator to flag."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"\s*-?\d+\s*", value):
        return int(value)
    return value


def parse_int(value, field_name: str, default: Optional[int] = None) -> Optional[int]:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"'{field_name}' must be an integer")


def optional_text(value, field_name: str) -> Optional[str]:
    """Scalars become strings; objects and arrays are refused."""
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise BadRequest(f"'{field_name}' must be a string")
    return value if isinstance(value, str) else str(value)


# -------------------------------------------------
# Bracketed multipart fields: sections[0][paragraphs][1][content]
# -------------------------------------------------
def _assign(container: Dict[str, Any], path: List[str], value: Any) -> None:
    head, rest = path[0], path[1:]
    if head == "":
        head = str(len(container))
    if not rest:
        container[head] = value
        return
    child = container.setdefault(head, {})
    if not isinstance(child, dict):
        raise BadRequest(f"Conflicting form field near '{head}'")
    _assign(child, rest, value)


def _listify(node: Any) -> Any:
    if not isinstance(node, dict):
        return node
    converted = {key: _listify(value) for key, value in node.items()}
    if converted and all(key.isdigit() for key in converted):
        return [converted[key] for key in sorted(converted, key=int)]
    return converted


def parse_bracketed(form: Mapping[str, Any]) -> Dict[str, Any]:
    nested: Dict[str, Any] = {}
    for key in form.keys():
        values = form.getlist(key) if hasattr(form, "getlist") else [form[key]]
        name_end = key.find("[")
        if name_end <= 0:
            nested[key] = values[-1]
            continue
        path = [key[:name_end]] + _BRACKET_TOKEN.findall(key[name_end:])
        for value in values:
            _assign(nested, path, value)
    return _listify(nested)


# -------------------------------------------------
# Bodies
# -------------------------------------------------
def read_body() -> Dict[str, Any]:
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            raise BadRequest("Malformed JSON body")
        if not isinstance(data, dict):
            raise BadRequest("JSON body must be an object")
        return data

    data = parse_bracketed(request.form)
    if isinstance(data.get("sections"), str):
        raw = data["sections"].strip()
        try:
            data["sections"] = json.loads(raw) if raw else []
        except ValueError:
            raise BadRequest("'sections' must be valid JSON")
    return data


def _section_from(raw: Any, index: int) -> SectionInput:
    if not isinstance(raw, dict):
        raise BadRequest(f"sections[{index}] must be an object")

    paragraphs = raw.get("paragraphs") or []
    images = raw.get("images") or []
    if not isinstance(paragraphs, list) or not isinstance(images, list):
        raise BadRequest(f"sections[{index}] paragraphs and images must be lists")

    return SectionInput(
        title=str(raw.get("title") or ""),
        order_index=coerce_int(raw.get("orderIndex"), index),
        paragraphs=[
            ParagraphInput(
                content=str((p or {}).get("content") or ""),
                order_index=coerce_int((p or {}).get("orderIndex"), j),
            )
            for j, p in enumerate(paragraphs)
        ],
        images=[
            SectionImageInput(
                url=str((i or {}).get("url") or ""),
                alt=optional_text((i or {}).get("alt"), f"sections[{index}].images[{k}].alt"),
                order_index=coerce_int((i or {}).get("orderIndex"), k),
            )
            for k, i in enumerate(images)
        ],
    )


def article_payload_from(data: Mapping[str, Any]) -> ArticlePayload:
    sections = data.get("sections")
    if sections is not None:
        if not isinstance(sections, list):
            raise BadRequest("'sections' must be a list")
        sections = [_section_from(raw, i) for i, raw in enumerate(sections)]

    category = data.get("category")
    if category is None:
        category = data.get("categoryId")

    return ArticlePayload(
        title=optional_text(data.get("title"), "title"),
        content=optional_text(data.get("content"), "content"),
        summary=optional_text(data.get("summary"), "summary"),
        image_url=optional_text(data.get("imageUrl"), "imageUrl") or None,
        category=optional_text(category, "category"),
        is_public=parse_bool(data.get("isPublic"), "isPublic"),
        is_featured=parse_bool(data.get("isFeatured"), "isFeatured"),
        sections=sections,
        replace_main_image=bool(parse_bool(data.get("replaceMainImage"), "replaceMainImage")),
    )


# -------------------------------------------------
# Files
# -------------------------------------------------
def uploaded_file_from(storage: FileStorage) -> UploadedFile:
    data = storage.read()
    return UploadedFile(
        filename=storage.filename or "",
        mimetype=storage.mimetype or "application/octet-stream",
        data=data,
    )


def uploads_by_field() -> Dict[str, List[UploadedFile]]:
    grouped: Dict[str, List[UploadedFile]] = {}
    for field_name in request.files:
        files = [
            uploaded_file_from(fs)
            for fs in request.files.getlist(field_name)
            if fs and fs.filename
        ]
        if files:
            grouped[field_name] = files
    return grouped


def list_query_from(args: Mapping[str, Any]) -> ArticleListQuery:
    sort_order = (args.get("sortOrder") or "desc").lower()
    return ArticleListQuery(
        search=args.get("search") or None,
        is_public=parse_bool(args.get("isPublic"), "isPublic"),
        is_featured=parse_bool(args.get("isFeatured"), "isFeatured"),
        category=args.get("category") or None,
        page=parse_int(args.get("page"), "page", 1),
        limit=parse_int(args.get("limit"), "limit", 10),
        sort_by=args.get("sortBy") or "createdAt",
        sort_order="asc" if sort_order == "asc" else "desc",
    )
