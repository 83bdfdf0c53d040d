import logging
from typing import Iterable, List, Mapping, Optional, Sequence

from flask import current_app

from newsdesk.domain.exceptions import UnsupportedMediaError, ValidationFailure
from newsdesk.domain.inputs import UploadedFile
from newsdesk.domain.validation import DEFAULT_MAX_IMAGE_SIZE, ValidationReport

logger = logging.getLogger(__name__)

# Multipart file fields in precedence order, with their caps
UPLOAD_FIELDS = (
    ("mainImage", 1),
    ("additionalImages", 10),
    ("files", 10),  # legacy field
)


def get_storage():
    return current_app.extensions["storage"]


def _max_image_size():
    return current_app.config.get("MAX_IMAGE_SIZE", DEFAULT_MAX_IMAGE_SIZE)


def collect_uploads(files_by_field: Optional[Mapping[str, Sequence[UploadedFile]]]) -> List[UploadedFile]:
    """
    Flatten the named multipart groups into one ordered list:
    main image first, then additional images, then legacy files.
    """
    if not files_by_field:
        return []

    report = ValidationReport()
    collected: List[UploadedFile] = []

    for field_name, max_count in UPLOAD_FIELDS:
        group = list(files_by_field.get(field_name) or [])
        if len(group) > max_count:
            report.add(
                field_name,
                f"At most {max_count} file(s) allowed for '{field_name}'.",
                "TOO_MANY_FILES",
            )
            continue
        collected.extend(group)

    if not report.valid:
        raise ValidationFailure(report)

    logger.debug(
        "Collected %d upload(s) from fields %s",
        len(collected),
        sorted(k for k, v in files_by_field.items() if v),
    )
    return collected


def is_acceptable_image(upload: UploadedFile, max_size: Optional[int] = None) -> bool:
    max_size = max_size if max_size is not None else _max_image_size()
    return (upload.mimetype or "").startswith("image/") and upload.size <= max_size


def upload_one(upload: UploadedFile, folder: str) -> str:
    if not is_acceptable_image(upload):
        raise UnsupportedMediaError(
            f"File type not allowed or too large: {upload.filename} ({upload.mimetype})"
        )
    return get_storage().upload(upload.data, upload.mimetype, upload.filename, folder)


def upload_many(uploads: Iterable[UploadedFile], folder: str) -> List[str]:
    return [upload_one(upload, folder) for upload in uploads]


def delete_by_url(file_url: Optional[str]) -> bool:
    """
    Best-effort delete of a stored object.
    Returns False when nothing was deleted; never raises.
    """
    if not file_url:
        return False

    storage = get_storage()
    if not storage.is_storage_url(file_url):
        logger.debug("Skipping delete of non-storage URL %s", file_url)
        return False

    try:
        storage.delete(file_url)
        return True
    except Exception as e:
        logger.error(f"Failed to delete file {file_url}: {e}")
        return False


def delete_many(file_urls: Iterable[Optional[str]]) -> int:
    """Delete every URL independently. Returns the number actually deleted."""
    return sum(1 for url in file_urls if delete_by_url(url))


def recording_uploader(sink: List[str]):
    """``upload_one`` that also appends each new URL to ``sink`` for later cleanup."""
    def _upload(upload: UploadedFile, folder: str) -> str:
        url = upload_one(upload, folder)
        sink.append(url)
        return url
    return _upload
