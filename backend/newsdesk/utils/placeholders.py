import logging
import re
from typing import Callable, Dict, List, Optional, Sequence

from markupsafe import escape

from newsdesk.domain.inputs import UploadedFile
from .media import upload_one

logger = logging.getLogger(__name__)

# {{IMAGE_0}}, {{ IMAGE_3 }}
PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*IMAGE_(\d+)\s*\}\}")


def image_tag(url: str, alt: str) -> str:
    return f'<img src="{escape(url)}" alt="{escape(alt)}" />'


def unreferenced_files(content: Optional[str], files: Sequence[UploadedFile]) -> List[UploadedFile]:
    """Files whose index no marker in ``content`` points at."""
    referenced = {int(match.group(1)) for match in PLACEHOLDER_PATTERN.finditer(content or "")}
    return [f for index, f in enumerate(files) if index not in referenced]


def resolve_inline_images(
    content: Optional[str],
    files: Sequence[UploadedFile],
    *,
    folder: str,
    upload: Callable[[UploadedFile, str], str] = upload_one,
) -> Optional[str]:
    """
    Replace ``{{IMAGE_n}}`` markers with image tags.

    ``n`` is a zero-based index into ``files``. Markers are handled in the
    order they appear, each index is uploaded once and every occurrence of
    it gets the same URL. Markers with no matching file are left alone.
    Files no marker refers to are not uploaded; they are logged and dropped.
    """
    unused = unreferenced_files(content, files)
    if unused:
        logger.info(
            "Ignoring %d uploaded file(s) with no inline marker: %s",
            len(unused),
            [f.filename for f in unused],
        )

    if not content:
        return content

    resolved: Dict[int, str] = {}

    for match in PLACEHOLDER_PATTERN.finditer(content):
        index = int(match.group(1))
        if index in resolved or index >= len(files):
            continue
        resolved[index] = upload(files[index], folder)
        logger.debug("Resolved inline image %d to %s", index, resolved[index])

    if not resolved:
        return content

    def _substitute(match):
        index = int(match.group(1))
        if index not in resolved:
            return match.group(0)
        return image_tag(resolved[index], f"Image {index + 1}")

    return PLACEHOLDER_PATTERN.sub(_substitute, content)
