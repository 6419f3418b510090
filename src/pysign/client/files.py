"""Multipart form building for document uploads."""

from __future__ import annotations

import json
import mimetypes
import os
from typing import Any

from pysign.client.types import AddFileOptions
from pysign.kernel.exceptions import ValidationException

DEFAULT_FILENAME = "document.pdf"
DEFAULT_CONTENT_TYPE = "application/pdf"

Part = tuple[str, tuple[Any, ...]]


def build_document_form(options: AddFileOptions) -> list[Part]:
    """Translate ``add_document`` options into httpx multipart parts.

    Every field travels as a multipart part (text fields use a ``None``
    filename) so the request is always ``multipart/form-data``, even when
    the document is given by URL. Optional fields are only sent when
    truthy; ``initials`` is JSON-encoded and ``parse_anchors`` becomes
    ``"true"``.
    """
    parts: list[Part] = [_file_part(options["file"]), ("nature", (None, options["nature"]))]

    if options.get("insert_after_id"):
        parts.append(("insert_after_id", (None, options["insert_after_id"])))
    if options.get("password"):
        parts.append(("password", (None, options["password"])))
    if options.get("initials"):
        parts.append(("initials", (None, json.dumps(options["initials"]))))
    if options.get("parse_anchors"):
        parts.append(("parse_anchors", (None, "true")))

    return parts


def _file_part(file: Any) -> Part:
    if isinstance(file, str):
        return ("file", (None, file))

    if isinstance(file, dict):
        if file.get("type") != "url" or not file.get("url"):
            raise ValidationException(
                "URL file descriptors need type='url' and a url",
                context={"file": file},
            )
        return ("file", (None, json.dumps(file)))

    if isinstance(file, tuple):
        if len(file) not in (2, 3):
            raise ValidationException(
                "File tuples must be (filename, content) or (filename, content, content_type)",
                context={"length": len(file)},
            )
        filename, content = file[0], file[1]
        content_type = file[2] if len(file) == 3 else _guess_type(filename)
        return ("file", (filename, content, content_type))

    if isinstance(file, (bytes, bytearray)):
        return ("file", (DEFAULT_FILENAME, bytes(file), DEFAULT_CONTENT_TYPE))

    if hasattr(file, "read"):
        filename = os.path.basename(str(getattr(file, "name", "") or "")) or DEFAULT_FILENAME
        return ("file", (filename, file, _guess_type(filename)))

    raise ValidationException(
        f"Unsupported document file type: {type(file).__name__}",
        context={"type": type(file).__name__},
    )


def _guess_type(filename: str) -> str:
    return mimetypes.guess_type(filename)[0] or DEFAULT_CONTENT_TYPE
