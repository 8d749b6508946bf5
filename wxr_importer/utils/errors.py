"""
Structured logging helpers for import errors and successes.

The :mod:`wxr_importer.utils.errors` module centralizes the writing of log
entries for both failed and successful operations during an import.  Each
entry is appended to a JSON Lines file under ``reports/import`` so that the
information can be reviewed or parsed after a run.

Two public functions are provided:

``report_error``
    Record an error that occurred for a record or image.  An optional
    exception can be supplied and will be serialized to the log.

``report_ok``
    Record a successful step.  Additional key/value information can be
    attached to the entry via the ``extra`` parameter.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages.  Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

# Mapping of event codes used throughout the import to descriptive messages.
# The keys include both error and success codes as the same lookup is used by
# :func:`report_error` and :func:`report_ok`.
ERRORS: Dict[str, str] = {
    "WXR_PARSE": "Could not parse WXR export",
    "MANIFEST_MISSING": "No pending import manifest found",
    "IMAGE_INVALID_URL": "Image source is not an absolute URL",
    "IMAGE_UNSUPPORTED": "Image extension is not jpg, jpeg, gif or png",
    "IMAGE_DOWNLOAD": "Failed to download image",
    "IMAGE_CORRUPT": "Downloaded file is not a valid image",
    "MEDIA_STORE": "Failed to store image in media library",
    "IMAGE_STORED": "Image stored in media library",
    "DOCUMENT_CREATED": "Document created",
    "MANIFEST_SAVED": "Import manifest saved",
}

REPORT_DIR = os.path.join("reports", "import")


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, default=str)
        f.write("\n")


def report_error(code: str, subject: Dict[str, Any], exc: Optional[Exception] = None) -> None:
    """Log an error event for ``subject``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    subject:
        A dictionary describing what failed, typically ``{"url": ...}`` for
        images or ``{"id": ..., "title": ...}`` for records.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the log entry.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, **subject}
    if exc is not None:
        entry["error"] = str(exc)
    label = subject.get("url") or subject.get("title") or subject.get("id") or ""
    print(f"[ERROR] {message} - {label}")
    _write_jsonl(os.path.join(REPORT_DIR, "errors.jsonl"), entry)


def report_ok(code: str, subject: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``subject``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    subject:
        The dictionary describing the item the event refers to.
    extra:
        Optional dictionary of additional fields to merge into the log entry.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, **subject}
    if extra:
        entry.update(extra)
    label = subject.get("url") or subject.get("title") or subject.get("id") or ""
    print(f"[OK] {message} - {label}")
    _write_jsonl(os.path.join(REPORT_DIR, "success.jsonl"), entry)
