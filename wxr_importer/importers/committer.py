"""
Commit phase of an import.

:func:`commit_manifest` walks a freshly parsed export in book order and
creates one document per record that was planned in the manifest and is
still selected by the user.  It never looks at anything produced by the
planning phase other than the manifest itself.

Chapters are attached to the most recent part created in the same pass;
a chapter met before any part falls back to ``default_parent``.  Nothing
is rolled back if a later record fails.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable, List, Optional

import phpserialize

from wxr_importer.extractors import ordered_records
from wxr_importer.models import ImportManifest, Parenting, WxrExport, WxrRecord, rule_for
from wxr_importer.parsers import inner_html, load_fragment, strip_all_tags, tidy as default_tidy
from wxr_importer.utils import report_ok

DEFAULT_META_KEYS: List[str] = [
    "pb_section_author",
    "pb_section_license",
    "pb_short_title",
    "pb_subtitle",
]
# Set on every imported document so it is shown and exported by default.
ALWAYS_ON_FLAGS = ("pb_show_title", "pb_export")

_registered_meta_keys: List[str] = []

_SERIALIZED_RE = re.compile(
    r'^(?:N;|b:[01];|i:-?\d+;|d:-?[0-9.eE+]+;|s:\d+:".*";|a:\d+:\{.*\}|O:\d+:".*":\d+:\{.*\})$',
    re.DOTALL,
)


def register_meta_key(key: str) -> None:
    """Add ``key`` to the metadata copied from every imported record."""
    if key not in _registered_meta_keys:
        _registered_meta_keys.append(key)


def clear_registered_meta_keys() -> None:
    del _registered_meta_keys[:]


def import_meta_keys(extra: Optional[Iterable[str]] = None) -> List[str]:
    keys = list(DEFAULT_META_KEYS)
    for key in list(_registered_meta_keys) + list(extra or ()):
        if key not in keys:
            keys.append(key)
    return keys


def is_serialized(value: Any) -> bool:
    return isinstance(value, str) and bool(_SERIALIZED_RE.match(value.strip()))


def maybe_unserialize(value: str) -> Any:
    """Decode PHP-serialized metadata; anything else is returned unchanged."""
    if not is_serialized(value):
        return value
    try:
        data = phpserialize.loads(value.strip().encode("utf-8"), decode_strings=True)
    except (ValueError, TypeError):
        return value
    return _arrays_to_lists(data)


def _arrays_to_lists(data: Any) -> Any:
    if isinstance(data, dict):
        data = {k: _arrays_to_lists(v) for k, v in data.items()}
        if list(data.keys()) == list(range(len(data))):
            return list(data.values())
    return data


def normalize_content(record: WxrRecord, localizer, tidy: Callable[[str], str] = default_tidy) -> str:
    """Tidy the record body, localize its images and return the inner markup."""
    soup = load_fragment(tidy(record.content))
    if localizer is not None:
        soup = localizer.localize(soup)
    return inner_html(soup)


def commit_manifest(
    manifest: ImportManifest,
    export: WxrExport,
    *,
    document_store,
    localizer,
    selection,
    meta_keys: Optional[Iterable[str]] = None,
    default_parent: Optional[int] = None,
    tidy: Callable[[str], str] = default_tidy,
) -> int:
    """
    Create documents for the planned records of ``export``.

    :param manifest: The manifest saved by the planning phase.
    :param export: A fresh parse of ``manifest.source_file``.
    :param document_store: Store providing ``create_document``,
        ``get_document``, ``set_metadata`` and ``reconsolidate``.
    :param localizer: An :class:`~wxr_importer.importers.images.ImageLocalizer`
        or ``None`` to leave image references untouched.
    :param selection: Object answering ``is_flagged_for_import(id)`` and
        ``resolve_committed_type(id)``.
    :param meta_keys: Metadata keys to copy; defaults to
        :func:`import_meta_keys`.
    :param default_parent: Parent for chapters met before any part.
    :return: Number of documents created.
    """
    keys = list(meta_keys) if meta_keys is not None else import_meta_keys()
    chapter_parent = default_parent
    total = 0

    for record in ordered_records(export):
        if not selection.is_flagged_for_import(record.id):
            continue
        if record.id not in manifest.entries:
            continue

        post_type = selection.resolve_committed_type(record.id)
        rule = rule_for(post_type)
        html = normalize_content(record, localizer, tidy)

        new_post = {
            "post_title": strip_all_tags(record.title),
            "post_type": post_type,
            "post_status": rule.status,
        }
        if rule.keeps_content:
            new_post["post_content"] = html
        if rule.parenting == Parenting.RUNNING_PART:
            new_post["post_parent"] = chapter_parent

        pid = document_store.create_document(new_post)
        if rule.heads_chapters:
            chapter_parent = pid

        for meta_key in keys:
            meta_val = maybe_unserialize(record.meta_value(meta_key))
            if meta_val:
                document_store.set_metadata(pid, meta_key, meta_val)
        if rule.extra_meta_key:
            extra = record.meta_value(rule.extra_meta_key)
            if extra:
                document_store.set_metadata(pid, rule.extra_meta_key, extra)

        for flag in ALWAYS_ON_FLAGS:
            document_store.set_metadata(pid, flag, "on")

        document_store.reconsolidate(pid, document_store.get_document(pid))
        report_ok("DOCUMENT_CREATED", {"id": record.id, "title": new_post["post_title"]}, {"document_id": pid, "post_type": post_type})
        total += 1

    return total
