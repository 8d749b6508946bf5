"""
Planning phase of an import: decide which records can be offered to the
user and remember them in an :class:`~wxr_importer.models.ImportManifest`.

User choices made afterwards (skip a record, import a chapter as front
matter, ...) are carried by :class:`ImportSelection` and only consulted
when the manifest is committed.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from wxr_importer.extractors import ordered_records
from wxr_importer.models import SUPPORTED_POST_TYPES, ImportManifest, PostType, WxrExport, rule_for

# Content the book platform writes into scaffold posts that are empty on purpose.
EMPTY_CONTENT_SENTINEL = "<!-- Here be dragons.-->"


def build_manifest(export: WxrExport, source_file: str, source_mime: str = "application/xml") -> ImportManifest:
    manifest = ImportManifest(source_file=source_file, source_mime=source_mime)
    for record in ordered_records(export):
        if record.type not in SUPPORTED_POST_TYPES:
            continue
        if not record.content and rule_for(record.type).keeps_content:
            continue
        if record.content == EMPTY_CONTENT_SENTINEL:
            continue
        manifest.add(record.id, record.title, record.type)
    return manifest


class ImportSelection:
    """
    The user's decisions about a pending manifest.

    :param skip_ids: Record ids the user unticked.
    :param type_overrides: Record id -> post type chosen by the user.
    :param entry_types: Types detected when the manifest was built, used
        when no override exists.
    """

    def __init__(
        self,
        skip_ids: Optional[Iterable[str]] = None,
        type_overrides: Optional[Dict[str, str]] = None,
        entry_types: Optional[Dict[str, str]] = None,
    ) -> None:
        self.skip_ids = {str(i) for i in (skip_ids or ())}
        self.type_overrides = {str(k): v for k, v in (type_overrides or {}).items()}
        self.entry_types = dict(entry_types or {})
        for record_id, post_type in self.type_overrides.items():
            if PostType.parse(post_type) is None:
                raise ValueError(f"Unsupported post type for {record_id}: {post_type!r}")

    def is_flagged_for_import(self, record_id: str) -> bool:
        return record_id not in self.skip_ids

    def resolve_committed_type(self, record_id: str) -> str:
        return self.type_overrides.get(record_id) or self.entry_types.get(record_id) or PostType.CHAPTER.value
