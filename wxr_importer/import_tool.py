"""
High-level orchestration of a WXR → book import.

This module defines a :class:`WxrImportTool` class that ties together the
extractors, importers, stores and utilities into the two-phase workflow:

1. :meth:`WxrImportTool.plan_import` parses an export and saves a manifest
   of the records that can be imported.
2. :meth:`WxrImportTool.run_import` re-parses the same file, creates the
   selected documents (localizing their images) and deletes the manifest.

Configuration is supplied via a JSON file path or directly as a
dictionary.  The ``import`` section holds the database and manifest paths,
``media`` the upload directory and public base URL, and ``http`` the
download settings.
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from functools import partial
from typing import Any, Dict, List, Optional

from wxr_importer.extractors import WxrParseError, extract_wxr
from wxr_importer.importers import (
    ImageCache,
    ImageLocalizer,
    ImportSelection,
    build_manifest,
    commit_manifest,
    import_meta_keys,
)
from wxr_importer.stores import DuckDBDocumentStore, JsonManifestStore, LocalMediaStore
from wxr_importer.utils import RateLimiter, download_to_temp, report_error, report_ok

LOG_FILE = os.path.join("reports", "import", "import.log")


class WxrImportTool:
    """
    Encapsulates all state and behavior required to import a WXR export
    into a book.  Detailed success and failure information is recorded
    using the :mod:`wxr_importer.utils.errors` module; messages meant for
    the user are collected in :attr:`notices`.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> None:
        if config_file and os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        elif config is None:
            config = {}

        # Ensure essential keys exist to prevent KeyErrors
        config.setdefault("import", {})
        config["import"].setdefault("db_path", os.getenv("WXR_DB_PATH", "data/book.duckdb"))
        config["import"].setdefault("manifest_path", "data/current_import.json")
        config["import"].setdefault("dry_run", False)
        config["import"].setdefault("extra_meta_keys", [])

        config.setdefault("media", {})
        config["media"].setdefault("media_dir", os.getenv("WXR_MEDIA_DIR", "data/uploads"))
        config["media"].setdefault("base_url", os.getenv("WXR_MEDIA_BASE_URL", "/uploads"))

        config.setdefault("http", {})
        config["http"].setdefault("timeout", 30)
        config["http"].setdefault("rpm", 120)
        config["http"].setdefault("user_agent", "wxr-importer/0.1")

        self.config = config
        self.notices: List[str] = []
        self.manifest_store = JsonManifestStore(config["import"]["manifest_path"])
        self.media_store = LocalMediaStore(config["media"]["media_dir"], config["media"]["base_url"])

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        os.makedirs(os.path.dirname(LOG_FILE), exist_ok=True)
        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(f"{datetime.now().isoformat(timespec='seconds')} {level}: {message}\n")

    def open_document_store(self) -> DuckDBDocumentStore:
        return DuckDBDocumentStore(self.config["import"]["db_path"])

    def make_downloader(self):
        http = self.config["http"]
        return partial(
            download_to_temp,
            timeout=http["timeout"],
            headers={"User-Agent": http["user_agent"]},
            limiter=RateLimiter(http["rpm"]),
        )

    def plan_import(self, file_path: str, mime: str = "application/xml") -> bool:
        """
        Parse ``file_path`` and save the manifest of importable records.

        :return: ``False`` if the file cannot be parsed; no manifest is
            written in that case.
        """
        self.log_message(f"Reading WXR export {file_path}")
        try:
            export = extract_wxr(file_path)
        except WxrParseError as e:
            report_error("WXR_PARSE", {"file": file_path}, e)
            self.log_message(f"Error parsing WXR: {e}", "ERROR")
            return False

        manifest = build_manifest(export, source_file=file_path, source_mime=mime)
        kind = "book" if export.is_book else "blog"
        self.log_message(
            f"Planned {len(manifest.entries)} of {len(export.records)} records ({kind} export)."
        )
        for record_id, title in manifest.entries.items():
            self.log_message(f"  {record_id} [{manifest.entry_types[record_id]}] {title}", level="DEBUG")
        self.manifest_store.save_manifest(manifest)
        report_ok("MANIFEST_SAVED", {"file": file_path}, {"entries": len(manifest.entries)})
        return True

    def run_import(self, selection: Optional[ImportSelection] = None) -> bool:
        """
        Commit the pending manifest.

        The export is parsed again from disk; nothing from
        :meth:`plan_import` is reused except the saved manifest.  The
        manifest is deleted once the pass over the records starts, even if
        some records or images degrade or the store raises part way through.

        :param selection: The user's skips and type overrides.  Defaults
            to importing every planned record with its detected type.
        :return: ``False`` if there is no manifest or the export can no
            longer be parsed.
        """
        manifest = self.manifest_store.load_manifest()
        if manifest is None:
            report_error("MANIFEST_MISSING", {"file": self.manifest_store.path})
            self.log_message("No pending import. Run the plan step first.", "ERROR")
            return False

        try:
            export = extract_wxr(manifest.source_file)
        except WxrParseError as e:
            report_error("WXR_PARSE", {"file": manifest.source_file}, e)
            self.log_message(f"Error parsing WXR: {e}", "ERROR")
            return False

        if selection is None:
            selection = ImportSelection(entry_types=manifest.entry_types)
        elif not selection.entry_types:
            selection.entry_types = dict(manifest.entry_types)

        dry_run: bool = self.config["import"]["dry_run"]
        localizer = None
        if dry_run:
            self.log_message("Dry-run: images will not be downloaded")
        else:
            localizer = ImageLocalizer(ImageCache(), self.make_downloader(), self.media_store)

        store = self.open_document_store()
        try:
            total = commit_manifest(
                manifest,
                export,
                document_store=store,
                localizer=localizer,
                selection=selection,
                meta_keys=import_meta_keys(self.config["import"]["extra_meta_keys"]),
                default_parent=store.default_chapter_parent(),
            )
        finally:
            store.close()
            # Consumed even when a record fails part way through.
            self.manifest_store.delete_manifest()

        notice = f"Imported {total} chapters."
        self.notices.append(notice)
        self.log_message(notice)
        return True
