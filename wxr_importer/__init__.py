"""
Top-level package for the WordPress WXR → book import utility.

This package bundles all components required to read a WXR export,
recognize and restore a part/chapter hierarchy, let a user choose what to
import, bring remote images into a local media library and create the
book's documents.  Modules are split into subpackages:

* :mod:`wxr_importer.models` – pydantic records, manifest and post types
* :mod:`wxr_importer.extractors` – WXR parsing and book ordering
* :mod:`wxr_importer.parsers` – HTML fragment and image file helpers
* :mod:`wxr_importer.importers` – plan, commit and image localization
* :mod:`wxr_importer.stores` – DuckDB documents, media files, manifest
* :mod:`wxr_importer.utils` – event logging, file names, downloads

Orchestration and configuration live in :mod:`wxr_importer.import_tool`.
"""
