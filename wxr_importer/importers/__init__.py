"""
The two phases of a WXR import and the image localization they rely on.

* :mod:`wxr_importer.importers.selection` – plan: build the manifest
* :mod:`wxr_importer.importers.committer` – apply: create documents
* :mod:`wxr_importer.importers.images` – bring remote images home
"""

from .committer import clear_registered_meta_keys, commit_manifest, import_meta_keys, register_meta_key
from .images import FIXME_MARKER, ImageCache, ImageLocalizer
from .selection import EMPTY_CONTENT_SENTINEL, ImportSelection, build_manifest

__all__ = [
    "clear_registered_meta_keys",
    "commit_manifest",
    "import_meta_keys",
    "register_meta_key",
    "FIXME_MARKER",
    "ImageCache",
    "ImageLocalizer",
    "EMPTY_CONTENT_SENTINEL",
    "ImportSelection",
    "build_manifest",
]
