"""
Storage backends for imported documents, media files and the pending
import manifest.
"""

from .document_store import DuckDBDocumentStore
from .manifest_store import JsonManifestStore
from .media_store import LocalMediaStore

__all__ = ["DuckDBDocumentStore", "JsonManifestStore", "LocalMediaStore"]
