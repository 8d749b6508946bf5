"""
Data models shared by the extractors, importers and stores.
"""

from .document import BookDocument
from .manifest import MANIFEST_KIND, ImportManifest
from .post_types import (
    POST_TYPE_RULES,
    SUPPORTED_POST_TYPES,
    Parenting,
    PostType,
    PostTypeRule,
    rule_for,
)
from .record import WxrExport, WxrMeta, WxrRecord

__all__ = [
    "BookDocument",
    "ImportManifest",
    "MANIFEST_KIND",
    "POST_TYPE_RULES",
    "SUPPORTED_POST_TYPES",
    "Parenting",
    "PostType",
    "PostTypeRule",
    "rule_for",
    "WxrExport",
    "WxrMeta",
    "WxrRecord",
]
