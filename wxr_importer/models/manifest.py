from __future__ import annotations

from typing import Dict, Literal

from pydantic import BaseModel, ConfigDict, Field

MANIFEST_KIND = "wxr"


class ImportManifest(BaseModel):
    """Records approved in the planning phase, keyed by WXR post id.

    Written once by :func:`wxr_importer.importers.selection.build_manifest`
    and consumed once by the commit phase.
    """

    model_config = ConfigDict(populate_by_name=True)

    source_file: str = Field(..., alias="file")
    source_mime: str = Field("application/xml", alias="file_type")
    kind: Literal["wxr"] = Field(MANIFEST_KIND, alias="type_of")
    entries: Dict[str, str] = Field(default_factory=dict, alias="chapters")
    entry_types: Dict[str, str] = Field(default_factory=dict, alias="post_types")
    allow_parts: bool = True

    def add(self, record_id: str, title: str, post_type: str) -> None:
        self.entries[record_id] = title
        self.entry_types[record_id] = post_type
