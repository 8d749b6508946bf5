from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WxrMeta(BaseModel):
    key: str
    value: str = ""


class WxrRecord(BaseModel):
    """One ``<item>`` of a WXR export, normalized."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    content: str = ""
    type: str = Field("post", alias="post_type")
    parent_id: Optional[str] = Field(None, alias="post_parent")
    order_hint: int = Field(0, alias="menu_order")
    metadata: List[WxrMeta] = Field(default_factory=list, alias="postmeta")

    @field_validator("title", "content", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("parent_id", mode="before")
    @classmethod
    def _zero_parent_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return None if v in ("", "0") else v

    @field_validator("order_hint", mode="before")
    @classmethod
    def _lenient_int(cls, v) -> int:
        try:
            return int(str(v).strip())
        except (TypeError, ValueError):
            return 0

    def meta_value(self, key: str) -> str:
        """Return the first value stored under ``key`` or an empty string."""
        for meta in self.metadata:
            if meta.key == key:
                return meta.value
        return ""


class WxrExport(BaseModel):
    """A parsed export: the records in file order plus the source path."""

    source_file: str = ""
    records: List[WxrRecord] = Field(default_factory=list)
    is_book: Optional[bool] = None
