from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookDocument(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
    )

    id: Optional[int] = None
    title: str = Field("", alias="post_title")
    post_type: str
    status: str = Field("draft", alias="post_status")
    content: Optional[str] = Field(None, alias="post_content")
    parent_id: Optional[int] = Field(None, alias="post_parent")
    menu_order: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id", "metadata"})
