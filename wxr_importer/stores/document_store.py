"""
DuckDB-backed storage for imported book documents.

Two tables are used: ``documents`` (one row per front matter, part,
chapter, back matter, post or page) and ``document_meta`` (key/value pairs,
JSON encoded).  The database file is created on first use.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

import duckdb

from wxr_importer.models import BookDocument, PostType

_SCHEMA = [
    "CREATE SEQUENCE IF NOT EXISTS document_ids START 1",
    """
    CREATE TABLE IF NOT EXISTS documents (
        id BIGINT PRIMARY KEY DEFAULT nextval('document_ids'),
        title VARCHAR NOT NULL,
        post_type VARCHAR NOT NULL,
        status VARCHAR NOT NULL,
        content VARCHAR,
        parent_id BIGINT,
        menu_order INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS document_meta (
        document_id BIGINT NOT NULL,
        meta_key VARCHAR NOT NULL,
        meta_value VARCHAR
    )
    """,
]

_COLUMNS = "id, title, post_type, status, content, parent_id, menu_order"


class DuckDBDocumentStore:
    def __init__(self, db_path: str = "data/book.duckdb") -> None:
        if db_path != ":memory:":
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self.db_path = db_path
        self.con = duckdb.connect(database=db_path, read_only=False)
        for statement in _SCHEMA:
            self.con.execute(statement)

    def close(self) -> None:
        self.con.close()

    def create_document(self, fields: Dict[str, Any]) -> int:
        """Insert a document built from ``fields`` and return its new id."""
        document = BookDocument.model_validate(fields)
        row = document.to_row()
        new_id = self.con.execute(
            "INSERT INTO documents (title, post_type, status, content, parent_id, menu_order) "
            "VALUES (?, ?, ?, ?, ?, ?) RETURNING id",
            [row["title"], row["post_type"], row["status"], row["content"], row["parent_id"], row["menu_order"]],
        ).fetchone()[0]
        return int(new_id)

    def get_document(self, document_id: int) -> Optional[BookDocument]:
        row = self.con.execute(
            f"SELECT {_COLUMNS} FROM documents WHERE id = ?", [document_id]
        ).fetchone()
        if row is None:
            return None
        document = self._from_row(row)
        document.metadata = self.get_metadata(document_id)
        return document

    def list_documents(self) -> List[BookDocument]:
        rows = self.con.execute(f"SELECT {_COLUMNS} FROM documents ORDER BY id").fetchall()
        return [self._from_row(row) for row in rows]

    def set_metadata(self, document_id: int, key: str, value: Any) -> None:
        """Replace any value stored under ``key`` for the document."""
        self.con.execute(
            "DELETE FROM document_meta WHERE document_id = ? AND meta_key = ?", [document_id, key]
        )
        self.con.execute(
            "INSERT INTO document_meta VALUES (?, ?, ?)",
            [document_id, key, json.dumps(value, ensure_ascii=False)],
        )

    def get_metadata(self, document_id: int) -> Dict[str, Any]:
        rows = self.con.execute(
            "SELECT meta_key, meta_value FROM document_meta WHERE document_id = ?", [document_id]
        ).fetchall()
        return {key: json.loads(value) for key, value in rows}

    def reconsolidate(self, document_id: int, document: Optional[BookDocument]) -> None:
        """
        Put a freshly created document at the end of its sibling group.

        Siblings are documents of the same type (chapters: of the same
        parent).  Documents that already have a ``menu_order`` keep it.
        """
        if document is None or document.menu_order:
            return
        if document.post_type == PostType.CHAPTER.value:
            sql = (
                "SELECT COALESCE(MAX(menu_order), 0) FROM documents "
                "WHERE post_type = ? AND parent_id IS NOT DISTINCT FROM ? AND id <> ?"
            )
            params = [document.post_type, document.parent_id, document_id]
        else:
            sql = "SELECT COALESCE(MAX(menu_order), 0) FROM documents WHERE post_type = ? AND id <> ?"
            params = [document.post_type, document_id]
        highest = self.con.execute(sql, params).fetchone()[0]
        self.con.execute(
            "UPDATE documents SET menu_order = ? WHERE id = ?", [int(highest) + 1, document_id]
        )

    def default_chapter_parent(self) -> Optional[int]:
        """Id of the first existing part, used for chapters imported before any part."""
        row = self.con.execute(
            "SELECT id FROM documents WHERE post_type = ? ORDER BY menu_order, id LIMIT 1",
            [PostType.PART.value],
        ).fetchone()
        return int(row[0]) if row else None

    @staticmethod
    def _from_row(row) -> BookDocument:
        keys = _COLUMNS.split(", ")
        return BookDocument.model_validate(dict(zip(keys, row)))
