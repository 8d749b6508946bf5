from __future__ import annotations

import json
import os
from typing import Optional

from pydantic import ValidationError

from wxr_importer.models import ImportManifest


class JsonManifestStore:
    """Keeps the pending import manifest in a single JSON file."""

    def __init__(self, path: str = "data/current_import.json") -> None:
        self.path = path

    def save_manifest(self, manifest: ImportManifest) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(manifest.model_dump(by_alias=True), f, ensure_ascii=False, indent=2)

    def load_manifest(self) -> Optional[ImportManifest]:
        """Return the saved manifest, or ``None`` if there is none or it is unreadable."""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return ImportManifest.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            print(f"Warning: Could not decode {self.path}: {e}")
            return None

    def delete_manifest(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
