from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional


def ensure_unique_path(path: Path) -> Path:
    if not path.exists():
        return path
    stem, suffix = path.stem, path.suffix
    i = 2
    while True:
        candidate = path.with_name(f"{stem}-{i}{suffix}")
        if not candidate.exists():
            return candidate
        i += 1


class LocalMediaStore:
    """
    Media library kept in a local directory and served under ``base_url``.

    The id of a stored file is its name inside ``media_dir``.
    """

    def __init__(self, media_dir: str = "data/uploads", base_url: str = "/uploads") -> None:
        self.media_dir = Path(media_dir)
        self.base_url = base_url.rstrip("/")

    def store_uploaded_file(self, temp_path: str, filename: str) -> Optional[str]:
        """Copy ``temp_path`` into the library as ``filename``; ``None`` on failure."""
        if not filename:
            return None
        try:
            self.media_dir.mkdir(parents=True, exist_ok=True)
            target = ensure_unique_path(self.media_dir / filename)
            shutil.copyfile(temp_path, target)
        except OSError as e:
            print(f"Failed to store {filename} in {self.media_dir}: {e}")
            return None
        return target.name

    def get_public_url(self, media_id: Optional[str]) -> str:
        if not media_id or not (self.media_dir / media_id).is_file():
            return ""
        return f"{self.base_url}/{media_id}"
