"""Markdown files on disk as a document store."""

from __future__ import annotations

from pathlib import Path


class LocalFileStore:
    """``ref`` is a file path, resolved against ``root`` when relative."""

    def __init__(self, root: Path | str | None = None):
        self.root = Path(root) if root else None

    def _resolve(self, ref: str) -> Path:
        path = Path(ref)
        if self.root and not path.is_absolute():
            path = self.root / path
        return path

    def fetch_document(self, ref: str) -> str:
        path = self._resolve(ref)
        if not path.exists():
            return ""
        return path.read_text(encoding="utf-8")

    def persist_document(self, ref: str, text: str) -> str:
        path = self._resolve(ref)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return str(path)
