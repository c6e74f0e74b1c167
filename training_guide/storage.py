"""Snapshot backends for the goal store."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol


class Storage(Protocol):
    def load(self) -> Optional[Dict[str, Any]]: ...

    def save(self, document: Dict[str, Any]) -> None: ...


class JsonFileStorage:
    """Keeps the exported document as pretty-printed JSON on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        """Return the saved document, or ``None`` when nothing has been saved yet."""

        if not self.path.exists():
            return None
        return json.loads(self.path.read_text(encoding="utf-8"))

    def save(self, document: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)


class MemoryStorage:
    """In-process storage for ephemeral sessions and tests."""

    def __init__(self, document: Optional[Dict[str, Any]] = None) -> None:
        self.document = json.loads(json.dumps(document)) if document is not None else None
        self.saves = 0

    def load(self) -> Optional[Dict[str, Any]]:
        return json.loads(json.dumps(self.document)) if self.document is not None else None

    def save(self, document: Dict[str, Any]) -> None:
        self.document = json.loads(json.dumps(document))
        self.saves += 1
