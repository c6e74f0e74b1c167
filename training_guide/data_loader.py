"""Utilities for retrieving game datasets over HTTP or from disk."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

import requests

from .config import dataset_urls

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DataLoader:
    """Fetches JSON datasets from the configured locations and memoises them."""

    base_url: str = "data"
    session: requests.Session | None = None
    timeout: float = 30.0
    urls: Mapping[str, str] = field(default_factory=dict)
    _session: requests.Session = field(init=False, repr=False)
    _cache: Dict[str, Any] = field(init=False, repr=False, default_factory=dict)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        if not self.urls:
            self.urls = dataset_urls(self.base_url)

    def fetch_json(self, name: str) -> Any:
        """Return the parsed JSON for ``name`` from the configured locations."""

        if name not in self.urls:
            raise KeyError(f"Unknown dataset: {name}")
        if name not in self._cache:
            location = self.urls[name]
            if location.startswith(("http://", "https://")):
                logger.info("Downloading dataset %s from %s", name, location)
                response = self._session.get(location, timeout=self.timeout)
                response.raise_for_status()
                self._cache[name] = response.json()
            else:
                logger.info("Reading dataset %s from %s", name, location)
                self._cache[name] = json.loads(Path(location).read_text(encoding="utf-8"))
        return self._cache[name]
