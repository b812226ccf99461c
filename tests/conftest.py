import json
import threading
import time
from pathlib import Path

import pytest

from sourcemap_worker.minify.base import BaseMinifier, MinifyResult
from sourcemap_worker.processor.paths import AssetLayout


class WhitespaceMinifier(BaseMinifier):
    """Strips spaces and newlines; records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    def minify(
        self,
        source: str,
        *,
        source_name: str,
        source_map_url: str,
    ) -> MinifyResult:
        self.calls.append((source, source_name, source_map_url))
        code = source.replace(" ", "").replace("\n", "")
        source_map = json.dumps(
            {"version": 3, "file": source_map_url, "sources": [source_name], "mappings": ""}
        )
        return MinifyResult(code=code, map=source_map)


class CountingMinifier(WhitespaceMinifier):
    """Tracks how many minify calls overlap."""

    def __init__(self, delay: float = 0.02) -> None:
        super().__init__()
        self._delay = delay
        self._lock = threading.Lock()
        self.active = 0
        self.max_active = 0

    def minify(
        self,
        source: str,
        *,
        source_name: str,
        source_map_url: str,
    ) -> MinifyResult:
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            time.sleep(self._delay)
            return super().minify(
                source, source_name=source_name, source_map_url=source_map_url
            )
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture()
def layout(tmp_path: Path) -> AssetLayout:
    """Layout rooted at a temporary directory with an empty assets tree."""
    asset_layout = AssetLayout(root=tmp_path)
    asset_layout.assets_path.mkdir(parents=True)
    return asset_layout


@pytest.fixture()
def assets_path(layout: AssetLayout) -> Path:
    return layout.assets_path


@pytest.fixture()
def minifier() -> WhitespaceMinifier:
    return WhitespaceMinifier()


@pytest.fixture()
def counting_minifier() -> CountingMinifier:
    return CountingMinifier()
