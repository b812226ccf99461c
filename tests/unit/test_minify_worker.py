import gzip
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

from sourcemap_worker.minify.exceptions import MinificationError
from sourcemap_worker.processor.minify_worker import MinifyWorker
from sourcemap_worker.processor.models import FileState
from sourcemap_worker.processor.paths import AssetLayout

HASH = "abcdef0123456789abcdef0123456789"


def _write(layout: AssetLayout, content: str = "var a = 1;") -> Path:
    path = layout.assets_path / f"app-{HASH}.js"
    path.write_text(content)
    return path


class TestMinifyWorkerSuccess:
    def test_writes_all_outputs(self, layout: AssetLayout, minifier: Any) -> None:
        path = _write(layout)
        worker = MinifyWorker(minifier, layout, gzip=True)

        record = worker.process(path)

        assert record.state is FileState.DONE
        assert record.original.read_text() == "var a = 1;"
        assert path.read_text() == (
            f"vara=1;\n//# sourceMappingURL=/assets/app-{HASH}.js.map"
        )
        assert record.source_map.exists()
        assert gzip.decompress(record.gzipped.read_bytes()) == path.read_bytes()

    def test_gzip_disabled_writes_no_archive(self, layout: AssetLayout, minifier: Any) -> None:
        path = _write(layout)
        record = MinifyWorker(minifier, layout, gzip=False).process(path)
        assert record.state is FileState.DONE
        assert not record.gzipped.exists()

    def test_map_sources_are_rooted(self, layout: AssetLayout, minifier: Any) -> None:
        path = _write(layout)
        record = MinifyWorker(minifier, layout, gzip=False).process(path)
        assert f'"/assets/app-{HASH}.orig.js"' in record.source_map.read_text()


class TestMinifyWorkerSkip:
    def test_already_processed_is_skipped(self, layout: AssetLayout, minifier: Any) -> None:
        path = _write(layout)
        worker = MinifyWorker(minifier, layout, gzip=False)
        worker.process(path)
        minified = path.read_bytes()
        minifier.calls.clear()

        record = worker.process(path)

        assert record.state is FileState.SKIPPED
        assert minifier.calls == []
        assert path.read_bytes() == minified


class TestMinifyWorkerFailure:
    def test_minify_failure_keeps_original(self, layout: AssetLayout) -> None:
        path = _write(layout)
        minifier = MagicMock()
        minifier.minify.side_effect = MinificationError("Unexpected token")

        record = MinifyWorker(minifier, layout).process(path)

        assert record.state is FileState.FAILED
        assert record.reason == "Unexpected token"
        assert record.original.read_text() == "var a = 1;"
        assert not path.exists()

    def test_missing_file_fails_without_raising(self, layout: AssetLayout) -> None:
        path = layout.assets_path / f"gone-{HASH}.js"
        record = MinifyWorker(MagicMock(), layout).process(path)
        assert record.state is FileState.FAILED
