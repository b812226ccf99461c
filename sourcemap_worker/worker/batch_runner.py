from pathlib import Path

from sourcemap_worker.config.settings import Settings
from sourcemap_worker.logging.logger import Log
from sourcemap_worker.minify.base import BaseMinifier
from sourcemap_worker.minify.factory import MinifierFactory
from sourcemap_worker.processor.discovery import classify, discover_scripts
from sourcemap_worker.processor.exceptions import RootDirectoryError
from sourcemap_worker.processor.minify_worker import MinifyWorker
from sourcemap_worker.processor.models import BatchReport, FileState, ProcessingRecord
from sourcemap_worker.processor.paths import AssetLayout
from sourcemap_worker.processor.pipeline import log_outcome
from sourcemap_worker.processor.reuse_processor import ReuseProcessor
from sourcemap_worker.worker.pool import WorkerPool


class BatchRunner:
    """Run one batch: discover -> minify fingerprinted files -> reuse for plain files."""

    def __init__(self, minifier: BaseMinifier, settings: Settings) -> None:
        self._minifier = minifier
        self._settings = settings

    def run(self, root: Path) -> BatchReport:
        """Process every script under ``root``'s assets directory.

        Raises:
            RootDirectoryError: if the root or its assets directory is unusable.
        """
        layout = AssetLayout.from_settings(root, self._settings)
        self._validate(layout)

        scripts = discover_scripts(layout)
        classification = classify(scripts, layout.assets_path)
        fingerprinted = [script.path for script in classification.fingerprinted]
        plain = [script.path for script in classification.plain]
        Log.info(
            f"Found {len(fingerprinted)} fingerprinted and {len(plain)} plain files "
            f"under {layout.assets_path}"
        )

        report = BatchReport()
        worker = MinifyWorker(self._minifier, layout, gzip=self._settings.gzip)
        reuse = ReuseProcessor(layout, gzip=self._settings.gzip)
        pool = WorkerPool(
            worker.process,
            concurrency=self._settings.threads,
            on_drain=lambda: self._on_drain(pool, layout, fingerprinted, plain, reuse, report),
        )
        for path in fingerprinted:
            pool.submit(path)
        pool.close()
        pool.wait()
        if pool.drain_error is not None:
            report.phase_errors.append(str(pool.drain_error))

        Log.info(
            f"All files have been processed: {report.count(FileState.DONE)} done, "
            f"{report.count(FileState.SKIPPED)} skipped, {report.failures} failed"
        )
        return report

    def _on_drain(
        self,
        pool: WorkerPool,
        layout: AssetLayout,
        fingerprinted: list[Path],
        plain: list[Path],
        reuse: ReuseProcessor,
        report: BatchReport,
    ) -> None:
        results = pool.results
        errors = pool.errors
        for path in fingerprinted:
            record = results.get(path)
            if record is None or not record.settled:
                record = self._failed_record(layout, path, errors.get(path))
            log_outcome(record)
            report.minified.append(record)

        Log.info(f"Reusing minified output for {len(plain)} plain files")
        try:
            report.reused.extend(reuse.process(plain))
        except Exception as exc:
            Log.error(f"Reuse phase failed: {exc}")
            report.phase_errors.append(str(exc))

    @staticmethod
    def _failed_record(
        layout: AssetLayout, path: Path, exc: BaseException | None
    ) -> ProcessingRecord:
        record = layout.record_for(path)
        record.state = FileState.FAILED
        record.reason = str(exc) if exc is not None else "no result"
        return record

    @staticmethod
    def _validate(layout: AssetLayout) -> None:
        for directory in (layout.root, layout.assets_path):
            if not directory.exists():
                raise RootDirectoryError(f"Directory does not exist: {directory}")
            if not directory.is_dir():
                raise RootDirectoryError(f"Input is not a directory: {directory}")


def build_batch_runner(settings: Settings) -> BatchRunner:
    """Build a BatchRunner with the configured minifier."""
    return BatchRunner(MinifierFactory.create(settings), settings)
