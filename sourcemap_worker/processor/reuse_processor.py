from pathlib import Path

from sourcemap_worker.logging.logger import Log
from sourcemap_worker.processor.content_index import ContentIndex
from sourcemap_worker.processor.discovery import discover_originals
from sourcemap_worker.processor.models import ProcessingRecord
from sourcemap_worker.processor.paths import AssetLayout
from sourcemap_worker.processor.pipeline import (
    FileContext,
    PipelineStep,
    log_outcome,
    run_steps,
)
from sourcemap_worker.processor.steps import (
    CheckOriginalAbsentStep,
    CopyCompressedStep,
    CopyMinifiedStep,
    MatchContentStep,
    SaveOriginalStep,
)


class ReuseProcessor:
    """Gives plain files the minified output of their fingerprinted twin.

    Must only run once every fingerprinted file has been renamed, i.e. after
    the worker pool has drained. Plain files are handled one at a time in
    discovery order.
    """

    def __init__(self, layout: AssetLayout, gzip: bool = True) -> None:
        self._layout = layout
        self._gzip = gzip

    def build_index(self) -> ContentIndex:
        originals = discover_originals(self._layout)
        index = ContentIndex.build(originals)
        Log.info(f"Indexed {len(index)} original files from {len(originals)} candidates")
        return index

    def process(self, plain_files: list[Path]) -> list[ProcessingRecord]:
        """Build the content index, then reuse outputs for each plain file.

        Raises:
            IndexBuildError: if an original cannot be read.
        """
        index = self.build_index()
        steps = self._build_steps(index)
        records = []
        for path in plain_files:
            context = FileContext(record=self._layout.record_for(path))
            record = run_steps(steps, context)
            log_outcome(record)
            records.append(record)
        return records

    def _build_steps(self, index: ContentIndex) -> list[PipelineStep]:
        steps: list[PipelineStep] = [
            CheckOriginalAbsentStep(),
            MatchContentStep(index, self._layout, gzip=self._gzip),
            SaveOriginalStep(),
            CopyMinifiedStep(self._layout),
        ]
        if self._gzip:
            steps.append(CopyCompressedStep(self._layout))
        return steps
