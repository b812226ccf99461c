from pathlib import Path

from sourcemap_worker.minify.base import BaseMinifier
from sourcemap_worker.processor.models import ProcessingRecord
from sourcemap_worker.processor.paths import AssetLayout
from sourcemap_worker.processor.pipeline import FileContext, PipelineStep, run_steps
from sourcemap_worker.processor.steps import (
    AppendReferenceStep,
    CompressStep,
    MinifyStep,
    ReadSourceStep,
    RewritePrefixStep,
    SaveOriginalStep,
    WriteOutputsStep,
)


class MinifyWorker:
    """Minifies one fingerprinted file and writes its map beside it.

    Pipeline: read -> save original -> minify -> rewrite prefixes ->
    append reference -> write -> (compress).
    """

    def __init__(
        self,
        minifier: BaseMinifier,
        layout: AssetLayout,
        gzip: bool = True,
    ) -> None:
        self._layout = layout
        self._steps: list[PipelineStep] = [
            ReadSourceStep(layout),
            SaveOriginalStep(),
            MinifyStep(minifier, layout),
            RewritePrefixStep(layout),
            AppendReferenceStep(layout),
            WriteOutputsStep(),
        ]
        if gzip:
            self._steps.append(CompressStep())

    def process(self, path: Path) -> ProcessingRecord:
        """Run the pipeline for one file. Never raises for I/O or minify errors."""
        context = FileContext(record=self._layout.record_for(path))
        return run_steps(self._steps, context)
