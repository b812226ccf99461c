import shutil

from sourcemap_worker.logging.logger import Log
from sourcemap_worker.minify.base import BaseMinifier
from sourcemap_worker.minify.exceptions import MinificationError
from sourcemap_worker.processor.compression import gzip_file
from sourcemap_worker.processor.content_index import ContentIndex
from sourcemap_worker.processor.exceptions import NoMatchingOriginalError
from sourcemap_worker.processor.models import FileState
from sourcemap_worker.processor.paths import AssetLayout
from sourcemap_worker.processor.pipeline import FileContext, PipelineStep, StageResult


class ReadSourceStep(PipelineStep):
    def __init__(self, layout: AssetLayout) -> None:
        self._layout = layout

    def execute(self, context: FileContext) -> StageResult:
        record = context.record
        context.content = record.path.read_bytes()
        comment = self._layout.source_map_comment(record.path).encode("utf-8")
        if context.content.endswith(comment):
            return StageResult.skip("already has a source map")
        Log.debug(f"Generating source map for file: {record.path}")
        return StageResult.proceed()


class SaveOriginalStep(PipelineStep):
    advances_to = FileState.ORIGINAL_SAVED

    def execute(self, context: FileContext) -> StageResult:
        context.record.path.rename(context.record.original)
        return StageResult.proceed()


class MinifyStep(PipelineStep):
    advances_to = FileState.MINIFIED

    def __init__(self, minifier: BaseMinifier, layout: AssetLayout) -> None:
        self._minifier = minifier
        self._layout = layout

    def execute(self, context: FileContext) -> StageResult:
        record = context.record
        try:
            source = record.original.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise MinificationError(f"{record.original} is not valid UTF-8") from exc
        result = self._minifier.minify(
            source,
            source_name=self._layout.source_name(record.original),
            source_map_url=self._layout.source_map_url(record.source_map),
        )
        context.code = result.code
        context.source_map = result.map
        return StageResult.proceed()


class RewritePrefixStep(PipelineStep):
    def __init__(self, layout: AssetLayout) -> None:
        self._layout = layout

    def execute(self, context: FileContext) -> StageResult:
        context.code = self._layout.rewrite_prefix(context.code)
        context.source_map = self._layout.rewrite_prefix(context.source_map)
        return StageResult.proceed()


class AppendReferenceStep(PipelineStep):
    def __init__(self, layout: AssetLayout) -> None:
        self._layout = layout

    def execute(self, context: FileContext) -> StageResult:
        context.code += self._layout.source_map_comment(context.record.path)
        return StageResult.proceed()


class WriteOutputsStep(PipelineStep):
    advances_to = FileState.WRITTEN

    def execute(self, context: FileContext) -> StageResult:
        record = context.record
        record.minified.write_text(context.code, encoding="utf-8")
        record.source_map.write_text(context.source_map, encoding="utf-8")
        return StageResult.proceed()


class CompressStep(PipelineStep):
    advances_to = FileState.COMPRESSED

    def execute(self, context: FileContext) -> StageResult:
        gzip_file(context.record.minified, context.record.gzipped)
        return StageResult.proceed()


class CheckOriginalAbsentStep(PipelineStep):
    def execute(self, context: FileContext) -> StageResult:
        if context.record.original.exists():
            return StageResult.skip("original already exists")
        return StageResult.proceed()


class MatchContentStep(PipelineStep):
    """Find the twin original and make sure its outputs exist before anything moves."""

    def __init__(self, index: ContentIndex, layout: AssetLayout, gzip: bool = False) -> None:
        self._index = index
        self._layout = layout
        self._gzip = gzip

    def execute(self, context: FileContext) -> StageResult:
        record = context.record
        context.content = record.path.read_bytes()
        context.match = self._index.lookup(context.content)
        if context.match is None:
            raise NoMatchingOriginalError(
                f"Could not find original hashed file for: {record.path}"
            )
        counterpart = self._layout.live_path_for_original(context.match)
        required = [counterpart, self._layout.source_map_path(counterpart)]
        if self._gzip:
            required.append(self._layout.gzip_path(counterpart))
        missing = [path for path in required if not path.exists()]
        if missing:
            return StageResult.fail(
                f"Counterpart not minified for: {record.path} (missing {missing[0]})"
            )
        return StageResult.proceed()


class CopyMinifiedStep(PipelineStep):
    advances_to = FileState.WRITTEN

    def __init__(self, layout: AssetLayout) -> None:
        self._layout = layout

    def execute(self, context: FileContext) -> StageResult:
        record = context.record
        if context.match is None:
            raise NoMatchingOriginalError(f"No counterpart resolved for: {record.path}")
        counterpart = self._layout.live_path_for_original(context.match)
        shutil.copyfile(counterpart, record.minified)
        shutil.copyfile(self._layout.source_map_path(counterpart), record.source_map)
        record.reused_from = counterpart
        return StageResult.proceed()


class CopyCompressedStep(PipelineStep):
    advances_to = FileState.COMPRESSED

    def __init__(self, layout: AssetLayout) -> None:
        self._layout = layout

    def execute(self, context: FileContext) -> StageResult:
        record = context.record
        if record.reused_from is None:
            raise NoMatchingOriginalError(f"No counterpart resolved for: {record.path}")
        shutil.copyfile(self._layout.gzip_path(record.reused_from), record.gzipped)
        return StageResult.proceed()
