from pathlib import Path

from sourcemap_worker.minify.exceptions import MinificationError
from sourcemap_worker.processor.models import FileState, ProcessingRecord
from sourcemap_worker.processor.pipeline import (
    FileContext,
    PipelineStep,
    StageResult,
    StageStatus,
    run_steps,
)


class _Step(PipelineStep):
    def __init__(
        self,
        result: StageResult | None = None,
        error: Exception | None = None,
        advances_to: FileState | None = None,
    ) -> None:
        self._result = result or StageResult.proceed()
        self._error = error
        self.advances_to = advances_to  # type: ignore[misc]
        self.calls = 0

    def execute(self, context: FileContext) -> StageResult:
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._result


def _make_context() -> FileContext:
    path = Path("/srv/app/public/assets/app.js")
    record = ProcessingRecord(
        path=path,
        original=path.with_name("app.orig.js"),
        source_map=path.with_name("app.js.map"),
        gzipped=path.with_name("app.js.gz"),
    )
    return FileContext(record=record)


class TestStageResult:
    def test_factories(self) -> None:
        assert StageResult.proceed().status is StageStatus.CONTINUE
        assert StageResult.skip("done").status is StageStatus.SKIP
        assert StageResult.fail("boom") == StageResult(StageStatus.FAIL, "boom")


class TestPipelineStep:
    def test_converts_os_error_to_failure(self) -> None:
        step = _Step(error=FileNotFoundError("no such file"))
        assert step.run(_make_context()) == StageResult.fail("no such file")

    def test_converts_minification_error_to_failure(self) -> None:
        step = _Step(error=MinificationError("parse error"))
        assert step.run(_make_context()).status is StageStatus.FAIL


class TestRunSteps:
    def test_all_continue_ends_done(self) -> None:
        context = _make_context()
        record = run_steps([_Step(), _Step(advances_to=FileState.ORIGINAL_SAVED)], context)
        assert record.state is FileState.DONE

    def test_failure_after_progress_marks_failed(self) -> None:
        context = _make_context()
        steps = [
            _Step(advances_to=FileState.ORIGINAL_SAVED),
            _Step(error=OSError("disk full")),
        ]
        record = run_steps(steps, context)
        assert record.state is FileState.FAILED
        assert record.reason == "disk full"

    def test_skip_short_circuits(self) -> None:
        later = _Step()
        record = run_steps([_Step(StageResult.skip("already")), later], _make_context())
        assert record.state is FileState.SKIPPED
        assert record.reason == "already"
        assert later.calls == 0

    def test_failure_short_circuits(self) -> None:
        later = _Step()
        record = run_steps([_Step(StageResult.fail("boom")), later], _make_context())
        assert record.state is FileState.FAILED
        assert later.calls == 0

    def test_state_visible_to_later_stages(self) -> None:
        seen: list[FileState] = []

        class _Observe(PipelineStep):
            def execute(self, context: FileContext) -> StageResult:
                seen.append(context.record.state)
                return StageResult.proceed()

        run_steps([_Step(advances_to=FileState.ORIGINAL_SAVED), _Observe()], _make_context())

        assert seen == [FileState.ORIGINAL_SAVED]

    def test_record_settled_only_in_terminal_states(self) -> None:
        context = _make_context()
        assert not context.record.settled
        run_steps([_Step(advances_to=FileState.ORIGINAL_SAVED)], context)
        assert context.record.settled
