"""
Tests for the saga runner.
"""

import pytest

from apps.core.saga import Criticality, Saga, SagaError, SagaStep, StepStatus


class Recorder:
    """Collects the order in which actions and compensations ran."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def action(self, name: str, result=None):
        def _run():
            self.calls.append(f"do:{name}")
            return result

        return _run

    def failing(self, name: str, error: Exception):
        def _run():
            self.calls.append(f"do:{name}")
            raise error

        return _run

    def undo(self, name: str):
        def _run():
            self.calls.append(f"undo:{name}")

        return _run


class TestSagaSuccess:
    """Tests for sagas where every critical step succeeds."""

    def test_runs_steps_in_order(self) -> None:
        """Should run each action once, in declaration order."""
        rec = Recorder()
        saga = Saga(
            "ordered",
            [
                SagaStep("a", rec.action("a"), compensation=rec.undo("a")),
                SagaStep("b", rec.action("b"), compensation=rec.undo("b")),
                SagaStep("c", rec.action("c")),
            ],
        )

        saga.run()

        assert rec.calls == ["do:a", "do:b", "do:c"]

    def test_collects_step_results(self) -> None:
        """Should expose each step's return value by name."""
        rec = Recorder()
        saga = Saga("results", [SagaStep("a", rec.action("a", result=42))])

        result = saga.run()

        assert result.results == {"a": 42}
        assert result.status_of("a") == StepStatus.COMMITTED

    def test_best_effort_failure_does_not_abort(self) -> None:
        """A failing BEST_EFFORT step is logged and later steps still run."""
        rec = Recorder()
        saga = Saga(
            "best_effort",
            [
                SagaStep("a", rec.action("a"), compensation=rec.undo("a")),
                SagaStep(
                    "billing",
                    rec.failing("billing", RuntimeError("stripe down")),
                    criticality=Criticality.BEST_EFFORT,
                ),
                SagaStep("audit", rec.action("audit"), criticality=Criticality.BEST_EFFORT),
            ],
        )

        result = saga.run()

        assert rec.calls == ["do:a", "do:billing", "do:audit"]
        assert result.failed_steps == ["billing"]
        assert result.status_of("billing") == StepStatus.FAILED
        assert result.status_of("audit") == StepStatus.COMMITTED
        assert "stripe down" in result.log[1].error

    def test_status_of_unknown_step_is_none(self) -> None:
        """Should return None for a step that never ran."""
        result = Saga("empty", []).run()

        assert result.status_of("missing") is None


class TestSagaCompensation:
    """Tests for rollback when a critical step fails."""

    def test_compensates_committed_steps_newest_first(self) -> None:
        """Should undo committed steps in reverse order and skip the failed one."""
        rec = Recorder()
        saga = Saga(
            "rollback",
            [
                SagaStep("a", rec.action("a"), compensation=rec.undo("a")),
                SagaStep("b", rec.action("b"), compensation=rec.undo("b")),
                SagaStep("c", rec.failing("c", RuntimeError("boom")), compensation=rec.undo("c")),
                SagaStep("d", rec.action("d")),
            ],
        )

        with pytest.raises(SagaError) as exc_info:
            saga.run()

        assert rec.calls == ["do:a", "do:b", "do:c", "undo:b", "undo:a"]
        error = exc_info.value
        assert error.step == "c"
        assert isinstance(error.cause, RuntimeError)
        assert error.__cause__ is error.cause
        assert error.status_of("a") == StepStatus.COMPENSATED
        assert error.status_of("b") == StepStatus.COMPENSATED
        assert error.status_of("c") == StepStatus.FAILED
        assert error.status_of("d") is None

    def test_first_step_failure_compensates_nothing(self) -> None:
        """Nothing committed means nothing to undo."""
        rec = Recorder()
        saga = Saga(
            "first",
            [
                SagaStep("a", rec.failing("a", ValueError("bad")), compensation=rec.undo("a")),
                SagaStep("b", rec.action("b"), compensation=rec.undo("b")),
            ],
        )

        with pytest.raises(SagaError):
            saga.run()

        assert rec.calls == ["do:a"]

    def test_failing_compensation_does_not_stop_others(self) -> None:
        """A compensation error is recorded and the remaining compensations still run."""
        rec = Recorder()

        def broken_undo():
            rec.calls.append("undo:b")
            raise ConnectionError("identity provider unreachable")

        saga = Saga(
            "partial",
            [
                SagaStep("a", rec.action("a"), compensation=rec.undo("a")),
                SagaStep("b", rec.action("b"), compensation=broken_undo),
                SagaStep("c", rec.failing("c", RuntimeError("boom"))),
            ],
        )

        with pytest.raises(SagaError) as exc_info:
            saga.run()

        assert rec.calls == ["do:a", "do:b", "do:c", "undo:b", "undo:a"]
        assert exc_info.value.status_of("b") == StepStatus.COMPENSATION_FAILED
        assert exc_info.value.status_of("a") == StepStatus.COMPENSATED
        # The original failure is reported, not the compensation error
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_best_effort_failure_not_compensated_later(self) -> None:
        """A failed BEST_EFFORT step never committed, so it is not undone."""
        rec = Recorder()
        saga = Saga(
            "mixed",
            [
                SagaStep("a", rec.action("a"), compensation=rec.undo("a")),
                SagaStep(
                    "optional",
                    rec.failing("optional", RuntimeError("skip")),
                    compensation=rec.undo("optional"),
                    criticality=Criticality.BEST_EFFORT,
                ),
                SagaStep("b", rec.failing("b", RuntimeError("boom"))),
            ],
        )

        with pytest.raises(SagaError):
            saga.run()

        assert rec.calls == ["do:a", "do:optional", "do:b", "undo:a"]


class TestSagaDefinition:
    """Tests for saga construction."""

    def test_rejects_duplicate_step_names(self) -> None:
        """Step names key the log, so they must be unique."""
        with pytest.raises(ValueError, match="Duplicate step names"):
            Saga("dup", [SagaStep("a", lambda: None), SagaStep("a", lambda: None)])

    def test_steps_default_to_critical(self) -> None:
        """Should treat steps as CRITICAL unless tagged otherwise."""
        step = SagaStep("a", lambda: None)

        assert step.criticality == Criticality.CRITICAL
        assert step.compensation is None
