"""
Saga runner - ordered steps with reverse-order compensation.

A saga is a list of steps, each an action with an optional compensation and
a criticality. Steps run in order. When a CRITICAL step fails, every step
that already committed is compensated newest-first and the failure is raised
as SagaError. A BEST_EFFORT step may fail without affecting the outcome.

Usage:

    saga = Saga(
        "provision_organization",
        [
            SagaStep("create_identity", create_identity, compensation=delete_identity),
            SagaStep("create_organization", create_org, compensation=delete_org),
            SagaStep("seed_settings", seed_settings, criticality=Criticality.BEST_EFFORT),
        ],
    )
    result = saga.run()

Actions and compensations take no arguments; they share state through the
closure that built them (usually the orchestrator instance).
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from apps.core.logging import get_logger

logger = get_logger(__name__)


class Criticality(StrEnum):
    CRITICAL = "critical"
    BEST_EFFORT = "best_effort"


class StepStatus(StrEnum):
    COMMITTED = "committed"
    FAILED = "failed"
    COMPENSATED = "compensated"
    COMPENSATION_FAILED = "compensation_failed"


@dataclass(frozen=True)
class SagaStep:
    """One unit of work in a saga."""

    name: str
    action: Callable[[], Any]
    compensation: Callable[[], None] | None = None
    criticality: Criticality = Criticality.CRITICAL


@dataclass
class StepRecord:
    """Outcome of a single step, kept in the saga log."""

    step: str
    status: StepStatus
    error: str = ""


def _last_status(log: list[StepRecord], step: str) -> StepStatus | None:
    for record in reversed(log):
        if record.step == step:
            return record.status
    return None


@dataclass
class SagaResult:
    """Step log and return values of a saga that completed."""

    saga: str
    log: list[StepRecord] = field(default_factory=list)
    results: dict[str, Any] = field(default_factory=dict)

    def status_of(self, step: str) -> StepStatus | None:
        """Return the last recorded status of ``step``, or None if it never ran."""
        return _last_status(self.log, step)

    @property
    def failed_steps(self) -> list[str]:
        return [r.step for r in self.log if r.status == StepStatus.FAILED]


class SagaError(Exception):
    """
    A CRITICAL step failed and the saga was rolled back.

    Attributes:
        saga: Name of the saga
        step: Name of the step that failed
        cause: The exception raised by that step
        log: Every step record, including compensations
    """

    def __init__(self, saga: str, step: str, cause: BaseException, log: list[StepRecord]) -> None:
        super().__init__(f"{saga}: step '{step}' failed: {cause}")
        self.saga = saga
        self.step = step
        self.cause = cause
        self.log = log

    def status_of(self, step: str) -> StepStatus | None:
        return _last_status(self.log, step)


class Saga:
    """Executes a fixed list of steps with compensation on critical failure."""

    def __init__(self, name: str, steps: list[SagaStep]) -> None:
        names = [s.name for s in steps]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate step names in saga '{name}'")
        self.name = name
        self.steps = steps

    def run(self) -> SagaResult:
        """
        Run every step in order.

        Returns:
            SagaResult with the log and each committed step's return value

        Raises:
            SagaError: A CRITICAL step failed; committed steps were compensated
        """
        result = SagaResult(saga=self.name)
        committed: list[SagaStep] = []

        for step in self.steps:
            try:
                value = step.action()
            except Exception as exc:
                result.log.append(StepRecord(step.name, StepStatus.FAILED, str(exc)))

                if step.criticality == Criticality.BEST_EFFORT:
                    logger.warning(
                        "saga_best_effort_step_failed",
                        saga=self.name,
                        step=step.name,
                        error=str(exc),
                        exc_info=True,
                    )
                    continue

                logger.warning(
                    "saga_step_failed",
                    saga=self.name,
                    step=step.name,
                    error=str(exc),
                    compensating=[s.name for s in reversed(committed) if s.compensation],
                )
                self._compensate(committed, result)
                raise SagaError(self.name, step.name, exc, result.log) from exc

            result.log.append(StepRecord(step.name, StepStatus.COMMITTED))
            result.results[step.name] = value
            committed.append(step)

        logger.debug(
            "saga_completed",
            saga=self.name,
            failed_best_effort=result.failed_steps,
        )
        return result

    def _compensate(self, committed: list[SagaStep], result: SagaResult) -> None:
        # Newest first. A failing compensation never stops the others.
        for step in reversed(committed):
            if step.compensation is None:
                continue
            try:
                step.compensation()
            except Exception as exc:
                result.log.append(StepRecord(step.name, StepStatus.COMPENSATION_FAILED, str(exc)))
                logger.error(
                    "saga_compensation_failed",
                    saga=self.name,
                    step=step.name,
                    error=str(exc),
                    exc_info=True,
                )
            else:
                result.log.append(StepRecord(step.name, StepStatus.COMPENSATED))
