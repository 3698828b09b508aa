"""
Linear step runner for the validation pipeline.

Steps run in the order they were added; each one receives the accumulated
context and returns a dict merged back into it. The first failure is
terminal: later steps are skipped and the exception is kept on the failed
step for the caller to report.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class PipelineStep:
    """A single stage of a Pipeline."""

    name: str
    execute_fn: Callable[[dict[str, Any]], dict[str, Any] | None]
    status: StepStatus = StepStatus.PENDING
    result: dict[str, Any] = field(default_factory=dict)
    error: Exception | None = None
    duration_ms: float = 0.0


class Pipeline:
    """
    An ordered list of PipelineSteps sharing one context dict.

    Usage:
        pipeline = Pipeline("request_validation")
        pipeline.add_step("read_spec", read_spec)
        pipeline.add_step("validate", validate)
        summary = pipeline.run({"spec_path": "openapi.yaml"})
    """

    def __init__(self, name: str):
        self.name = name
        self.steps: dict[str, PipelineStep] = {}
        self.context: dict[str, Any] = {}

    def add_step(
        self,
        name: str,
        execute_fn: Callable[[dict[str, Any]], dict[str, Any] | None],
    ) -> Pipeline:
        if name in self.steps:
            raise ValueError(f"Duplicate step name: {name}")
        self.steps[name] = PipelineStep(name=name, execute_fn=execute_fn)
        return self

    @property
    def failure(self) -> PipelineStep | None:
        """The step that failed, if any."""
        return next(
            (step for step in self.steps.values() if step.status == StepStatus.FAILED),
            None,
        )

    def run(self, initial_context: dict[str, Any] | None = None) -> dict[str, Any]:
        """Execute every step in order, stopping at the first failure."""
        self.context = dict(initial_context or {})
        summary: dict[str, Any] = {"pipeline": self.name, "steps": {}}
        failed = False

        logger.debug("Starting pipeline '%s' with %d steps", self.name, len(self.steps))

        for step in self.steps.values():
            if failed:
                step.status = StepStatus.SKIPPED
                summary["steps"][step.name] = {"status": step.status.value}
                continue

            step.status = StepStatus.RUNNING
            logger.debug("Running step '%s'", step.name)
            start = time.perf_counter()
            try:
                step.result = step.execute_fn(self.context) or {}
                self.context.update(step.result)
                step.status = StepStatus.SUCCESS
            except Exception as exc:
                step.status = StepStatus.FAILED
                step.error = exc
                failed = True
                logger.info("Step '%s' failed: %s", step.name, exc)
            finally:
                step.duration_ms = (time.perf_counter() - start) * 1000

            summary["steps"][step.name] = {
                "status": step.status.value,
                "duration_ms": round(step.duration_ms, 2),
                "error": str(step.error) if step.error else None,
            }

        summary["status"] = "failed" if failed else "completed"
        logger.debug("Pipeline '%s' finished - %s", self.name, summary["status"])
        return summary
