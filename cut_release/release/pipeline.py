"""Sequential execution of a release plan.

A :class:`PipelineRun` is an immutable value; every attempted step produces
the next value (``advance`` or ``fail``). Steps run strictly in plan order,
never concurrently, never retried, and nothing runs after a failure.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from cut_release.core.result import Err, Ok, Result
from cut_release.output.console import COMMAND_ECHO_PREFIX, ConsoleProtocol, Style
from cut_release.platform.process import CommandRunner
from cut_release.release.model import CommandStep, ReleasePlan

PipelineStatus = Literal["idle", "running", "succeeded", "failed"]


@dataclass(frozen=True, slots=True)
class StepFailure:
    message: str
    stdout: str
    stderr: str


@dataclass(frozen=True, slots=True)
class PipelineRun:
    plan: tuple[CommandStep, ...]
    remaining: tuple[CommandStep, ...]
    completed: tuple[CommandStep, ...] = ()
    status: PipelineStatus = "idle"
    failed_step: CommandStep | None = None
    failure: StepFailure | None = None

    @classmethod
    def create(cls, plan: tuple[CommandStep, ...]) -> PipelineRun:
        return cls(plan=plan, remaining=plan)

    def begin(self) -> PipelineRun:
        if self.status != "idle":
            raise AssertionError(f"cannot begin a {self.status} pipeline")
        return replace(self, status="running" if self.remaining else "succeeded")

    @property
    def next_step(self) -> CommandStep | None:
        if self.status != "running":
            return None
        return self.remaining[0]

    def advance(self) -> PipelineRun:
        """The step at the front of ``remaining`` succeeded."""
        step = self._front()
        rest = self.remaining[1:]
        return replace(
            self,
            remaining=rest,
            completed=(*self.completed, step),
            status="running" if rest else "succeeded",
        )

    def fail(self, failure: StepFailure) -> PipelineRun:
        """The step at the front of ``remaining`` failed; nothing else will run."""
        step = self._front()
        return replace(
            self,
            remaining=self.remaining[1:],
            status="failed",
            failed_step=step,
            failure=failure,
        )

    def _front(self) -> CommandStep:
        if self.status != "running":
            raise AssertionError(f"no step is running in a {self.status} pipeline")
        return self.remaining[0]


@dataclass(frozen=True, slots=True)
class PipelineSuccess:
    completed: tuple[CommandStep, ...]
    dry_run: bool


@dataclass(frozen=True, slots=True)
class PipelineFailure:
    failed_step: CommandStep
    error: StepFailure
    # Steps after the failed one, in plan order.
    remaining: tuple[CommandStep, ...]


def _outcome(run: PipelineRun, *, dry_run: bool) -> Result[PipelineSuccess, PipelineFailure]:
    if run.status == "failed":
        assert run.failed_step is not None and run.failure is not None
        return Err(
            PipelineFailure(
                failed_step=run.failed_step,
                error=run.failure,
                remaining=run.remaining,
            )
        )
    return Ok(PipelineSuccess(completed=run.completed, dry_run=dry_run))


def execute_plan(
    plan: ReleasePlan,
    *,
    runner: CommandRunner,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[PipelineSuccess, PipelineFailure]:
    """Run every step of ``plan`` in order, stopping at the first failure.

    In dry-run mode ``runner`` is never called and every step is reported
    as if it had succeeded.
    """
    run = PipelineRun.create(plan.steps).begin()

    while (step := run.next_step) is not None:
        console.print(step.description, Style.BOLD)
        console.print(f"{COMMAND_ECHO_PREFIX}{step.command_line}", Style.DIM)

        if dry_run:
            console.print("(dry run, not executed)", Style.DIM)
            run = run.advance()
            continue

        result = runner.run(step.argv)
        if isinstance(result, Err):
            e = result.error
            run = run.fail(StepFailure(message=str(e), stdout=e.stdout, stderr=e.stderr))
            break

        output = result.value.stdout.strip()
        if output:
            console.print(output, Style.DIM)
        run = run.advance()

    return _outcome(run, dry_run=dry_run)
