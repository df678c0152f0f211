from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cut_release.core.config import Config
from cut_release.core.result import Err, Ok, Result
from cut_release.output.console import ConsoleProtocol, Style
from cut_release.platform.process import CommandRunner
from cut_release.release.answers import AnswerContext, gather_intent
from cut_release.release.errors import ReleaseError
from cut_release.release.manifest import inspect_repo, read_manifest
from cut_release.release.model import ReleaseIntent, ReleaseOptions, ReleasePlan
from cut_release.release.pipeline import PipelineSuccess, execute_plan
from cut_release.release.planner import plan_release
from cut_release.release.questions import Prompter
from cut_release.release.report import print_failure, print_intro, print_success


@dataclass(frozen=True, slots=True)
class ReleaseDeclined:
    pass


@dataclass(frozen=True, slots=True)
class ReleaseCompleted:
    intent: ReleaseIntent
    plan: ReleasePlan
    success: PipelineSuccess


ReleaseOutcome = ReleaseDeclined | ReleaseCompleted


def run_release(
    *,
    project_root: Path,
    options: ReleaseOptions,
    config: Config,
    prompter: Prompter,
    runner: CommandRunner,
    console: ConsoleProtocol,
) -> Result[ReleaseOutcome, ReleaseError]:
    manifest = read_manifest(project_root)
    if isinstance(manifest, Err):
        return manifest
    repo = inspect_repo(project_root)

    print_intro(manifest.value, console)

    ctx = AnswerContext(
        manifest=manifest.value,
        config=config,
        runner=runner,
        prompter=prompter,
        console=console,
    )
    intent_r = gather_intent(options, ctx)
    if isinstance(intent_r, Err):
        return intent_r
    intent = intent_r.value
    if intent is None:
        console.print("Release cancelled.", Style.DIM)
        return Ok(ReleaseDeclined())

    plan = plan_release(intent, repo, private=manifest.value.private, config=config)
    outcome = execute_plan(plan, runner=runner, console=console, dry_run=intent.dry_run)
    if isinstance(outcome, Err):
        print_failure(outcome.error, console)
        return Err(
            ReleaseError(
                kind="command_failed",
                message=f"release stopped: {outcome.error.failed_step.description} failed",
            )
        )

    print_success(
        manifest=manifest.value,
        intent=intent,
        plan=plan,
        success=outcome.value,
        console=console,
    )
    return Ok(ReleaseCompleted(intent=intent, plan=plan, success=outcome.value))
