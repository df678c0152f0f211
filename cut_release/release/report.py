from __future__ import annotations

from cut_release.output.console import ConsoleProtocol, Style
from cut_release.release.model import Manifest, ReleaseIntent, ReleasePlan
from cut_release.release.pipeline import PipelineFailure, PipelineSuccess


def print_intro(manifest: Manifest, console: ConsoleProtocol) -> None:
    console.info(
        f"Releasing a new version of `{manifest.name}` (current version: {manifest.version})"
    )


def print_success(
    *,
    manifest: Manifest,
    intent: ReleaseIntent,
    plan: ReleasePlan,
    success: PipelineSuccess,
    console: ConsoleProtocol,
) -> None:
    console.newline()
    for skipped in plan.skipped:
        console.print(f"skipped: {skipped.description} ({skipped.reason})", Style.DIM)

    done = f"{manifest.name}@{intent.target_version}"
    if success.dry_run:
        console.success(f"Dry run complete: {len(success.completed)} step(s) for {done}")
        return
    console.success(f"Done: released {done}")


def print_failure(failure: PipelineFailure, console: ConsoleProtocol) -> None:
    console.newline()
    console.error(f"{failure.failed_step.description} failed: {failure.error.message}")

    if failure.error.stdout.strip():
        console.header("stdout")
        console.print(failure.error.stdout.rstrip(), Style.DIM)
    if failure.error.stderr.strip():
        console.header("stderr")
        console.print(failure.error.stderr.rstrip(), Style.DIM)

    console.newline()
    console.print("To retry the failed step, run:", Style.BOLD)
    console.print(f"  {failure.failed_step.command_line}")

    if failure.remaining:
        console.print("Then run the remaining steps manually:", Style.BOLD)
        for step in failure.remaining:
            console.print(f"  {step.command_line}")
