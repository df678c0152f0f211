from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import NoReturn

import typer

from cut_release import __version__
from cut_release.cli.prompts import TerminalPrompter
from cut_release.core.config import Config, load_config_or_default
from cut_release.core.errors import ErrorCode
from cut_release.core.result import Err
from cut_release.output.console import ConsoleProtocol, RichConsole, Style
from cut_release.platform.http import HttpClient, RealHttpClient
from cut_release.platform.process import CommandRunner, ProcessRunner, run
from cut_release.release.answers import validate_dist_tag, validate_preid_input
from cut_release.release.errors import SEMVER_HINT, ReleaseError
from cut_release.release.model import ReleaseOptions
from cut_release.release.questions import Prompter
from cut_release.release.self_update import DIST_NAME, offer_update
from cut_release.release.semver import RELEASE_KEYWORDS, is_keyword, parse_version
from cut_release.release.service import ReleaseDeclined, run_release

NO_UPDATE_CHECK_ENV = "CUT_RELEASE_NO_UPDATE_CHECK"
# Set on the re-exec'd process so a no-op upgrade cannot loop.
UPDATED_ENV = "CUT_RELEASE_UPDATED"

UPGRADE_TIMEOUT_SECONDS = 120.0

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def make_console() -> ConsoleProtocol:
    return RichConsole()


def make_prompter(console: ConsoleProtocol) -> Prompter:
    return TerminalPrompter(console)


def make_runner(project_root: Path, config: Config) -> CommandRunner:
    return ProcessRunner(cwd=project_root, max_output=config.output.max_bytes)


def make_http_client(config: Config) -> HttpClient:
    return RealHttpClient(timeout=config.update.timeout, user_agent=f"{DIST_NAME}/{__version__}")


def _fail(console: ConsoleProtocol, error: ReleaseError) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(ErrorCode.FAILURE))


def validate_invocation(options: ReleaseOptions) -> ReleaseError | None:
    """Reject flag values that can never lead to a valid release."""
    token = options.version
    if token is not None and not is_keyword(token) and parse_version(token) is None:
        return ReleaseError(
            kind="invalid_invocation",
            message=f"invalid version or increment keyword: {token}",
            hint=f"Expected one of {', '.join(RELEASE_KEYWORDS)} or a semver. {SEMVER_HINT}",
        )
    if options.preid is not None:
        problem = validate_preid_input(options.preid) if options.preid.strip() else "empty"
        if problem is not None:
            return ReleaseError(
                kind="invalid_invocation",
                message=f"invalid --preid: {options.preid!r}",
                hint=problem,
            )
    if options.tag is not None:
        problem = validate_dist_tag(options.tag)
        if problem is not None:
            return ReleaseError(
                kind="invalid_invocation",
                message=f"invalid --tag: {options.tag!r}",
                hint=problem,
            )
    return None


def should_check_updates(
    options: ReleaseOptions, config: Config, environ: Mapping[str, str]
) -> bool:
    if options.yes or not options.update_check or not config.update.check:
        return False
    return not environ.get(NO_UPDATE_CHECK_ENV) and not environ.get(UPDATED_ENV)


def _handoff_to_updated_tool() -> ReleaseError:
    upgrade = run(
        ["uv", "tool", "upgrade", DIST_NAME],
        cwd=Path.cwd(),
        timeout=UPGRADE_TIMEOUT_SECONDS,
    )
    if isinstance(upgrade, Err):
        return ReleaseError(
            kind="self_update_failed",
            message=str(upgrade.error),
            hint=upgrade.error.stderr.strip() or None,
        )

    os.environ[UPDATED_ENV] = "1"
    try:
        os.execvp(sys.argv[0], sys.argv)
    except OSError as e:
        return ReleaseError(kind="self_update_failed", message=f"could not restart: {e}")
    raise AssertionError("unreachable")


@app.command(help="Cut a new release of the npm package in the current directory.")
def release(
    ctx: typer.Context,
    version: str | None = typer.Argument(
        None,
        metavar="[VERSION]",
        help=f"A semver (e.g. 1.2.3) or one of: {', '.join(RELEASE_KEYWORDS)}.",
        show_default=False,
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    tag: str | None = typer.Option(
        None,
        "--tag",
        help="Distribution tag to publish under. A bare --tag asks for one.",
        show_default=False,
    ),
    preid: str | None = typer.Option(
        None,
        "--preid",
        help="Prerelease identifier for pre* increments (e.g. rc, beta).",
        show_default=False,
    ),
    message: str | None = typer.Option(
        None,
        "--message",
        "-m",
        help="Commit message for the version bump (%s is replaced by the version).",
        show_default=False,
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the steps without running them."),
    no_update_check: bool = typer.Option(
        False, "--no-update-check", help="Do not look for a newer cut-release."
    ),
    show_version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if show_version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    console = make_console()
    options = ReleaseOptions(
        version=version,
        yes=yes,
        # A bare `--tag` arrives as "" and leaves the tag to be asked.
        tag=(tag.strip() or None) if tag is not None else None,
        preid=preid,
        message=message,
        dry_run=dry_run,
        update_check=not no_update_check,
    )

    invalid = validate_invocation(options)
    if invalid is not None:
        typer.echo(ctx.get_usage(), err=True)
        _fail(console, invalid)

    project_root = Path.cwd()
    config_r = load_config_or_default(project_root)
    if isinstance(config_r, Err):
        _fail(console, ReleaseError(kind="invalid_invocation", message=config_r.error.message))
    config = config_r.value

    prompter = make_prompter(console)
    running = parse_version(__version__)
    if running is not None and should_check_updates(options, config, os.environ):
        offer_update(
            http=make_http_client(config),
            running=running,
            prompter=prompter,
            console=console,
            handoff=_handoff_to_updated_tool,
        )

    outcome = run_release(
        project_root=project_root,
        options=options,
        config=config,
        prompter=prompter,
        runner=make_runner(project_root, config),
        console=console,
    )
    if isinstance(outcome, Err):
        _fail(console, outcome.error)
    if isinstance(outcome.value, ReleaseDeclined):
        raise typer.Exit(code=int(ErrorCode.OK))


def normalize_argv(argv: list[str]) -> list[str]:
    """Turn a bare ``--tag`` into ``--tag=`` so click accepts it."""
    out: list[str] = []
    for i, arg in enumerate(argv):
        if arg == "--":
            out.extend(argv[i:])
            break
        nxt = argv[i + 1] if i + 1 < len(argv) else None
        if arg == "--tag" and (nxt is None or nxt.startswith("-")):
            out.append("--tag=")
            continue
        out.append(arg)
    return out


def main(argv: list[str] | None = None) -> None:
    args = normalize_argv(sys.argv[1:] if argv is None else argv)
    try:
        app(args=args, prog_name="cut-release")
    except SystemExit as e:
        # click reports usage errors with exit status 2.
        if e.code == 2:
            raise SystemExit(int(ErrorCode.FAILURE)) from None
        raise
