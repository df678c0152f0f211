"""Resolve the release intent from flags and interactive answers.

Four slots are filled in order, each by a straight-line function:
version, prerelease identifier, distribution tag, confirmation. A slot
supplied on the command line is never asked; an asked slot is asked once.
"""

from __future__ import annotations

from dataclasses import dataclass

from cut_release.core.config import Config
from cut_release.core.result import Err, Ok, Result
from cut_release.output.console import ConsoleProtocol, Style
from cut_release.platform.process import CommandRunner
from cut_release.release.errors import SEMVER_HINT, ReleaseError
from cut_release.release.model import Manifest, ReleaseIntent, ReleaseOptions
from cut_release.release.questions import (
    Choice,
    ConfirmQuestion,
    Prompter,
    SelectQuestion,
    TextQuestion,
)
from cut_release.release.registry import list_dist_tags, list_prerelease_ids
from cut_release.release.semver import (
    RELEASE_KEYWORDS,
    ReleaseKeyword,
    SemVer,
    invalid_version_error,
    is_keyword,
    is_prerelease_keyword,
    is_valid_preid,
    parse_version,
    resolve,
)

OTHER = "_other"


@dataclass(frozen=True, slots=True)
class AnswerContext:
    manifest: Manifest
    config: Config
    runner: CommandRunner
    prompter: Prompter
    console: ConsoleProtocol


def validate_semver_input(text: str) -> str | None:
    if parse_version(text) is None:
        return SEMVER_HINT
    return None


def validate_preid_input(text: str) -> str | None:
    s = text.strip()
    if s and not is_valid_preid(s):
        return "Use letters, digits and hyphens only, e.g. rc or beta"
    return None


def validate_dist_tag(text: str) -> str | None:
    s = text.strip()
    if not s:
        return "Tag must not be empty"
    if any(c.isspace() for c in s) or "/" in s or "%" in s:
        return "Tag must not contain whitespace, `/` or `%`"
    if parse_version(s) is not None:
        return "Tag must not be a version number (npm would read it as a version)"
    return None


def resolve_version_token(options: ReleaseOptions, ctx: AnswerContext) -> str:
    if options.version is not None:
        return options.version

    current = ctx.manifest.version
    choices: list[Choice[str]] = [
        Choice(value=k, label=k, detail=str(current.bump(k, options.preid)))
        for k in RELEASE_KEYWORDS
    ]
    choices.append(Choice(value=OTHER, label="other (specify)"))

    answer = ctx.prompter.select(
        SelectQuestion(message="What version would you like to release", choices=tuple(choices))
    )
    if answer != OTHER:
        return answer

    return ctx.prompter.text(
        TextQuestion(message="Specify version", validate=validate_semver_input)
    ).strip()


def _ask_preid_text(ctx: AnswerContext) -> str | None:
    answer = ctx.prompter.text(
        TextQuestion(
            message="Prerelease identifier (e.g. rc, beta; leave empty for none)",
            validate=validate_preid_input,
            default="",
        )
    )
    return answer.strip() or None


def resolve_prerelease_id(
    options: ReleaseOptions, token: str, ctx: AnswerContext
) -> str | None:
    """Identifier to apply when incrementing into a prerelease.

    Only asked for prerelease keywords. A failed registry lookup falls back
    to free text.
    """
    if options.preid is not None:
        return options.preid
    if is_prerelease_keyword(token):
        return _ask_prerelease_id(token, ctx)
    return None


def _ask_prerelease_id(keyword: ReleaseKeyword, ctx: AnswerContext) -> str | None:
    manifest = ctx.manifest
    existing = list_prerelease_ids(ctx.runner, npm=ctx.config.commands.npm, package=manifest.name)
    if isinstance(existing, Err):
        ctx.console.warning(existing.error.message)
        return _ask_preid_text(ctx)
    if not existing.value:
        return _ask_preid_text(ctx)

    ids = existing.value
    default_index = 0
    if manifest.version.prerelease_id in ids:
        default_index = ids.index(manifest.version.prerelease_id)

    choices = [
        Choice(value=i, label=i, detail=str(manifest.version.bump(keyword, i))) for i in ids
    ]
    choices.append(Choice(value=OTHER, label="other (specify)"))
    answer = ctx.prompter.select(
        SelectQuestion(
            message="Which prerelease identifier",
            choices=tuple(choices),
            default_index=default_index,
        )
    )
    if answer == OTHER:
        return _ask_preid_text(ctx)
    return answer


def resolve_dist_tag(options: ReleaseOptions, ctx: AnswerContext) -> Result[str, ReleaseError]:
    if options.tag is not None:
        return Ok(options.tag)

    default_tag = ctx.config.default_tag
    tags = list_dist_tags(ctx.runner, npm=ctx.config.commands.npm, package=ctx.manifest.name)
    if isinstance(tags, Err):
        return tags

    names = [default_tag] + sorted(t for t in tags.value if t != default_tag)
    choices: list[Choice[str]] = [
        Choice(value=t, label=t, detail=tags.value.get(t, "(new)")) for t in names
    ]
    choices.append(Choice(value=OTHER, label="new tag (specify)"))

    answer = ctx.prompter.select(
        SelectQuestion(message="Which distribution tag", choices=tuple(choices))
    )
    if answer != OTHER:
        return Ok(answer)

    typed = ctx.prompter.text(TextQuestion(message="Specify tag", validate=validate_dist_tag))
    return Ok(typed.strip())


def confirm_release(options: ReleaseOptions, intent: ReleaseIntent, ctx: AnswerContext) -> bool:
    if options.yes:
        return True

    suffix = " This is a dry run." if intent.dry_run else ""
    return ctx.prompter.confirm(
        ConfirmQuestion(
            message=(
                f"This will tag and release a new version from {intent.current_version} "
                f"to {intent.target_version} under the `{intent.dist_tag}` tag.{suffix} "
                "Are you sure?"
            ),
        )
    )


def gather_intent(
    options: ReleaseOptions, ctx: AnswerContext
) -> Result[ReleaseIntent | None, ReleaseError]:
    """Resolve every slot; Ok(None) means the operator declined."""
    current: SemVer = ctx.manifest.version

    supplied = options.version
    if supplied is not None and not is_keyword(supplied) and parse_version(supplied) is None:
        return Err(invalid_version_error(supplied))

    token = resolve_version_token(options, ctx)
    preid = resolve_prerelease_id(options, token, ctx)

    target = resolve(current, token, preid)
    if isinstance(target, Err):
        return target

    tag = resolve_dist_tag(options, ctx)
    if isinstance(tag, Err):
        return tag

    intent = ReleaseIntent(
        current_version=current,
        target_version=target.value,
        prerelease_id=target.value.prerelease_id,
        dist_tag=tag.value,
        dry_run=options.dry_run,
        message=options.message,
    )
    if intent.target_version <= current:
        ctx.console.print(
            f"note: {intent.target_version} is not greater than {current}", Style.DIM
        )

    if not confirm_release(options, intent, ctx):
        return Ok(None)
    return Ok(intent)
