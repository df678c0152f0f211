from __future__ import annotations

from cut_release.core.config import Config
from cut_release.release.model import (
    CommandStep,
    ReleaseIntent,
    ReleasePlan,
    RepoState,
    SkippedStep,
)


def plan_release(
    intent: ReleaseIntent,
    repo: RepoState,
    *,
    private: bool,
    config: Config,
) -> ReleasePlan:
    """Build the ordered command plan for ``intent``.

    Order is fixed: bump (commit + tag), push branch, push tags, publish.
    The plan does not depend on ``intent.dry_run``; only execution does.
    """
    npm = config.commands.npm
    git = config.commands.git
    remote = config.remote
    target = str(intent.target_version)

    bump = [npm, "version", target]
    if intent.message:
        bump.extend(["-m", intent.message])

    steps: list[CommandStep] = [
        CommandStep(description=f"Bump version to {target}", argv=tuple(bump)),
    ]
    skipped: list[SkippedStep] = []

    push_descriptions = (
        f"Push commits to {remote}",
        f"Push tags to {remote}",
    )
    if repo.is_version_controlled:
        steps.append(
            CommandStep(
                description=push_descriptions[0],
                argv=(git, "push", remote),
                optional=True,
            )
        )
        steps.append(
            CommandStep(
                description=push_descriptions[1],
                argv=(git, "push", remote, "--tags"),
                optional=True,
            )
        )
    else:
        skipped.extend(
            SkippedStep(description=d, reason="not a git repository") for d in push_descriptions
        )

    publish_description = f"Publish {target} to the registry under `{intent.dist_tag}`"
    if private:
        skipped.append(
            SkippedStep(description=publish_description, reason="package is marked private")
        )
    else:
        steps.append(
            CommandStep(
                description=publish_description,
                argv=(npm, "publish", "--tag", intent.dist_tag),
                optional=True,
            )
        )

    return ReleasePlan(steps=tuple(steps), skipped=tuple(skipped))
