from __future__ import annotations

from pathlib import Path

import pytest

from cut_release.core.config import CommandsConfig, Config
from cut_release.release.model import ReleaseIntent, RepoState
from cut_release.release.planner import plan_release
from cut_release.release.semver import SemVer


def _intent(
    *, dist_tag: str = "latest", message: str | None = None, dry_run: bool = False
) -> ReleaseIntent:
    return ReleaseIntent(
        current_version=SemVer(1, 2, 3),
        target_version=SemVer(1, 3, 0),
        prerelease_id=None,
        dist_tag=dist_tag,
        dry_run=dry_run,
        message=message,
    )


def _repo(vcs: bool) -> RepoState:
    return RepoState(root=Path("/pkg"), is_version_controlled=vcs)


def test_full_plan_order_and_commands() -> None:
    plan = plan_release(_intent(), _repo(True), private=False, config=Config())

    assert [s.argv for s in plan.steps] == [
        ("npm", "version", "1.3.0"),
        ("git", "push", "origin"),
        ("git", "push", "origin", "--tags"),
        ("npm", "publish", "--tag", "latest"),
    ]
    assert plan.skipped == ()
    assert plan.steps[0].optional is False
    assert all(s.optional for s in plan.steps[1:])


@pytest.mark.parametrize("vcs", [True, False])
@pytest.mark.parametrize("private", [True, False])
def test_conditional_steps(vcs: bool, private: bool) -> None:
    plan = plan_release(_intent(), _repo(vcs), private=private, config=Config())

    assert plan.steps[0].argv[:2] == ("npm", "version")
    has_push = any(s.argv[:2] == ("git", "push") for s in plan.steps)
    has_publish = any(s.argv[:2] == ("npm", "publish") for s in plan.steps)
    assert has_push is vcs
    assert has_publish is not private
    assert len(plan.steps) == 1 + (2 if vcs else 0) + (0 if private else 1)
    assert len(plan.steps) + len(plan.skipped) == 4


def test_skipped_reasons() -> None:
    plan = plan_release(_intent(), _repo(False), private=True, config=Config())

    assert [s.reason for s in plan.skipped] == [
        "not a git repository",
        "not a git repository",
        "package is marked private",
    ]
    assert [s.argv for s in plan.steps] == [("npm", "version", "1.3.0")]


def test_commit_message_is_passed_to_bump() -> None:
    plan = plan_release(
        _intent(message="Release v%s"), _repo(False), private=True, config=Config()
    )

    assert plan.steps[0].argv == ("npm", "version", "1.3.0", "-m", "Release v%s")


def test_prerelease_tag_is_published() -> None:
    plan = plan_release(_intent(dist_tag="next"), _repo(False), private=False, config=Config())

    assert plan.steps[-1].argv == ("npm", "publish", "--tag", "next")
    assert "`next`" in plan.steps[-1].description


def test_config_overrides_commands_and_remote() -> None:
    config = Config(remote="upstream", commands=CommandsConfig(npm="pnpm", git="/usr/bin/git"))

    plan = plan_release(_intent(), _repo(True), private=False, config=config)

    assert plan.steps[0].argv[0] == "pnpm"
    assert plan.steps[1].argv == ("/usr/bin/git", "push", "upstream")
    assert plan.steps[1].description == "Push commits to upstream"
    assert plan.steps[3].argv[0] == "pnpm"


def test_dry_run_does_not_change_the_plan() -> None:
    wet = plan_release(_intent(), _repo(True), private=False, config=Config())
    dry = plan_release(_intent(dry_run=True), _repo(True), private=False, config=Config())

    assert wet == dry
