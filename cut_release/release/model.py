from __future__ import annotations

import shlex
from dataclasses import dataclass
from pathlib import Path

from cut_release.release.semver import SemVer


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Everything the operator supplied on the command line.

    ``None`` means "not supplied": the answer flow asks for it.
    """

    version: str | None = None
    yes: bool = False
    tag: str | None = None
    preid: str | None = None
    message: str | None = None
    dry_run: bool = False
    update_check: bool = True


@dataclass(frozen=True, slots=True)
class Manifest:
    """The fields of ``package.json`` a release needs."""

    path: Path
    name: str
    version: SemVer
    private: bool


@dataclass(frozen=True, slots=True)
class RepoState:
    root: Path
    is_version_controlled: bool


@dataclass(frozen=True, slots=True)
class ReleaseIntent:
    """Fully resolved description of the release to perform."""

    current_version: SemVer
    target_version: SemVer
    prerelease_id: str | None
    dist_tag: str
    dry_run: bool
    message: str | None = None


@dataclass(frozen=True, slots=True)
class CommandStep:
    description: str
    argv: tuple[str, ...]
    # Conditional steps (push, publish) may legitimately be absent from a plan.
    optional: bool = False

    @property
    def command_line(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True, slots=True)
class SkippedStep:
    description: str
    reason: str


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    steps: tuple[CommandStep, ...]
    skipped: tuple[SkippedStep, ...] = ()
