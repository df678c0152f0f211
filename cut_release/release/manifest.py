from __future__ import annotations

import json
from pathlib import Path

from cut_release.core.result import Err, Ok, Result
from cut_release.core.structured import as_str_dict, get_bool, get_str
from cut_release.release.errors import ReleaseError
from cut_release.release.model import Manifest, RepoState
from cut_release.release.semver import parse_version

MANIFEST_FILENAME = "package.json"
VCS_DIRNAME = ".git"


def _unreadable(path: Path, detail: str) -> Err[ReleaseError]:
    return Err(
        ReleaseError(
            kind="manifest_unreadable",
            message=f"Error reading {MANIFEST_FILENAME} from {path.parent}: {detail}",
        )
    )


def read_manifest(project_root: Path) -> Result[Manifest, ReleaseError]:
    path = project_root / MANIFEST_FILENAME
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(
            ReleaseError(
                kind="manifest_missing",
                message=f"No {MANIFEST_FILENAME} exists in {project_root}",
                hint="Run cut-release from the root of an npm package.",
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        return _unreadable(path, str(e))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return _unreadable(path, f"invalid JSON: {e}")

    data = as_str_dict(obj)
    if data is None:
        return _unreadable(path, "expected a JSON object")

    name = get_str(data, "name")
    if name is None:
        return _unreadable(path, "missing `name`")

    raw_version = get_str(data, "version")
    if raw_version is None:
        return _unreadable(path, "missing `version`")
    version = parse_version(raw_version)
    if version is None:
        return _unreadable(path, f"`version` is not a valid semver: {raw_version}")

    return Ok(
        Manifest(
            path=path,
            name=name,
            version=version,
            private=get_bool(data, "private") is True,
        )
    )


def inspect_repo(project_root: Path) -> RepoState:
    # `.git` is a file (not a directory) in worktrees and submodules.
    return RepoState(
        root=project_root,
        is_version_controlled=(project_root / VCS_DIRNAME).exists(),
    )
