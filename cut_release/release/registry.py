"""Read-only registry queries used to populate interactive choices."""

from __future__ import annotations

import json

from cut_release.core.result import Err, Ok, Result
from cut_release.core.structured import as_obj_list, as_str_dict, str_items
from cut_release.platform.process import CommandRunner, ProcessError
from cut_release.release.errors import ReleaseError
from cut_release.release.semver import parse_version

REGISTRY_TIMEOUT_SECONDS = 60.0


def _not_published(error: ProcessError) -> bool:
    return "E404" in error.stdout or "E404" in error.stderr


def _query_failed(what: str, error: ProcessError) -> ReleaseError:
    return ReleaseError(
        kind="external_query_failed",
        message=f"failed to query {what}: {error}",
        hint=error.stderr.strip() or None,
    )


def _view_json(
    runner: CommandRunner, *, npm: str, package: str, field: str
) -> Result[object | None, ReleaseError]:
    """Run ``npm view <package> <field> --json``; None when never published."""
    result = runner.run([npm, "view", package, field, "--json"], timeout=REGISTRY_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        if _not_published(result.error):
            return Ok(None)
        return Err(_query_failed(f"{field} of {package}", result.error))

    out = result.value.stdout.strip()
    if not out:
        return Ok(None)
    try:
        return Ok(json.loads(out))
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="external_query_failed",
                message=f"invalid JSON from npm view {field}: {e}",
            )
        )


def list_prerelease_ids(
    runner: CommandRunner, *, npm: str, package: str
) -> Result[tuple[str, ...], ReleaseError]:
    """Prerelease identifiers seen in published versions, most recent first."""
    payload = _view_json(runner, npm=npm, package=package, field="versions")
    if isinstance(payload, Err):
        return payload

    raw = payload.value
    if raw is None:
        return Ok(())
    # npm prints a bare string when only one version exists.
    versions = [raw] if isinstance(raw, str) else str_items(as_obj_list(raw) or [])

    parsed = [v for v in (parse_version(s) for s in versions) if v is not None]
    ids: list[str] = []
    for version in sorted(parsed, reverse=True):
        preid = version.prerelease_id
        if preid is not None and preid not in ids:
            ids.append(preid)
    return Ok(tuple(ids))


def list_dist_tags(
    runner: CommandRunner, *, npm: str, package: str
) -> Result[dict[str, str], ReleaseError]:
    """Published distribution tags mapped to the version they point at."""
    payload = _view_json(runner, npm=npm, package=package, field="dist-tags")
    if isinstance(payload, Err):
        return payload
    if payload.value is None:
        return Ok({})

    data = as_str_dict(payload.value)
    if data is None:
        return Err(
            ReleaseError(
                kind="external_query_failed",
                message="unexpected npm view dist-tags payload",
            )
        )
    return Ok({tag: version for tag, version in data.items() if isinstance(version, str)})
