"""Check whether a newer cut-release is published and offer to switch to it.

The probe never fails the release: any lookup problem means "no update".
"""

from __future__ import annotations

from collections.abc import Callable

from cut_release.core.result import Err, Ok, Result
from cut_release.core.structured import get_str, get_table
from cut_release.output.console import ConsoleProtocol
from cut_release.platform.http import HttpClient
from cut_release.release.errors import ReleaseError
from cut_release.release.questions import ConfirmQuestion, Prompter
from cut_release.release.semver import SemVer, parse_version

DIST_NAME = "cut-release"
PYPI_JSON_URL = "https://pypi.org/pypi/{dist}/json"

# Replaces the running process with the updated tool; returns only on failure.
Handoff = Callable[[], ReleaseError]


def latest_published_version(
    http: HttpClient, *, dist: str = DIST_NAME
) -> Result[SemVer, ReleaseError]:
    url = PYPI_JSON_URL.format(dist=dist)
    result = http.get_json(url)
    if isinstance(result, Err):
        return Err(ReleaseError(kind="self_update_failed", message=str(result.error)))

    info = get_table(result.value, "info") or {}
    raw = get_str(info, "version")
    version = parse_version(raw) if raw is not None else None
    if version is None:
        return Err(
            ReleaseError(
                kind="self_update_failed",
                message=f"unexpected version in {url}: {raw}",
            )
        )
    return Ok(version)


def available_update(http: HttpClient, running: SemVer) -> SemVer | None:
    latest = latest_published_version(http)
    if isinstance(latest, Err):
        return None
    if latest.value > running:
        return latest.value
    return None


def offer_update(
    *,
    http: HttpClient,
    running: SemVer,
    prompter: Prompter,
    console: ConsoleProtocol,
    handoff: Handoff,
) -> None:
    """Ask to update when a newer version exists; hand off if accepted.

    Returns normally when there is nothing to do, the operator declines, or
    the hand-off failed (reported as a warning).
    """
    newer = available_update(http, running)
    if newer is None:
        return

    accepted = prompter.confirm(
        ConfirmQuestion(
            message=f"A new version of {DIST_NAME} is available ({running} -> {newer}). "
            "Update now?",
            default=True,
        )
    )
    if not accepted:
        return

    error = handoff()
    console.warning(f"update failed, continuing with {running}: {error.message}")
