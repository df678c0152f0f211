from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "invalid_invocation",
    "manifest_missing",
    "manifest_unreadable",
    "invalid_version",
    "external_query_failed",
    "command_failed",
    "self_update_failed",
]

SEMVER_HINT = "Please specify a valid semver, e.g. 1.2.3. See https://semver.org/"


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Error payload shared by resolution, planning and execution."""

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
