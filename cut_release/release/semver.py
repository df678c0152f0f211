from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Literal, TypeGuard

from cut_release.core.result import Err, Ok, Result
from cut_release.release.errors import SEMVER_HINT, ReleaseError

ReleaseKeyword = Literal[
    "patch",
    "minor",
    "major",
    "prepatch",
    "preminor",
    "premajor",
    "prerelease",
]

RELEASE_KEYWORDS: tuple[ReleaseKeyword, ...] = (
    "patch",
    "minor",
    "major",
    "prepatch",
    "preminor",
    "premajor",
    "prerelease",
)
PRERELEASE_KEYWORDS: frozenset[str] = frozenset({"prepatch", "preminor", "premajor", "prerelease"})

_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)
_PREID_RE = re.compile(r"^[0-9A-Za-z-]+$")

PrereleasePart = int | str


@dataclass(frozen=True, slots=True)
class SemVer:
    """A semantic version (https://semver.org/ 2.0.0).

    Precedence ignores build metadata; a prerelease sorts before its release.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[PrereleasePart, ...] = ()
    build: tuple[str, ...] = ()

    @property
    def prerelease_id(self) -> str | None:
        """Leading non-numeric prerelease component, e.g. ``rc`` in ``1.0.0-rc.2``."""
        if self.prerelease and isinstance(self.prerelease[0], str):
            return self.prerelease[0]
        return None

    def __str__(self) -> str:
        out = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            out += "-" + ".".join(str(p) for p in self.prerelease)
        if self.build:
            out += "+" + ".".join(self.build)
        return out

    def _key(self) -> tuple[int, int, int, int, tuple[tuple[int, int, str], ...]]:
        # Numeric identifiers sort before alphanumeric ones.
        pre = tuple((0, p, "") if isinstance(p, int) else (1, 0, p) for p in self.prerelease)
        return (self.major, self.minor, self.patch, 0 if self.prerelease else 1, pre)

    def __lt__(self, other: SemVer) -> bool:
        return self._key() < other._key()

    def __le__(self, other: SemVer) -> bool:
        return self._key() <= other._key()

    def __gt__(self, other: SemVer) -> bool:
        return self._key() > other._key()

    def __ge__(self, other: SemVer) -> bool:
        return self._key() >= other._key()

    def bump(self, kind: ReleaseKeyword, preid: str | None = None) -> SemVer:
        """Apply npm's increment rules.

        ``preid`` only affects the prerelease classes.
        """
        base = replace(self, build=())
        match kind:
            case "major":
                if base.minor != 0 or base.patch != 0 or not base.prerelease:
                    return SemVer(base.major + 1, 0, 0)
                return SemVer(base.major, 0, 0)
            case "minor":
                if base.patch != 0 or not base.prerelease:
                    return SemVer(base.major, base.minor + 1, 0)
                return SemVer(base.major, base.minor, 0)
            case "patch":
                if not base.prerelease:
                    return SemVer(base.major, base.minor, base.patch + 1)
                return SemVer(base.major, base.minor, base.patch)
            case "premajor":
                return SemVer(base.major + 1, 0, 0)._next_pre(preid)
            case "preminor":
                return SemVer(base.major, base.minor + 1, 0)._next_pre(preid)
            case "prepatch":
                return SemVer(base.major, base.minor, base.patch + 1)._next_pre(preid)
            case "prerelease":
                if not base.prerelease:
                    base = SemVer(base.major, base.minor, base.patch + 1)
                return base._next_pre(preid)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")

    def _next_pre(self, preid: str | None) -> SemVer:
        parts: list[PrereleasePart] = list(self.prerelease)
        if not parts:
            parts = [0]
        else:
            for i in range(len(parts) - 1, -1, -1):
                part = parts[i]
                if isinstance(part, int):
                    parts[i] = part + 1
                    break
            else:
                parts.append(0)

        if preid:
            if parts[0] != preid or len(parts) < 2 or not isinstance(parts[1], int):
                parts = [preid, 0]

        return replace(self, prerelease=tuple(parts))


def is_keyword(token: str) -> TypeGuard[ReleaseKeyword]:
    return token in RELEASE_KEYWORDS


def is_prerelease_keyword(token: str) -> TypeGuard[ReleaseKeyword]:
    return token in PRERELEASE_KEYWORDS


def is_valid_preid(preid: str) -> bool:
    return _PREID_RE.match(preid) is not None


def parse_version(text: str) -> SemVer | None:
    """Parse a full semver literal; a leading ``v`` or ``=`` is tolerated."""
    s = text.strip()
    if s[:1] in ("v", "="):
        s = s[1:]
    m = _SEMVER_RE.match(s)
    if m is None:
        return None

    prerelease: tuple[PrereleasePart, ...] = ()
    if m.group(4):
        prerelease = tuple(int(p) if p.isdigit() else p for p in m.group(4).split("."))
    build: tuple[str, ...] = tuple(m.group(5).split(".")) if m.group(5) else ()
    return SemVer(int(m.group(1)), int(m.group(2)), int(m.group(3)), prerelease, build)


def invalid_version_error(token: str) -> ReleaseError:
    return ReleaseError(
        kind="invalid_version",
        message=f"invalid version: {token}",
        hint=SEMVER_HINT,
    )


def resolve(current: SemVer, token: str, preid: str | None) -> Result[SemVer, ReleaseError]:
    """Turn an increment keyword or a version literal into the target version.

    A literal is returned as-is even when it is lower than ``current``.
    """
    if preid is not None and not is_valid_preid(preid):
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid prerelease identifier: {preid}",
                hint="Use letters, digits and hyphens only, e.g. rc or beta",
            )
        )

    if is_keyword(token):
        return Ok(current.bump(token, preid))

    parsed = parse_version(token)
    if parsed is None:
        return Err(invalid_version_error(token))
    return Ok(parsed)
