from __future__ import annotations

import pytest

from cut_release.core.result import Err, Ok
from cut_release.release.semver import (
    RELEASE_KEYWORDS,
    SemVer,
    is_keyword,
    is_prerelease_keyword,
    parse_version,
    resolve,
)

BASES = [
    "0.0.0",
    "0.1.0",
    "1.2.3",
    "1.0.0-rc.1",
    "1.2.4-0",
    "2.0.0-alpha",
    "2.0.0-beta.2.x",
    "3.4.5+build.7",
]


class TestParseVersion:
    def test_plain(self) -> None:
        assert parse_version("1.2.3") == SemVer(1, 2, 3)

    def test_prerelease_and_build(self) -> None:
        v = parse_version("1.2.3-rc.10+sha.abc")
        assert v == SemVer(1, 2, 3, ("rc", 10), ("sha", "abc"))

    def test_leading_v_is_tolerated(self) -> None:
        assert parse_version("v1.2.3") == SemVer(1, 2, 3)

    @pytest.mark.parametrize(
        "text",
        ["badversion", "1.2", "1.2.3.4", "01.2.3", "1.2.3-01", "1.2.3-", "", "1.2.x", "١.2.3"],
    )
    def test_rejects_malformed(self, text: str) -> None:
        assert parse_version(text) is None

    def test_str_roundtrip(self) -> None:
        for text in ["1.2.3", "1.2.3-rc.0", "0.0.1-alpha.beta+exp.sha.5114f85"]:
            assert str(parse_version(text)) == text


class TestPrecedence:
    def test_semver_spec_ordering(self) -> None:
        ordered = [
            "1.0.0-alpha",
            "1.0.0-alpha.1",
            "1.0.0-alpha.beta",
            "1.0.0-beta",
            "1.0.0-beta.2",
            "1.0.0-beta.11",
            "1.0.0-rc.1",
            "1.0.0",
            "1.0.1",
            "1.1.0",
            "2.0.0",
        ]
        versions = [parse_version(s) for s in ordered]
        assert all(v is not None for v in versions)
        for lower, higher in zip(versions, versions[1:]):
            assert lower is not None and higher is not None
            assert lower < higher
            assert higher > lower

    def test_build_metadata_is_ignored(self) -> None:
        a = SemVer(1, 0, 0, build=("a",))
        b = SemVer(1, 0, 0, build=("b",))
        assert a <= b and b <= a

    def test_prerelease_id(self) -> None:
        assert SemVer(1, 0, 0, ("rc", 1)).prerelease_id == "rc"
        assert SemVer(1, 0, 0, (0,)).prerelease_id is None
        assert SemVer(1, 0, 0).prerelease_id is None


class TestBump:
    @pytest.mark.parametrize(
        ("base", "kind", "preid", "expected"),
        [
            ("1.2.3", "patch", None, "1.2.4"),
            ("1.2.3", "minor", None, "1.3.0"),
            ("1.2.3", "major", None, "2.0.0"),
            ("1.2.3", "prepatch", None, "1.2.4-0"),
            ("1.2.3", "preminor", "rc", "1.3.0-rc.0"),
            ("1.2.3", "premajor", "beta", "2.0.0-beta.0"),
            ("1.2.3", "prerelease", None, "1.2.4-0"),
            ("1.2.3", "prerelease", "rc", "1.2.4-rc.0"),
            ("1.2.4-rc.0", "prerelease", None, "1.2.4-rc.1"),
            ("1.2.4-rc.0", "prerelease", "rc", "1.2.4-rc.1"),
            ("1.2.4-rc.3", "prerelease", "beta", "1.2.4-beta.0"),
            ("2.0.0-alpha", "prerelease", None, "2.0.0-alpha.0"),
            ("1.2.4-rc.0", "patch", None, "1.2.4"),
            ("1.3.0-rc.0", "minor", None, "1.3.0"),
            ("1.3.1-rc.0", "minor", None, "1.4.0"),
            ("2.0.0-rc.0", "major", None, "2.0.0"),
            ("3.4.5+build.7", "patch", None, "3.4.6"),
        ],
    )
    def test_npm_rules(self, base: str, kind: str, preid: str | None, expected: str) -> None:
        current = parse_version(base)
        assert current is not None
        assert is_keyword(kind)
        assert str(current.bump(kind, preid)) == expected

    def test_preid_ignored_for_release_classes(self) -> None:
        assert str(SemVer(1, 2, 3).bump("minor", "rc")) == "1.3.0"


class TestResolve:
    def test_keyword(self) -> None:
        result = resolve(SemVer(1, 2, 3), "preminor", "rc")
        assert result == Ok(SemVer(1, 3, 0, ("rc", 0)))

    @pytest.mark.parametrize("base", BASES)
    @pytest.mark.parametrize("keyword", RELEASE_KEYWORDS)
    def test_every_keyword_increases_the_version(self, base: str, keyword: str) -> None:
        current = parse_version(base)
        assert current is not None
        result = resolve(current, keyword, None)
        assert isinstance(result, Ok)
        assert result.value > current

    @pytest.mark.parametrize("literal", ["1.9.0", "3.0.0-rc.1", "0.0.1", "10.20.30+meta"])
    @pytest.mark.parametrize("base", ["0.0.0", "2.0.0", "99.0.0"])
    def test_literal_is_returned_unchanged(self, literal: str, base: str) -> None:
        current = parse_version(base)
        assert current is not None
        result = resolve(current, literal, None)
        assert isinstance(result, Ok)
        assert str(result.value) == literal

    def test_lower_literal_is_accepted(self) -> None:
        result = resolve(SemVer(2, 0, 0), "1.9.0", None)
        assert result == Ok(SemVer(1, 9, 0))

    @pytest.mark.parametrize("token", ["badversion", "1.2", "mini", "1.2.3.4", "v1"])
    def test_malformed_literal_fails(self, token: str) -> None:
        result = resolve(SemVer(1, 2, 3), token, None)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"
        assert result.error.hint is not None
        assert "semver.org" in result.error.hint

    def test_invalid_preid_fails(self) -> None:
        result = resolve(SemVer(1, 2, 3), "prepatch", "r c")
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_version"

    def test_is_deterministic(self) -> None:
        first = resolve(SemVer(1, 2, 3), "prerelease", "beta")
        second = resolve(SemVer(1, 2, 3), "prerelease", "beta")
        assert first == second


def test_keyword_classes() -> None:
    assert is_keyword("patch")
    assert not is_keyword("1.2.3")
    assert is_prerelease_keyword("prerelease")
    assert not is_prerelease_keyword("minor")
