from __future__ import annotations

from cut_release.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.FAILURE) == 1


def test_success_flags() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.OK.is_error
    assert ErrorCode.FAILURE.is_error


def test_str() -> None:
    assert str(ErrorCode.FAILURE) == "failure"
