"""Process exit codes.

cut-release only distinguishes success from failure: declining the final
confirmation is a success, everything fatal (bad invocation, missing
manifest, failed pipeline step) exits with 1.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the ``cut-release`` command.

    These values are part of the CLI contract and must stay stable.
    """

    OK = 0
    FAILURE = 1

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
