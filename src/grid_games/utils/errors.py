"""Fatal programmer-error reporting for closed enumerations."""

from typing import Any, NoReturn


class UnreachableStateError(AssertionError):
    """Raised when a value outside a closed enumeration reaches a dispatch."""


def unreachable(value: Any) -> NoReturn:
    """Abort on a tag that every dispatch is expected to handle exhaustively."""
    raise UnreachableStateError(f"Unhandled value: {value!r}")
