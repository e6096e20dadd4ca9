"""Turn FoundryError into a one-line CLI error and exit status 1."""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from foundryctl.cli.output import user_error
from foundryctl.core.errors import FoundryError

F = TypeVar("F", bound=Callable[..., Any])


def foundry_error_boundary(func: F) -> F:
    """Report FoundryError raised by a command and exit non-zero.

    Other exceptions propagate unchanged.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except FoundryError as e:
            user_error(str(e))
            raise SystemExit(1) from e

    return wrapper  # type: ignore[return-value]
