"""Result union returned by the checked graph API.

A fallible call returns either Ok(value) or Err(error). Err wraps the same
GraphError the raising API would have thrown, so no information is lost
when switching between the two styles.

Example:
    >>> result = checked.successors(42)
    >>> if result.is_ok():
    ...     print(result.value)
    ... else:
    ...     print(result.kind)
"""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from dag.graph.errors import ErrorKind, GraphError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome holding the operation's return value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Return the wrapped value."""
        return self.value

    def unwrap_err(self) -> NoReturn:
        msg = f"Called unwrap_err() on Ok({self.value!r})"
        raise ValueError(msg)


@dataclass(frozen=True)
class Err:
    """Failed outcome holding the GraphError that occurred."""

    error: GraphError

    @property
    def kind(self) -> ErrorKind:
        """Tag of the wrapped error."""
        return self.error.kind

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Re-raise the wrapped error."""
        raise self.error

    def unwrap_err(self) -> GraphError:
        return self.error


Result = Ok[T] | Err
