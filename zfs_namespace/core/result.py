from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar, cast

from .exceptions.zfs_exceptions import ZFSException

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E', bound=ZFSException)

# Lets Result.success(None) carry a real None
_NO_VALUE: Any = object()


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Outcome of a service operation.

    Service methods report domain errors by returning a failed Result instead
    of raising. Handles and the registry call ``unwrap()`` to turn the failure
    back into the carried exception.
    """
    _value: Any = _NO_VALUE
    _error: Optional[E] = None

    def __post_init__(self):
        if (self._value is _NO_VALUE) == (self._error is None):
            raise ValueError("Result needs either a value or an error")

    @classmethod
    def success(cls, value: T) -> 'Result[T, E]':
        return cls(_value=value)

    @classmethod
    def failure(cls, error: E) -> 'Result[T, E]':
        return cls(_error=error)

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self.is_failure:
            raise ValueError(f"Failed result has no value: {self._error}")
        return cast(T, self._value)

    @property
    def error(self) -> E:
        if self.is_success:
            raise ValueError("Successful result has no error")
        return cast(E, self._error)

    def unwrap(self) -> T:
        """Value of a successful result; re-raises the error of a failed one."""
        if self._error is not None:
            raise self._error
        return cast(T, self._value)

    def value_or(self, default: T) -> T:
        return cast(T, self._value) if self.is_success else default

    def map(self, func: Callable[[T], U]) -> 'Result[U, E]':
        if self._error is not None:
            return Result.failure(self._error)
        return Result.success(func(cast(T, self._value)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.is_success,
            'value': self._value if self.is_success else None,
            'error': self._error.to_dict() if self._error is not None else None,
        }

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error!r})"
