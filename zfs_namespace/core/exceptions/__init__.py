from .zfs_exceptions import (
    ZFSException,
    DatasetException,
    NotFoundError,
    AlreadyExistsError,
    UnknownTypeError,
    ExecutionFailureError,
)
from .validation_exceptions import (
    ValidationException,
    InvalidNameError,
    InvalidArgumentError,
)

__all__ = [
    "ZFSException",
    "DatasetException",
    "NotFoundError",
    "AlreadyExistsError",
    "UnknownTypeError",
    "ExecutionFailureError",
    "ValidationException",
    "InvalidNameError",
    "InvalidArgumentError",
]
