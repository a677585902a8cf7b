"""
zfs-namespace: a cached, typed view of a ZFS dataset namespace.

    from zfs_namespace import create_default_zfs

    zfs = create_default_zfs()
    fs = zfs["tank/data"]
    snap = fs.snapshot("nightly")
"""

from .core.entities.dataset import Dataset, Filesystem, Snapshot, SnapshotCapable, Volume
from .core.exceptions import (
    ZFSException,
    NotFoundError,
    AlreadyExistsError,
    InvalidNameError,
    InvalidArgumentError,
    UnknownTypeError,
    ExecutionFailureError,
)
from .factories.service_factory import ServiceFactory, ServiceFactoryBuilder, create_default_zfs
from .services.registry import ZFS

__version__ = "0.1.0"

__all__ = [
    "ZFS",
    "Dataset",
    "Filesystem",
    "Volume",
    "Snapshot",
    "SnapshotCapable",
    "ZFSException",
    "NotFoundError",
    "AlreadyExistsError",
    "InvalidNameError",
    "InvalidArgumentError",
    "UnknownTypeError",
    "ExecutionFailureError",
    "ServiceFactory",
    "ServiceFactoryBuilder",
    "create_default_zfs",
]
