"""
Lifecycle, transfer and lookup services.

Each service validates against the shared property cache, runs the dataset
manager through the command executor and invalidates what it changed.
"""

from .dataset_service import DatasetService
from .snapshot_service import SnapshotService
from .transfer_service import TransferService
from .registry import ZFS, DatasetSequence

__all__ = [
    "DatasetService",
    "SnapshotService",
    "TransferService",
    "ZFS",
    "DatasetSequence"
]
