"""Dataset handles"""

from .dataset import Dataset, Filesystem, Snapshot, SnapshotCapable, Volume

__all__ = [
    'Dataset',
    'Filesystem',
    'Volume',
    'Snapshot',
    'SnapshotCapable'
]
