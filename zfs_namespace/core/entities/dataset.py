from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from ..exceptions.zfs_exceptions import NotFoundError
from ..properties import read_property
from ..value_objects.dataset_name import DatasetName
from ..value_objects.size_value import SizeValue

if TYPE_CHECKING:
    from ...services.registry import ZFS


class Dataset:
    """Handle on one dataset name.

    A handle stores only its name and the registry it came from. Every
    property read goes through the registry's cache, so a handle never goes
    stale; it may however refer to a dataset that no longer exists.
    """

    type_name = 'dataset'

    def __init__(self, name: str, registry: 'ZFS'):
        self._name = name
        self._registry = registry

    @property
    def name(self) -> str:
        return self._name

    @property
    def dataset_name(self) -> DatasetName:
        return DatasetName.from_string(self._name)

    @property
    def pool(self) -> str:
        return self.dataset_name.pool

    @property
    def path(self) -> str:
        return "/".join(self.dataset_name.path)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Dataset):
            return NotImplemented
        return type(self) is type(other) and self._name == other._name

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._name))

    def __str__(self) -> str:
        return f"#<ZFS:{self._name}>"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"

    def __truediv__(self, suffix: str) -> 'Dataset':
        return self._registry.handle(str(self.dataset_name / suffix))

    @property
    def parent(self) -> Optional['Dataset']:
        parent_name = self.dataset_name.parent
        return self._registry.handle(str(parent_name)) if parent_name else None

    # -- properties --------------------------------------------------------

    def properties(self) -> Optional[Dict[str, str]]:
        """Raw property map, None when the dataset does not exist"""
        return self._registry.dataset_service.properties(self._name)

    def get(self, property_name: str) -> Any:
        """Typed property value; None when unset, absent or the dataset is gone."""
        props = self.properties()
        if not props:
            return None
        return read_property(property_name, props.get(property_name), self._registry.handle)

    def __getitem__(self, property_name: str) -> Optional[str]:
        props = self.properties()
        return props.get(property_name) if props else None

    def set(self, property_name: str, value: Any) -> str:
        return self._registry.dataset_service.set_property(self._name, property_name, value).unwrap()

    def __setitem__(self, property_name: str, value: Any) -> None:
        self.set(property_name, value)

    def inherit(self, property_name: str, recursive: bool = False) -> None:
        self._registry.dataset_service.inherit_property(self._name, property_name, recursive).unwrap()

    # -- state -------------------------------------------------------------

    def exists(self) -> bool:
        return self._registry.dataset_service.exists(self._name)

    def is_valid(self) -> bool:
        """True while the dataset exists and still has this handle's type."""
        return self._registry.dataset_service.get_type(self._name) == self.type_name

    @property
    def type(self) -> Optional[str]:
        return self._registry.dataset_service.get_type(self._name)

    def destroy(self, recursive: bool = False) -> None:
        self._registry.dataset_service.destroy(self._name, recursive).unwrap()

    @property
    def used(self) -> Optional[SizeValue]:
        return self._size('used')

    @property
    def referenced(self) -> Optional[SizeValue]:
        return self._size('referenced')

    def _size(self, property_name: str) -> Optional[SizeValue]:
        value = self.get(property_name)
        return SizeValue(value) if isinstance(value, int) else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'name': self._name,
            'type': self.type_name,
            'pool': self.pool,
            'exists': self.exists(),
        }


class SnapshotCapable(ABC):
    """Datasets that can be snapshotted and promoted."""

    @abstractmethod
    def snapshot(self, tag: str, recursive: bool = False) -> 'Snapshot':
        pass

    @abstractmethod
    def snapshots(self) -> List['Snapshot']:
        pass

    @abstractmethod
    def promote(self) -> None:
        pass


class _WritableDataset(Dataset, SnapshotCapable):
    """Shared behaviour of filesystems and volumes"""

    def snapshot(self, tag: str, recursive: bool = False) -> 'Snapshot':
        name = self._registry.snapshot_service.snapshot(self._name, tag, recursive).unwrap()
        return Snapshot(name, self._registry)

    def snapshots(self) -> List['Snapshot']:
        names = self._registry.snapshot_service.snapshots(self._name).unwrap()
        return [Snapshot(name, self._registry) for name in names]

    def promote(self) -> None:
        self._registry.snapshot_service.promote(self._name).unwrap()

    @property
    def origin(self) -> Optional['Snapshot']:
        """Snapshot this dataset was cloned from, None if it is not a clone"""
        return self.get('origin')

    def rename(self, new_name: str, parents: bool = False) -> None:
        self._name = self._registry.dataset_service.rename(self._name, new_name, parents).unwrap()

    def children(self, recursive: bool = False) -> List[Dataset]:
        names = self._registry.dataset_service.children(self._name, recursive).unwrap()
        return [self._registry.handle(name) for name in names]


class Filesystem(_WritableDataset):
    type_name = 'filesystem'

    def create(self, leaf: str, **options) -> Union['Filesystem', 'Volume']:
        """Create a child dataset; ``volume=<size>`` creates a volume instead."""
        return self._registry.create_dataset(str(self.dataset_name / leaf), **options)

    @property
    def mountpoint(self) -> Optional[str]:
        mountpoint = self['mountpoint']
        if mountpoint and mountpoint.startswith('/'):
            return mountpoint
        return None

    def is_mounted(self) -> bool:
        return self.get('mounted') is True

    def get_compression_ratio(self) -> float:
        ratio = self.get('compressratio')
        return ratio if isinstance(ratio, float) else 1.0


class Volume(_WritableDataset):
    type_name = 'volume'

    @property
    def size(self) -> Optional[SizeValue]:
        return self._size('volsize')


class Snapshot(Dataset):
    type_name = 'snapshot'

    @property
    def tag(self) -> str:
        return self.dataset_name.snapshot

    @property
    def filesystem_name(self) -> str:
        return str(self.dataset_name.filesystem)

    def rename(self, new_tag: str, recursive: bool = False) -> None:
        """Change the tag; ``recursive`` renames the same tag on all descendants."""
        self._name = self._registry.snapshot_service.rename(self._name, new_tag, recursive).unwrap()

    def clone(self, target: str, parents: bool = False) -> Dataset:
        name = self._registry.snapshot_service.clone(self._name, target, parents).unwrap()
        handle = self._registry.get(name)
        if handle is None:
            raise NotFoundError(name, "clone did not appear after creation")
        return handle

    def send_to(self, destination: Union[str, Dataset], **options) -> Optional['Snapshot']:
        """Send this snapshot to ``destination``; returns the received snapshot if visible."""
        if isinstance(destination, Dataset):
            destination = destination.name
        received = self._registry.send(self._name, destination, **options)
        return Snapshot(received, self._registry) if received else None
