"""
Dataset registry: resolves names and mountpoints to typed handles.
"""
import posixpath
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple, Type, Union

from ..core.entities.dataset import Dataset, Filesystem, Snapshot, Volume
from ..core.exceptions.zfs_exceptions import UnknownTypeError
from ..core.exceptions.validation_exceptions import InvalidNameError
from ..core.interfaces.command_executor import ICommandExecutor
from ..core.interfaces.logger_interface import ILogger
from ..core.value_objects.dataset_name import DatasetName, is_snapshot_name, validate_name
from ..infrastructure.property_cache import PropertyCache
from ..models import CreateOptions, SendOptions, parse_options
from .dataset_service import DatasetService
from .snapshot_service import SnapshotService
from .transfer_service import TransferService

HANDLE_TYPES: Dict[str, Type[Dataset]] = {
    'filesystem': Filesystem,
    'snapshot': Snapshot,
    'volume': Volume,
}


class DatasetSequence:
    """Lazy sequence that re-reads its source on every iteration."""

    def __init__(self, source: Callable[[], Iterable[Any]]):
        self._source = source

    def __iter__(self) -> Iterator[Any]:
        return iter(self._source())

    def __len__(self) -> int:
        return sum(1 for _ in self)


class ZFS:
    """Entry point of the namespace.

    ``zfs["tank/fs"]`` returns a handle or None, ``zfs["/mnt/tank/fs"]``
    resolves through mountpoints and ``zfs["/mnt/tank/fs/dir", True]`` walks
    up to the closest mounted dataset.
    """

    def __init__(self,
                 executor: ICommandExecutor,
                 cache: PropertyCache,
                 dataset_service: DatasetService,
                 snapshot_service: SnapshotService,
                 transfer_service: TransferService,
                 logger: ILogger):
        self.executor = executor
        self.cache = cache
        self.dataset_service = dataset_service
        self.snapshot_service = snapshot_service
        self.transfer_service = transfer_service
        self.logger = logger

    # -- lookup ------------------------------------------------------------

    def get(self, path_or_name: str, find_parent: bool = False) -> Optional[Dataset]:
        """Handle for an existing dataset, None when nothing matches."""
        if path_or_name.startswith('/'):
            name = self._find_mounted(path_or_name, find_parent)
            return self._existing(name) if name else None
        validate_name(path_or_name)
        return self._existing(path_or_name)

    resolve = get

    def __getitem__(self, key: Union[str, Tuple[str, bool]]) -> Optional[Dataset]:
        if isinstance(key, tuple):
            return self.get(*key)
        return self.get(key)

    def handle(self, name: str) -> Dataset:
        """Handle for ``name`` whether or not it exists yet."""
        validate_name(name)
        if is_snapshot_name(name):
            return Snapshot(name, self)
        if self.dataset_service.get_type(name) == 'volume':
            return Volume(name, self)
        return Filesystem(name, self)

    def exists(self, name: str) -> bool:
        return self.dataset_service.exists(name)

    def _existing(self, name: str) -> Optional[Dataset]:
        dataset_type = self.dataset_service.get_type(name)
        if dataset_type is None:
            return None
        handle_class = HANDLE_TYPES.get(dataset_type)
        if handle_class is None:
            raise UnknownTypeError(name, dataset_type)
        return handle_class(name, self)

    def _find_mounted(self, path: str, find_parent: bool) -> Optional[str]:
        by_mountpoint = {mountpoint: name for mountpoint, name in self._mounted()}
        # normpath keeps a leading '//', so collapse it first
        path = posixpath.normpath('/' + path.lstrip('/'))
        while True:
            if path in by_mountpoint:
                return by_mountpoint[path]
            parent_path = posixpath.dirname(path)
            if not find_parent or parent_path == path:
                return None
            path = parent_path

    def _mounted(self) -> Iterator[Tuple[str, str]]:
        for name, props in self.cache.properties().items():
            # Datasets delegated to a jail or zone are mounted in another namespace
            if props.get('jailed') == 'on' or props.get('zoned') == 'on':
                continue
            mountpoint = props.get('mountpoint', '')
            if mountpoint.startswith('/'):
                yield posixpath.normpath('/' + mountpoint.lstrip('/')), name

    # -- listings ----------------------------------------------------------

    def filesystems(self) -> DatasetSequence:
        """Every dataset the dataset manager reports, as handles."""
        return DatasetSequence(
            lambda: [self._existing(name) for name in self.cache.properties()]
        )

    def mountpoints(self) -> DatasetSequence:
        """``(mountpoint, handle)`` pairs for every mounted dataset in this namespace."""
        return DatasetSequence(
            lambda: [(mountpoint, self._existing(name)) for mountpoint, name in self._mounted()]
        )

    def pools(self) -> DatasetSequence:
        def load():
            result = self.executor.execute_zpool("list", "-H", "-o", "name")
            return [Filesystem(line.strip(), self) for line in result.stdout if line.strip()]
        return DatasetSequence(load)

    # -- mutation ----------------------------------------------------------

    def create(self, name: str, **options) -> Optional[Dataset]:
        """Create ``name``; returns None without touching anything if it already exists."""
        dataset_name = DatasetName.from_string(name)
        if dataset_name.is_snapshot or dataset_name.is_pool_root:
            raise InvalidNameError(name, "expected pool/path of a filesystem or volume")
        if self.exists(name):
            self.logger.debug(f"Dataset already exists, not creating: {name}")
            return None
        return self.create_dataset(name, **options)

    def create_dataset(self, name: str, **options) -> Dataset:
        create_options = parse_options(CreateOptions, **options)
        self.dataset_service.create(name, create_options).unwrap()
        return self._existing(name) or self.handle(name)

    def send(self, snapshot: str, destination: str, **options) -> Optional[str]:
        send_options = parse_options(SendOptions, **options)
        return self.transfer_service.send(snapshot, destination, send_options).unwrap()

    def invalidate(self, name: Optional[str] = None) -> None:
        self.cache.invalidate(name)
