"""
Service factory for dependency injection and registry creation.
"""
from typing import Dict, Optional

from ..config import ZFSNamespaceConfig, get_config
from ..core.interfaces.command_executor import ICommandExecutor
from ..core.interfaces.logger_interface import ILogger
from ..core.value_objects.ssh_config import SSHConfig
from ..infrastructure.command_executor import LocalCommandExecutor, RemoteCommandExecutor
from ..infrastructure.logging.structured_logger import OperationLogger, StructuredLogger
from ..infrastructure.property_cache import PropertyCache
from ..services.dataset_service import DatasetService
from ..services.registry import ZFS
from ..services.snapshot_service import SnapshotService
from ..services.transfer_service import TransferService


class ServiceFactory:
    """Builds the executor, cache, services and registry from one configuration."""

    def __init__(self, config: Optional[ZFSNamespaceConfig] = None,
                 executor: Optional[ICommandExecutor] = None):
        self._config = config or get_config()
        self._logger_instances: Dict[str, ILogger] = {}

        # Shared by every service so they all see one cache and one command channel
        self._executor = executor or self._create_executor()
        self._cache = PropertyCache(self._executor)

    @property
    def executor(self) -> ICommandExecutor:
        return self._executor

    @property
    def cache(self) -> PropertyCache:
        return self._cache

    def _create_executor(self) -> ICommandExecutor:
        executor_config = self._config.executor
        remote = self._config.remote
        if remote.enabled:
            ssh_config = SSHConfig(
                host=remote.host,
                user=remote.user,
                port=remote.port,
                key_file=remote.key_file,
                timeout=remote.connect_timeout
            )
            return RemoteCommandExecutor(ssh_config, executor_config.zfs_path, executor_config.zpool_path)
        return LocalCommandExecutor(executor_config.zfs_path, executor_config.zpool_path)

    def create_dataset_service(self) -> DatasetService:
        return DatasetService(
            executor=self._executor,
            cache=self._cache,
            logger=self._get_logger("dataset_service")
        )

    def create_snapshot_service(self) -> SnapshotService:
        return SnapshotService(
            executor=self._executor,
            cache=self._cache,
            logger=self._get_logger("snapshot_service")
        )

    def create_transfer_service(self) -> TransferService:
        return TransferService(
            executor=self._executor,
            cache=self._cache,
            logger=self._get_logger("transfer_service", operation=True),
            chunk_size=self._config.executor.chunk_size
        )

    def create_zfs(self) -> ZFS:
        """Create a registry with every service wired to the shared cache."""
        return ZFS(
            executor=self._executor,
            cache=self._cache,
            dataset_service=self.create_dataset_service(),
            snapshot_service=self.create_snapshot_service(),
            transfer_service=self.create_transfer_service(),
            logger=self._get_logger("registry")
        )

    def _get_logger(self, service_name: str, operation: bool = False) -> ILogger:
        """Get or create a logger instance for a service."""
        if service_name not in self._logger_instances:
            name = f"{self._config.logging.logger_name}.{service_name}"
            logger_class = OperationLogger if operation else StructuredLogger
            service_logger = logger_class(name=name, level=self._config.logging.log_level)
            if self._config.remote.enabled:
                service_logger.add_context("remote_host", self._config.remote.host)
            self._logger_instances[service_name] = service_logger
        return self._logger_instances[service_name]

    def get_config(self) -> ZFSNamespaceConfig:
        return self._config


class ServiceFactoryBuilder:
    """Builder for creating ServiceFactory instances with fluent configuration."""

    def __init__(self, config: Optional[ZFSNamespaceConfig] = None):
        self._config = config or ZFSNamespaceConfig()
        self._executor: Optional[ICommandExecutor] = None

    def with_zfs_path(self, zfs_path: str, zpool_path: Optional[str] = None) -> 'ServiceFactoryBuilder':
        self._config.executor.zfs_path = zfs_path
        if zpool_path is not None:
            self._config.executor.zpool_path = zpool_path
        return self

    def with_chunk_size(self, chunk_size: int) -> 'ServiceFactoryBuilder':
        if chunk_size <= 0:
            raise ValueError("chunk size must be positive")
        self._config.executor.chunk_size = chunk_size
        return self

    def with_remote(self, host: str, user: str = "root", port: int = 22,
                    key_file: Optional[str] = None) -> 'ServiceFactoryBuilder':
        """Run all commands on ``host`` over ssh."""
        self._config.remote.host = host
        self._config.remote.user = user
        self._config.remote.port = port
        self._config.remote.key_file = key_file
        return self

    def with_log_level(self, level: str) -> 'ServiceFactoryBuilder':
        self._config.logging.log_level = level.upper()
        return self

    def with_executor(self, executor: ICommandExecutor) -> 'ServiceFactoryBuilder':
        """Use a ready-made executor instead of building one from configuration."""
        self._executor = executor
        return self

    def build(self) -> ServiceFactory:
        return ServiceFactory(self._config, self._executor)


def create_default_zfs() -> ZFS:
    """Registry configured from the environment."""
    return ServiceFactory().create_zfs()
