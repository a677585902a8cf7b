"""
zfs-namespace Test Configuration and Fixtures

Shared fixtures: an in-memory dataset manager, a property cache on top of it,
mock loggers and a fully wired registry.
"""

import logging
from unittest.mock import Mock

import pytest

from zfs_namespace.config import ZFSNamespaceConfig
from zfs_namespace.factories.service_factory import ServiceFactoryBuilder
from zfs_namespace.infrastructure.logging.structured_logger import OperationLogger
from zfs_namespace.infrastructure.property_cache import PropertyCache
from zfs_namespace.services.dataset_service import DatasetService
from zfs_namespace.services.snapshot_service import SnapshotService
from zfs_namespace.services.transfer_service import TransferService

from tests.fixtures.fake_zfs import FakeZFS


@pytest.fixture(autouse=True)
def reset_structured_loggers():
    """Drop handlers bound to a previous test's captured stdout."""
    yield
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if name.startswith("zfs_namespace") and isinstance(logger, logging.Logger):
            logger.handlers.clear()


@pytest.fixture
def fake_zfs():
    """Dataset manager with pools tank and backup and one filesystem tank/fs1."""
    fake = FakeZFS(pools=("tank", "backup"))
    fake.add("tank/fs1")
    return fake


@pytest.fixture
def cache(fake_zfs):
    return PropertyCache(fake_zfs)


@pytest.fixture
def mock_logger():
    """Create mock logger."""
    logger = Mock()
    logger.info = Mock()
    logger.error = Mock()
    logger.warning = Mock()
    logger.debug = Mock()
    return logger


@pytest.fixture
def mock_operation_logger():
    return Mock(spec=OperationLogger)


@pytest.fixture
def dataset_service(fake_zfs, cache, mock_logger):
    return DatasetService(executor=fake_zfs, cache=cache, logger=mock_logger)


@pytest.fixture
def snapshot_service(fake_zfs, cache, mock_logger):
    return SnapshotService(executor=fake_zfs, cache=cache, logger=mock_logger)


@pytest.fixture
def transfer_service(fake_zfs, cache, mock_operation_logger):
    return TransferService(executor=fake_zfs, cache=cache, logger=mock_operation_logger)


@pytest.fixture
def config(monkeypatch):
    """Configuration with no environment overrides."""
    for key in ("ZFS_PATH", "ZPOOL_PATH", "CHUNK_SIZE", "REMOTE_HOST", "SSH_USER", "SSH_PORT",
                "SSH_KEY_FILE", "SSH_CONNECT_TIMEOUT", "LOG_LEVEL", "LOGGER_NAME"):
        monkeypatch.delenv(key, raising=False)
        monkeypatch.delenv(f"ZFSNS_{key}", raising=False)
    return ZFSNamespaceConfig()


@pytest.fixture
def zfs(fake_zfs, config):
    """Registry wired to the in-memory dataset manager."""
    return ServiceFactoryBuilder(config) \
        .with_executor(fake_zfs) \
        .with_log_level("WARNING") \
        .build() \
        .create_zfs()
