"""
zfs-namespace configuration module.

Loads executor, remote host and logging settings from environment variables,
optionally seeded from a ``.env`` file.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "ZFSNS_"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ExecutorConfig:
    """How dataset manager commands are invoked"""
    zfs_path: str = "zfs"
    zpool_path: str = "zpool"
    # Bytes moved per read/write when piping send into receive
    chunk_size: int = 16384


@dataclass
class RemoteConfig:
    """Run every command on another host through ssh when ``host`` is set"""
    host: str = ""
    user: str = "root"
    port: int = 22
    key_file: Optional[str] = None
    connect_timeout: int = 30

    @property
    def enabled(self) -> bool:
        return bool(self.host)


@dataclass
class LoggingConfig:
    log_level: str = "INFO"
    logger_name: str = "zfs_namespace"


class ZFSNamespaceConfig:
    """
    Configuration settings loaded from environment variables.

    Every key is looked up bare first, then with the ``ZFSNS_`` prefix.
    Invalid values are logged and replaced with the defaults.
    """

    def __init__(self):
        self.executor = ExecutorConfig()
        self.remote = RemoteConfig()
        self.logging = LoggingConfig()

        self._load_environment_variables()
        self._validate_configuration()

    def _load_environment_variables(self):
        # ==== EXECUTOR CONFIG ====
        self.executor.zfs_path = self._get_string("ZFS_PATH", self.executor.zfs_path)
        self.executor.zpool_path = self._get_string("ZPOOL_PATH", self.executor.zpool_path)
        self.executor.chunk_size = self._get_int("CHUNK_SIZE", self.executor.chunk_size)

        # ==== REMOTE CONFIG ====
        self.remote.host = self._get_string("REMOTE_HOST", self.remote.host)
        self.remote.user = self._get_string("SSH_USER", self.remote.user)
        self.remote.port = self._get_int("SSH_PORT", self.remote.port)
        self.remote.key_file = self._get_string("SSH_KEY_FILE", "") or None
        self.remote.connect_timeout = self._get_int("SSH_CONNECT_TIMEOUT", self.remote.connect_timeout)

        # ==== LOGGING CONFIG ====
        self.logging.log_level = self._get_string("LOG_LEVEL", self.logging.log_level).upper()
        self.logging.logger_name = self._get_string("LOGGER_NAME", self.logging.logger_name)

    def _get_string(self, key: str, default: str) -> str:
        """Get string value from environment with multiple key attempts"""
        for prefix in ["", ENV_PREFIX]:
            value = os.getenv(f"{prefix}{key}")
            if value is not None:
                return value
        return default

    def _get_int(self, key: str, default: int) -> int:
        value = self._get_string(key, str(default))
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Invalid integer value for {key}: {value}, using default: {default}")
            return default

    def _validate_configuration(self):
        if self.logging.log_level not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level: {self.logging.log_level}, using INFO")
            self.logging.log_level = "INFO"

        if self.executor.chunk_size <= 0:
            logger.warning(f"Invalid chunk size: {self.executor.chunk_size}, using default: 16384")
            self.executor.chunk_size = 16384

        if not self.executor.zfs_path.strip():
            logger.warning("Empty ZFS_PATH, using 'zfs'")
            self.executor.zfs_path = "zfs"
        if not self.executor.zpool_path.strip():
            logger.warning("Empty ZPOOL_PATH, using 'zpool'")
            self.executor.zpool_path = "zpool"

        if not (1 <= self.remote.port <= 65535):
            logger.warning(f"Invalid ssh port: {self.remote.port}, using default: 22")
            self.remote.port = 22

    def get_summary(self) -> dict:
        return {
            "executor": {
                "zfs_path": self.executor.zfs_path,
                "zpool_path": self.executor.zpool_path,
                "chunk_size": self.executor.chunk_size,
            },
            "remote": {
                "host": self.remote.host,
                "user": self.remote.user,
                "port": self.remote.port,
                "key_file": self.remote.key_file,
            },
            "logging": {
                "log_level": self.logging.log_level,
                "logger_name": self.logging.logger_name,
            },
        }


def load_dotenv_if_exists() -> bool:
    """Load the first .env file found in the working directory or project root"""
    env_files = [
        Path(".env"),
        Path(__file__).parent.parent / ".env",
    ]

    for env_file in env_files:
        if env_file.exists():
            load_dotenv(env_file)
            logger.debug(f"Environment variables loaded from: {env_file}")
            return True
    return False


_config: Optional[ZFSNamespaceConfig] = None


def get_config() -> ZFSNamespaceConfig:
    """Process-wide configuration, created on first use"""
    global _config
    if _config is None:
        load_dotenv_if_exists()
        _config = ZFSNamespaceConfig()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next get_config() re-reads the environment"""
    global _config
    _config = None
