"""
Logging interface the services write through.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional

LogExtra = Optional[Dict[str, Any]]


class ILogger(ABC):
    """Leveled logger taking a message plus structured fields (dataset, error_code ...)."""

    @abstractmethod
    def debug(self, message: str, extra: LogExtra = None) -> None:
        pass

    @abstractmethod
    def info(self, message: str, extra: LogExtra = None) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, extra: LogExtra = None) -> None:
        pass

    @abstractmethod
    def error(self, message: str, extra: LogExtra = None) -> None:
        pass

    @abstractmethod
    def exception(self, message: str, extra: LogExtra = None) -> None:
        """Like error(), with the active traceback attached."""
        pass

    @abstractmethod
    def add_context(self, key: str, value: Any) -> None:
        """Attach ``key`` to every later record, e.g. the remote host name."""
        pass

    @abstractmethod
    def remove_context(self, key: str) -> None:
        pass
