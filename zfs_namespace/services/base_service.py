from typing import Iterable

from ..core.exceptions.zfs_exceptions import ZFSException, ExecutionFailureError
from ..core.interfaces.command_executor import ICommandExecutor
from ..core.interfaces.logger_interface import ILogger
from ..core.result import Result
from ..infrastructure.property_cache import PropertyCache


class BaseService:
    """Shared plumbing for the lifecycle services."""

    def __init__(self,
                 executor: ICommandExecutor,
                 cache: PropertyCache,
                 logger: ILogger):
        self._executor = executor
        self._cache = cache
        self._logger = logger

    def _mutate(self, args: Iterable[str], affected: Iterable[str]) -> None:
        """Run a mutating zfs subcommand, then invalidate ``affected``.

        Mutations must exit 0 and print nothing. The cache is invalidated even
        when the command fails, since the external state is unknown by then.
        """
        argv = self._executor.zfs_command(*args)
        try:
            result = self._executor.execute(argv)
            if not result.is_silent:
                raise ExecutionFailureError(
                    argv, result.returncode, result.stdout, result.stderr, reason="unexpected output"
                )
        finally:
            for name in dict.fromkeys(affected):
                self._cache.invalidate(name)

    def _failed(self, action: str, name: str, error: ZFSException) -> Result:
        if isinstance(error, ExecutionFailureError):
            self._logger.error(f"Failed to {action} {name}: {error}", {"dataset": name})
        else:
            self._logger.warning(f"Cannot {action} {name}: {error}", {"dataset": name})
        return Result.failure(error)
