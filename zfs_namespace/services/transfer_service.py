"""
Snapshot send/receive between two places in the namespace.
"""
from typing import List, Optional, Tuple

from ..core.exceptions.zfs_exceptions import (
    ZFSException,
    NotFoundError,
    AlreadyExistsError,
    ExecutionFailureError,
)
from ..core.exceptions.validation_exceptions import InvalidArgumentError, InvalidNameError
from ..core.interfaces.command_executor import ICommandExecutor
from ..core.result import Result
from ..core.value_objects.dataset_name import (
    append,
    is_snapshot_name,
    parse,
    split_snapshot,
    validate_name,
)
from ..infrastructure.command_executor import DEFAULT_CHUNK_SIZE
from ..infrastructure.logging.structured_logger import OperationLogger
from ..infrastructure.property_cache import PropertyCache
from ..models import SendOptions
from .base_service import BaseService


class TransferService(BaseService):
    """Pipes ``zfs send`` into ``zfs receive``."""

    def __init__(self,
                 executor: ICommandExecutor,
                 cache: PropertyCache,
                 logger: OperationLogger,
                 chunk_size: int = DEFAULT_CHUNK_SIZE):
        super().__init__(executor, cache, logger)
        self._logger: OperationLogger = logger
        self.chunk_size = chunk_size

    def send(self, snapshot: str, destination: str,
             options: Optional[SendOptions] = None) -> Result[Optional[str], ZFSException]:
        """Send ``snapshot`` and receive it at ``destination``.

        Returns the name of the received snapshot when it can be found at the
        destination afterwards, otherwise None.
        """
        options = options or SendOptions()
        try:
            self._logger.start_operation("send", snapshot=snapshot, destination=destination)

            base = self._resolve_base(snapshot, destination, options)
            target = self.effective_destination(snapshot, destination, options.use_sent_name)
            self._check_state(snapshot, destination, target, base, options)

            send_args, receive_args = self.build_commands(snapshot, destination, base, options)
            self._pipe(send_args, receive_args, destination)

            received = append(target, '@' + split_snapshot(snapshot)[1])
            result = received if self._cache.exists(received) else None
            self._logger.complete_operation(received=result)
            return Result.success(result)

        except ZFSException as e:
            self._logger.fail_operation(str(e), error_code=e.error_code)
            return self._failed("send", snapshot, e)

    @staticmethod
    def effective_destination(snapshot: str, destination: str, use_sent_name: bool) -> str:
        """Where the stream lands; ``receive -d`` keeps the sent path below its pool."""
        if not use_sent_name:
            return destination
        _, path = parse(snapshot)
        return append(destination, path) if path else destination

    @staticmethod
    def build_commands(snapshot: str, destination: str, base: Optional[str],
                       options: SendOptions) -> Tuple[List[str], List[str]]:
        send_args = ["send"]
        if options.incremental:
            send_args.extend(["-i", base])
        if options.intermediary:
            send_args.extend(["-I", base])
        if options.replication:
            send_args.append("-R")
        if options.dedup:
            send_args.append("-D")
        send_args.append(snapshot)

        receive_args = ["receive"]
        if options.force:
            receive_args.append("-F")
        if options.use_sent_name:
            receive_args.append("-d")
        receive_args.append(destination)
        return send_args, receive_args

    def _resolve_base(self, snapshot: str, destination: str,
                      options: SendOptions) -> Optional[str]:
        if options.incremental and options.intermediary:
            raise InvalidArgumentError(
                "incremental and intermediary are mutually exclusive", 'intermediary', options.intermediary
            )

        validate_name(snapshot)
        if not is_snapshot_name(snapshot):
            raise InvalidNameError(snapshot, "only snapshots can be sent")
        validate_name(destination)
        if is_snapshot_name(destination):
            raise InvalidNameError(destination, "receive destination must be a filesystem")

        requested = options.incremental or options.intermediary
        if not requested:
            return None

        parameter = 'incremental' if options.incremental else 'intermediary'
        source_fs = split_snapshot(snapshot)[0]
        try:
            base = append(source_fs, requested) if requested.startswith('@') else validate_name(requested)
        except InvalidNameError as e:
            raise InvalidArgumentError(f"Invalid base snapshot: {e.reason}", parameter, requested) from e

        if not is_snapshot_name(base) or split_snapshot(base)[0] != source_fs:
            raise InvalidArgumentError(
                f"Base snapshot '{base}' must be a snapshot of {source_fs}", parameter, requested
            )
        if base == snapshot:
            raise InvalidArgumentError("A snapshot cannot be sent relative to itself", parameter, requested)
        return base

    def _check_state(self, snapshot: str, destination: str, target: str,
                     base: Optional[str], options: SendOptions) -> None:
        if not self._cache.exists(snapshot):
            raise NotFoundError(snapshot)

        if options.incremental and not self._cache.exists(base):
            raise NotFoundError(base, "incremental base does not exist")
        if options.intermediary:
            at_destination = append(target, '@' + split_snapshot(base)[1])
            if not self._cache.exists(at_destination):
                raise NotFoundError(at_destination, "intermediary base must exist at the destination")

        if base is None and not options.use_sent_name and self._cache.exists(destination):
            raise AlreadyExistsError(destination)

    def _pipe(self, send_args: List[str], receive_args: List[str], destination: str) -> None:
        try:
            result = self._executor.pipe_zfs(send_args, receive_args, self.chunk_size)
            if not (result.success and result.is_silent):
                argv = self._executor.zfs_command(*send_args) + ["|"] + self._executor.zfs_command(*receive_args)
                raise ExecutionFailureError(argv, result.returncode, result.stdout, result.stderr)
        finally:
            self._cache.invalidate(destination)
