"""
Concrete implementations of the command executor interface.
"""
import logging
import shlex
import subprocess
import tempfile
from typing import IO, List, Sequence

from ..core.exceptions.zfs_exceptions import ExecutionFailureError
from ..core.interfaces.command_executor import ICommandExecutor, CommandResult
from ..core.value_objects.ssh_config import SSHConfig

DEFAULT_CHUNK_SIZE = 16384


class LocalCommandExecutor(ICommandExecutor):
    """Runs dataset manager commands on this machine."""

    def __init__(self, zfs_path: str = "zfs", zpool_path: str = "zpool"):
        self.logger = logging.getLogger(__name__)
        # Either may be a multi-word command such as "sudo zfs"
        self._zfs_prefix = shlex.split(zfs_path)
        self._zpool_prefix = shlex.split(zpool_path)

    def zfs_command(self, *args: str) -> List[str]:
        return self._zfs_prefix + list(args)

    def zpool_command(self, *args: str) -> List[str]:
        return self._zpool_prefix + list(args)

    def wrap(self, argv: Sequence[str]) -> List[str]:
        """Final argv handed to the operating system"""
        return list(argv)

    def execute(self, argv: Sequence[str], ignore_exit_failure: bool = False) -> CommandResult:
        command = self.wrap(argv)
        self.logger.debug(f"Executing command: {shlex.join(command)}")

        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                check=False
            )
        except OSError as e:
            raise ExecutionFailureError(command, 127, reason=str(e)) from e

        result = CommandResult(
            returncode=completed.returncode,
            stdout=completed.stdout.splitlines(),
            stderr=completed.stderr.splitlines()
        )

        if not result.success:
            if not ignore_exit_failure:
                self.logger.warning(
                    f"Command failed with exit code {result.returncode}: {' '.join(result.stderr)}"
                )
                raise ExecutionFailureError(command, result.returncode, result.stdout, result.stderr)
            self.logger.debug(f"Ignoring exit code {result.returncode} of {command[0]}")

        return result

    def pipe(self, send_argv: Sequence[str], receive_argv: Sequence[str],
             chunk_size: int = DEFAULT_CHUNK_SIZE) -> CommandResult:
        send_command = self.wrap(send_argv)
        receive_command = self.wrap(receive_argv)
        self.logger.debug(f"Piping: {shlex.join(send_command)} | {shlex.join(receive_command)}")

        # Side outputs go to spooled files so a chatty process cannot stall the pump
        with tempfile.TemporaryFile() as send_err, \
                tempfile.TemporaryFile() as receive_err, \
                tempfile.TemporaryFile() as receive_out:
            try:
                receiver = subprocess.Popen(
                    receive_command, stdin=subprocess.PIPE, stdout=receive_out, stderr=receive_err
                )
            except OSError as e:
                raise ExecutionFailureError(receive_command, 127, reason=str(e)) from e

            try:
                sender = subprocess.Popen(
                    send_command, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, stderr=send_err
                )
            except OSError as e:
                receiver.stdin.close()
                receiver.kill()
                receiver.wait()
                raise ExecutionFailureError(send_command, 127, reason=str(e)) from e

            transferred = self._pump(sender.stdout, receiver.stdin, chunk_size)
            send_code = sender.wait()
            receive_code = receiver.wait()

            stderr = _read_lines(send_err) + _read_lines(receive_err)
            stdout = _read_lines(receive_out)

        self.logger.debug(f"Pipe finished after {transferred} bytes (send={send_code}, receive={receive_code})")
        return CommandResult(returncode=send_code or receive_code, stdout=stdout, stderr=stderr)

    @staticmethod
    def _pump(source: IO[bytes], sink: IO[bytes], chunk_size: int) -> int:
        transferred = 0
        try:
            while True:
                chunk = source.read(chunk_size)
                if not chunk:
                    break
                sink.write(chunk)
                transferred += len(chunk)
        except BrokenPipeError:
            # Receiver exited early; its exit code and stderr report why
            pass
        finally:
            source.close()
            try:
                sink.close()
            except BrokenPipeError:
                pass
        return transferred


class RemoteCommandExecutor(LocalCommandExecutor):
    """Runs dataset manager commands on another host through ssh."""

    def __init__(self, ssh_config: SSHConfig, zfs_path: str = "zfs", zpool_path: str = "zpool"):
        super().__init__(zfs_path=zfs_path, zpool_path=zpool_path)
        self.ssh_config = ssh_config

    def wrap(self, argv: Sequence[str]) -> List[str]:
        # ssh hands a single string to the remote shell, so quote once here
        return self.ssh_config.command_prefix() + [shlex.join(argv)]


def _read_lines(spool: IO[bytes]) -> List[str]:
    spool.seek(0)
    return spool.read().decode("utf-8", errors="replace").splitlines()
