from abc import ABC, abstractmethod
from typing import List, Sequence
from dataclasses import dataclass, field


@dataclass
class CommandResult:
    """Result of a command execution, output split into lines"""
    returncode: int
    stdout: List[str] = field(default_factory=list)
    stderr: List[str] = field(default_factory=list)
    
    @property
    def success(self) -> bool:
        return self.returncode == 0
    
    @property
    def is_silent(self) -> bool:
        """True when the command printed nothing on either stream"""
        return not self.stdout and not self.stderr


class ICommandExecutor(ABC):
    """Interface for running dataset manager commands"""
    
    @abstractmethod
    def execute(self, argv: Sequence[str], ignore_exit_failure: bool = False) -> CommandResult:
        """Run ``argv`` to completion.
        
        A non-zero exit raises ExecutionFailureError unless
        ``ignore_exit_failure`` is set, which existence probes use.
        """
        pass
    
    @abstractmethod
    def pipe(self, send_argv: Sequence[str], receive_argv: Sequence[str],
             chunk_size: int = 16384) -> CommandResult:
        """Stream stdout of ``send_argv`` into stdin of ``receive_argv``.
        
        The returned result carries the combined stderr of both sides and the
        first non-zero exit code.
        """
        pass
    
    @abstractmethod
    def zfs_command(self, *args: str) -> List[str]:
        """Full argv for a zfs subcommand"""
        pass
    
    @abstractmethod
    def zpool_command(self, *args: str) -> List[str]:
        """Full argv for a zpool subcommand"""
        pass
    
    def execute_zfs(self, *args: str, ignore_exit_failure: bool = False) -> CommandResult:
        return self.execute(self.zfs_command(*args), ignore_exit_failure=ignore_exit_failure)
    
    def execute_zpool(self, *args: str, ignore_exit_failure: bool = False) -> CommandResult:
        return self.execute(self.zpool_command(*args), ignore_exit_failure=ignore_exit_failure)
    
    def pipe_zfs(self, send_args: Sequence[str], receive_args: Sequence[str],
                 chunk_size: int = 16384) -> CommandResult:
        return self.pipe(self.zfs_command(*send_args), self.zfs_command(*receive_args), chunk_size)
