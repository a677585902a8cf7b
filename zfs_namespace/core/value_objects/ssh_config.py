from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class SSHConfig:
    """SSH configuration value object for the remote command channel"""
    host: str
    user: str = "root"
    port: int = 22
    key_file: Optional[str] = None
    timeout: int = 30
    
    def __post_init__(self):
        if not self.host:
            raise ValueError("Host cannot be empty")
        if not (1 <= self.port <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        if self.timeout <= 0:
            raise ValueError("Timeout must be positive")
        if not self.user:
            raise ValueError("User cannot be empty")
    
    @property
    def connection_string(self) -> str:
        return f"{self.user}@{self.host}:{self.port}"
    
    def command_prefix(self) -> List[str]:
        """ssh argv that runs the remainder of the command on the remote host"""
        prefix = [
            "ssh",
            "-o", "BatchMode=yes",
            "-o", f"ConnectTimeout={self.timeout}",
            "-p", str(self.port),
            "-l", self.user,
        ]
        if self.key_file:
            prefix.extend(["-i", self.key_file])
        prefix.append(self.host)
        return prefix
    
    def to_dict(self) -> dict:
        return {
            'host': self.host,
            'user': self.user,
            'port': self.port,
            'key_file': self.key_file,
            'timeout': self.timeout
        }
