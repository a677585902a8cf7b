from .dataset_name import DatasetName
from .size_value import SizeValue
from .ssh_config import SSHConfig

__all__ = ["DatasetName", "SizeValue", "SSHConfig"]
