from dataclasses import dataclass
import re
from typing import Union

_UNITS = {
    "B": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "P": 1024**5,
    "E": 1024**6,
}


@dataclass(frozen=True, order=True)
class SizeValue:
    """Size value object with unit handling"""
    bytes: int
    
    def __post_init__(self):
        if self.bytes < 0:
            raise ValueError("Size cannot be negative")
    
    @classmethod
    def from_zfs_string(cls, size_str: str) -> 'SizeValue':
        """Parse ZFS size string (e.g., '1.5G', '500M', '10GB') to bytes"""
        size_str = size_str.strip().upper()
        
        if size_str in ["-", "0", "0B"]:
            return cls(0)
        
        match = re.match(r'^(\d+(?:\.\d+)?)\s*([BKMGTPE]?)(?:I?B)?$', size_str)
        if not match:
            raise ValueError(f"Cannot parse size: {size_str}")
        
        numeric_value = float(match.group(1))
        unit = match.group(2) or "B"
        return cls(int(numeric_value * _UNITS[unit]))
    
    @classmethod
    def parse(cls, value: Union[int, str, 'SizeValue']) -> 'SizeValue':
        """Accept a byte count, a size string or an existing SizeValue"""
        if isinstance(value, SizeValue):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Cannot parse size: {value!r}")
        if isinstance(value, int):
            return cls(value)
        return cls.from_zfs_string(str(value))
    
    def to_human_readable(self, precision: int = 1) -> str:
        """Convert bytes to human readable format"""
        if self.bytes == 0:
            return "0B"
        
        units = list(_UNITS)
        size = float(self.bytes)
        unit_index = 0
        
        while size >= 1024 and unit_index < len(units) - 1:
            size /= 1024
            unit_index += 1
        
        if size == int(size):
            return f"{int(size)}{units[unit_index]}"
        
        return f"{size:.{precision}f}{units[unit_index]}"
    
    def to_zfs_format(self) -> str:
        """Exact byte count, the form the dataset manager accepts without rounding"""
        return str(self.bytes)
    
    def __str__(self) -> str:
        return self.to_human_readable()
    
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'bytes': self.bytes,
            'human_readable': self.to_human_readable()
        }
