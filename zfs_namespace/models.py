from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .core.exceptions.validation_exceptions import InvalidArgumentError
from .core.value_objects.size_value import SizeValue

M = TypeVar('M', bound=BaseModel)


class CreateOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    parents: bool = False
    volume: Optional[int] = Field(default=None, description="Create a volume of this many bytes")
    properties: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("volume", mode="before")
    @classmethod
    def parse_volume_size(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        size = SizeValue.parse(value)
        if size.bytes == 0:
            raise ValueError("volume size must be positive")
        return size.bytes


class SendOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    incremental: Optional[str] = None
    intermediary: Optional[str] = None
    replication: bool = False
    dedup: bool = False
    force: bool = False
    use_sent_name: bool = False

    @field_validator("incremental", "intermediary", mode="before")
    @classmethod
    def snapshot_name(cls, value: Any) -> Optional[str]:
        # Accept snapshot handles as well as names
        if value is None or isinstance(value, str):
            return value or None
        name = getattr(value, "name", None)
        if not isinstance(name, str):
            raise ValueError(f"expected a snapshot name or handle, got {value!r}")
        return name


def parse_options(model: Type[M], **options: Any) -> M:
    """Build an options model, reporting bad or unknown options as InvalidArgumentError."""
    try:
        return model(**options)
    except ValidationError as e:
        first = e.errors()[0]
        parameter = ".".join(str(part) for part in first.get("loc", ())) or None
        raise InvalidArgumentError(
            f"Invalid {model.__name__}: {first.get('msg', str(e))}", parameter, first.get("input")
        ) from e
