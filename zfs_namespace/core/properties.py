"""
Static table of dataset properties and the typed accessors that consume it.

Each property has a value kind; one read function and one format function per
kind convert between the raw strings the dataset manager reports (``-p``
parsable form) and Python values.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, Optional, Tuple

from .exceptions.validation_exceptions import InvalidArgumentError
from .value_objects.size_value import SizeValue

ABSENT = "-"


class ValueKind(str, Enum):
    SIZE = "size"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ENUM = "enum"
    SNAPSHOT = "snapshot"
    FLOAT = "float"
    STRING = "string"
    DATE = "date"
    PATH = "path"


@dataclass(frozen=True)
class PropertySpec:
    kind: ValueKind
    editable: bool = False
    inheritable: bool = False
    create_only: bool = False
    values: Tuple[str, ...] = ()


_BLOCK_SIZES = ('512', '1024', '2048', '4096', '8192', '16384', '32768', '65536', '131072', '262144',
                '524288', '1048576')

PROPERTIES: Dict[str, PropertySpec] = {
    # read-only statistics
    'available': PropertySpec(ValueKind.SIZE),
    'compressratio': PropertySpec(ValueKind.FLOAT),
    'creation': PropertySpec(ValueKind.DATE),
    'defer_destroy': PropertySpec(ValueKind.BOOLEAN),
    'mounted': PropertySpec(ValueKind.BOOLEAN),
    'origin': PropertySpec(ValueKind.SNAPSHOT),
    'refcompressratio': PropertySpec(ValueKind.FLOAT),
    'referenced': PropertySpec(ValueKind.SIZE),
    'type': PropertySpec(ValueKind.ENUM, values=('filesystem', 'snapshot', 'volume')),
    'used': PropertySpec(ValueKind.SIZE),
    'usedbychildren': PropertySpec(ValueKind.SIZE),
    'usedbydataset': PropertySpec(ValueKind.SIZE),
    'usedbyrefreservation': PropertySpec(ValueKind.SIZE),
    'usedbysnapshots': PropertySpec(ValueKind.SIZE),
    'userrefs': PropertySpec(ValueKind.INTEGER),

    # editable
    'aclinherit': PropertySpec(ValueKind.ENUM, editable=True, inheritable=True,
                               values=('discard', 'noallow', 'restricted', 'passthrough', 'passthrough-x')),
    'atime': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'canmount': PropertySpec(ValueKind.BOOLEAN, editable=True, values=('noauto',)),
    'checksum': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True,
                             values=('fletcher2', 'fletcher4', 'sha256', 'sha512', 'skein', 'edonr', 'blake3')),
    'compression': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True,
                                values=('lzjb', 'lz4', 'zle', 'zstd', 'gzip') +
                                tuple(f'gzip-{level}' for level in range(1, 10))),
    'copies': PropertySpec(ValueKind.INTEGER, editable=True, inheritable=True, values=('1', '2', '3')),
    'dedup': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True,
                          values=('verify', 'sha256', 'sha256,verify')),
    'devices': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'exec': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'logbias': PropertySpec(ValueKind.ENUM, editable=True, inheritable=True, values=('latency', 'throughput')),
    'mlslabel': PropertySpec(ValueKind.STRING, editable=True, inheritable=True),
    'mountpoint': PropertySpec(ValueKind.PATH, editable=True, inheritable=True),
    'nbmand': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'primarycache': PropertySpec(ValueKind.ENUM, editable=True, inheritable=True, values=('all', 'none', 'metadata')),
    'quota': PropertySpec(ValueKind.SIZE, editable=True, values=('none',)),
    'readonly': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'recordsize': PropertySpec(ValueKind.INTEGER, editable=True, inheritable=True, values=_BLOCK_SIZES),
    'refquota': PropertySpec(ValueKind.SIZE, editable=True, values=('none',)),
    'refreservation': PropertySpec(ValueKind.SIZE, editable=True, values=('none', 'auto')),
    'reservation': PropertySpec(ValueKind.SIZE, editable=True, values=('none',)),
    'secondarycache': PropertySpec(ValueKind.ENUM, editable=True, inheritable=True, values=('all', 'none', 'metadata')),
    'setuid': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'sharenfs': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'sharesmb': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'snapdir': PropertySpec(ValueKind.ENUM, editable=True, inheritable=True, values=('hidden', 'visible')),
    'sync': PropertySpec(ValueKind.ENUM, editable=True, inheritable=True, values=('standard', 'always', 'disabled')),
    'version': PropertySpec(ValueKind.INTEGER, editable=True, values=('1', '2', '3', '4', '5', 'current')),
    'vscan': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'xattr': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True, values=('sa', 'dir')),
    'zoned': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'jailed': PropertySpec(ValueKind.BOOLEAN, editable=True, inheritable=True),
    'volsize': PropertySpec(ValueKind.SIZE, editable=True),

    # settable only at creation time
    'casesensitivity': PropertySpec(ValueKind.ENUM, create_only=True, values=('sensitive', 'insensitive', 'mixed')),
    'normalization': PropertySpec(ValueKind.ENUM, create_only=True,
                                  values=('none', 'formC', 'formD', 'formKC', 'formKD')),
    'utf8only': PropertySpec(ValueKind.BOOLEAN, create_only=True),
    'volblocksize': PropertySpec(ValueKind.INTEGER, create_only=True, values=_BLOCK_SIZES),
}

# User properties (module:property) and anything else the table does not know
_FREEFORM = PropertySpec(ValueKind.STRING, editable=True, inheritable=True)


def property_spec(name: str) -> PropertySpec:
    return PROPERTIES.get(name, _FREEFORM)


def is_user_property(name: str) -> bool:
    return ':' in name


# -- reads -----------------------------------------------------------------

def _read_number(raw: str, spec: PropertySpec) -> Any:
    if raw in spec.values and not raw.isdigit():
        return raw
    try:
        return int(raw)
    except ValueError:
        return raw


def _read_boolean(raw: str, spec: PropertySpec) -> Any:
    if raw in ('on', 'yes', 'true'):
        return True
    if raw in ('off', 'no', 'false'):
        return False
    return raw


def _read_float(raw: str, spec: PropertySpec) -> Any:
    try:
        return float(raw.rstrip('x'))
    except ValueError:
        return raw


def _read_date(raw: str, spec: PropertySpec) -> Any:
    return datetime.fromtimestamp(int(raw), tz=timezone.utc)


def _read_path(raw: str, spec: PropertySpec) -> Any:
    if raw.startswith('/'):
        return PurePosixPath(raw)
    # none / legacy
    return raw


def _read_raw(raw: str, spec: PropertySpec) -> Any:
    return raw


_READERS: Dict[ValueKind, Callable[[str, PropertySpec], Any]] = {
    ValueKind.SIZE: _read_number,
    ValueKind.INTEGER: _read_number,
    ValueKind.BOOLEAN: _read_boolean,
    ValueKind.ENUM: _read_raw,
    ValueKind.SNAPSHOT: _read_raw,
    ValueKind.FLOAT: _read_float,
    ValueKind.STRING: _read_raw,
    ValueKind.DATE: _read_date,
    ValueKind.PATH: _read_path,
}


def read_property(name: str, raw: Optional[str],
                  resolve_snapshot: Optional[Callable[[str], Any]] = None) -> Any:
    """Convert a raw property value to its typed form.

    ``None`` and the ``-`` sentinel both read as None. Values that do not parse
    as the declared kind (``none``, ``legacy``, ``lz4`` ...) come back as the
    raw string.
    """
    if raw is None or raw == ABSENT:
        return None
    spec = property_spec(name)
    if spec.kind is ValueKind.SNAPSHOT and resolve_snapshot is not None:
        return resolve_snapshot(raw)
    return _READERS[spec.kind](raw, spec)


# -- writes ----------------------------------------------------------------

def _reject(name: str, value: Any, reason: str) -> InvalidArgumentError:
    return InvalidArgumentError(f"Invalid value {value!r} for property '{name}': {reason}", name, value)


def _format_boolean(name: str, value: Any, spec: PropertySpec) -> str:
    if value is True:
        return 'on'
    if value is False:
        return 'off'
    text = str(value)
    if text in ('on', 'off') or text in spec.values:
        return text
    raise _reject(name, value, f"expected on/off or one of {', '.join(spec.values) or 'nothing else'}")


def _format_size(name: str, value: Any, spec: PropertySpec) -> str:
    if str(value) in spec.values:
        return str(value)
    try:
        return SizeValue.parse(value).to_zfs_format()
    except ValueError as e:
        raise _reject(name, value, str(e)) from e


def _format_integer(name: str, value: Any, spec: PropertySpec) -> str:
    text = str(value)
    if isinstance(value, bool) or not (text.isdigit() or text in spec.values):
        raise _reject(name, value, "expected an integer")
    if spec.values and text not in spec.values:
        raise _reject(name, value, f"expected one of {', '.join(spec.values)}")
    return text


def _format_enum(name: str, value: Any, spec: PropertySpec) -> str:
    text = str(value)
    if text not in spec.values:
        raise _reject(name, value, f"expected one of {', '.join(spec.values)}")
    return text


def _format_path(name: str, value: Any, spec: PropertySpec) -> str:
    text = str(value)
    if not (text.startswith('/') or text in ('none', 'legacy')):
        raise _reject(name, value, "expected an absolute path, 'none' or 'legacy'")
    return text


def _format_text(name: str, value: Any, spec: PropertySpec) -> str:
    text = str(value)
    if '\n' in text or '\t' in text:
        raise _reject(name, value, "value cannot contain tabs or newlines")
    return text


_FORMATTERS: Dict[ValueKind, Callable[[str, Any, PropertySpec], str]] = {
    ValueKind.SIZE: _format_size,
    ValueKind.INTEGER: _format_integer,
    ValueKind.BOOLEAN: _format_boolean,
    ValueKind.ENUM: _format_enum,
    ValueKind.FLOAT: _format_text,
    ValueKind.STRING: _format_text,
    ValueKind.PATH: _format_path,
}


def format_property(name: str, value: Any, at_creation: bool = False) -> str:
    """Validate ``value`` for ``name`` and return the raw string to pass to ``set``/``create -o``."""
    spec = property_spec(name)
    if name in PROPERTIES:
        if spec.create_only and not at_creation:
            raise InvalidArgumentError(f"Property '{name}' can only be set at creation time", name, value)
        if not (spec.editable or spec.create_only):
            raise InvalidArgumentError(f"Property '{name}' is read-only", name, value)
    elif not is_user_property(name):
        raise InvalidArgumentError(f"Unknown property '{name}'", name, value)
    return _FORMATTERS[spec.kind](name, value, spec)


def check_inheritable(name: str) -> None:
    spec = property_spec(name)
    if name in PROPERTIES and not spec.inheritable:
        raise InvalidArgumentError(f"Property '{name}' cannot be inherited", name)
    if name not in PROPERTIES and not is_user_property(name):
        raise InvalidArgumentError(f"Unknown property '{name}'", name)
