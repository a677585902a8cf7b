"""
Dataset identity and path model.

Names look like ``pool[/path][@snapshot]``. The module-level functions work on
plain strings; ``DatasetName`` wraps the same rules in a value object.
"""
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..exceptions.validation_exceptions import InvalidNameError

_COMPONENT_PATTERN = re.compile(r'^[A-Za-z0-9_\-.: ]+$')
_MAX_NAME_LENGTH = 255


def split_snapshot(name: str) -> Tuple[str, Optional[str]]:
    """Split ``base@tag`` into ``(base, tag)``; tag is None for non-snapshots."""
    if '@' not in name:
        return name, None
    base, tag = name.split('@', 1)
    if not base:
        raise InvalidNameError(name, "snapshot has no base dataset")
    if not tag or '@' in tag:
        raise InvalidNameError(name, "malformed snapshot tag")
    return base, tag


def is_snapshot_name(name: str) -> bool:
    return '@' in name


def validate_component(component: str, name: str) -> str:
    if component in ('.', '..'):
        raise InvalidNameError(name, f"'{component}' is not a valid component")
    if not _COMPONENT_PATTERN.match(component):
        raise InvalidNameError(name, f"invalid component '{component}'")
    return component


def validate_name(name: str) -> str:
    """Validate a full dataset name and return it unchanged."""
    if not name or not isinstance(name, str):
        raise InvalidNameError(str(name), "name cannot be empty")
    if len(name) > _MAX_NAME_LENGTH:
        raise InvalidNameError(name, f"name too long (max {_MAX_NAME_LENGTH} characters)")
    if name.startswith('/') or name.endswith('/'):
        raise InvalidNameError(name, "name cannot start or end with '/'")

    base, tag = split_snapshot(name)
    for component in base.split('/'):
        if not component:
            raise InvalidNameError(name, "name cannot contain empty components")
        validate_component(component, name)
    if tag is not None:
        if '/' in tag:
            raise InvalidNameError(name, "snapshot tag cannot contain '/'")
        validate_component(tag, name)
    return name


def parse(name: str) -> Tuple[str, str]:
    """Return ``(pool, path)``; path excludes any ``@tag`` and may be empty."""
    validate_name(name)
    base, _ = split_snapshot(name)
    pool, _, path = base.partition('/')
    return pool, path


def pool_of(name: str) -> str:
    return parse(name)[0]


def parent(name: str) -> Optional[str]:
    """Parent dataset name, or None at the pool root.

    The parent of a snapshot is the dataset it was taken of.
    """
    validate_name(name)
    base, tag = split_snapshot(name)
    if tag is not None:
        return base
    if '/' not in base:
        return None
    return base.rsplit('/', 1)[0]


def _join(base: str, relative: str) -> str:
    if relative.startswith('/'):
        raise InvalidNameError(relative, "cannot append an absolute path")
    parts = base.split('/')
    for segment in relative.split('/'):
        if segment in ('', '.'):
            continue
        if segment == '..':
            if len(parts) == 1:
                raise InvalidNameError(f"{base}/{relative}", "path climbs above the pool root")
            parts.pop()
        else:
            parts.append(segment)
    return '/'.join(parts)


def append(base: str, suffix: str) -> str:
    """Path-append operator.

    ``append("tank/foo", "bar") == "tank/foo/bar"``
    ``append("tank/foo", "@bar") == "tank/foo@bar"``
    ``append("tank/foo@baz", "bar") == "tank/foo/bar@baz"``
    """
    validate_name(base)
    if not suffix:
        raise InvalidNameError(base, "cannot append an empty path")

    base_fs, base_tag = split_snapshot(base)
    if suffix.startswith('@'):
        if base_tag is not None:
            raise InvalidNameError(f"{base}{suffix}", "snapshot of a snapshot")
        return validate_name(f"{base_fs}{suffix}")

    if base_tag is not None:
        if '@' in suffix:
            raise InvalidNameError(f"{base}/{suffix}", "snapshot of a snapshot")
        return validate_name(f"{_join(base_fs, suffix)}@{base_tag}")

    return validate_name(_join(base_fs, suffix))


def in_subtree(name: str, root: str) -> bool:
    """True when ``name`` is ``root``, a descendant of it, or one of its snapshots."""
    return name == root or name.startswith(root + '/') or name.startswith(root + '@')


def validate_rename_target(old: str, new: str) -> str:
    """Validate a Filesystem/Volume rename target."""
    validate_name(new)
    if is_snapshot_name(new):
        raise InvalidNameError(new, "filesystem and volume names cannot contain '@'")
    if pool_of(old) != pool_of(new):
        raise InvalidNameError(new, f"cannot rename '{old}' into a different pool")
    if new.startswith(old + '/'):
        raise InvalidNameError(new, f"cannot rename '{old}' below itself")
    return new


def snapshot_rename_target(old: str, new_tag: str) -> str:
    """Full name of snapshot ``old`` after renaming its tag to ``new_tag``."""
    base, tag = split_snapshot(validate_name(old))
    if tag is None:
        raise InvalidNameError(old, "not a snapshot")
    if not new_tag:
        raise InvalidNameError(old, "snapshot tag cannot be empty")
    stripped = new_tag[1:] if new_tag.startswith('@') else new_tag
    if '/' in stripped:
        raise InvalidNameError(new_tag, "snapshot renames cannot move to another dataset")
    if '@' in stripped:
        raise InvalidNameError(new_tag, "malformed snapshot tag")
    return append(base, '@' + stripped)


@dataclass(frozen=True)
class DatasetName:
    """Parsed dataset name: pool, path components and optional snapshot tag"""
    pool: str
    path: Tuple[str, ...] = field(default_factory=tuple)
    snapshot: Optional[str] = None

    def __post_init__(self):
        # Re-validate through the string form so both constructors share one rule set
        validate_name(self._render())

    @classmethod
    def from_string(cls, dataset_str: str) -> 'DatasetName':
        validate_name(dataset_str)
        base, tag = split_snapshot(dataset_str)
        parts = base.split('/')
        return cls(pool=parts[0], path=tuple(parts[1:]), snapshot=tag)

    def _render(self) -> str:
        name = '/'.join((self.pool,) + tuple(self.path))
        if self.snapshot is not None:
            name += f"@{self.snapshot}"
        return name

    def __str__(self) -> str:
        return self._render()

    @property
    def is_pool_root(self) -> bool:
        return len(self.path) == 0 and self.snapshot is None

    @property
    def is_snapshot(self) -> bool:
        return self.snapshot is not None

    @property
    def filesystem(self) -> 'DatasetName':
        """This name without its snapshot tag"""
        return DatasetName(pool=self.pool, path=self.path)

    @property
    def parent(self) -> Optional['DatasetName']:
        """Parent dataset name, None at the pool root"""
        parent_name = parent(str(self))
        return DatasetName.from_string(parent_name) if parent_name else None

    def __truediv__(self, suffix: str) -> 'DatasetName':
        return DatasetName.from_string(append(str(self), suffix))
