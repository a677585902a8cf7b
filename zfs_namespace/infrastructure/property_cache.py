"""
Process-wide store of dataset properties, populated lazily from the dataset manager.
"""
import logging
from typing import Dict, List, Optional, Set, Tuple

from ..core.exceptions.zfs_exceptions import ExecutionFailureError
from ..core.interfaces.command_executor import ICommandExecutor
from ..core.value_objects.dataset_name import in_subtree, validate_name

PropertyMap = Dict[str, str]

NONEXISTENT_MARKER = "dataset does not exist"

_GET_ARGS = ("get", "-H", "-p", "-o", "name,property,value")


def _reports_missing(line: str) -> bool:
    # A property value may contain the marker text; only non-triple lines count
    return len(line.split("\t", 2)) != 3 and NONEXISTENT_MARKER in line


class PropertyCache:
    """Dataset name -> property map.

    A missing key means "not loaded yet"; a key mapped to None means "loaded,
    and the dataset does not exist". Single owner, no locking.
    """

    def __init__(self, executor: ICommandExecutor):
        self._executor = executor
        self._entries: Dict[str, Optional[PropertyMap]] = {}
        self._fully_loaded = False
        # Names whose whole subtree was fetched and has not been invalidated since
        self._complete_roots: Set[str] = set()
        self.logger = logging.getLogger(__name__)

    def properties(self, name: Optional[str] = None):
        """Property map for ``name`` (None if absent), or all maps when no name is given."""
        if name is None:
            if not self._fully_loaded:
                self._load_all()
            return {key: value for key, value in self._entries.items() if value}

        validate_name(name)
        if name not in self._entries:
            self._load(name)
        return self._entries.get(name)

    def invalidate(self, name: Optional[str] = None) -> None:
        """Forget ``name``, its descendants and its snapshots; everything when no name is given."""
        self._fully_loaded = False
        if name is None:
            self.logger.debug("Invalidating entire property cache")
            self._entries.clear()
            self._complete_roots.clear()
            return

        stale = [key for key in self._entries if in_subtree(key, name)]
        for key in stale:
            del self._entries[key]
        self._complete_roots = {
            root for root in self._complete_roots
            if not (in_subtree(name, root) or in_subtree(root, name))
        }
        self.logger.debug(f"Invalidated {len(stale)} cache entries under {name}")

    def clear(self) -> None:
        self.invalidate()

    def subtree(self, name: str) -> List[Tuple[str, PropertyMap]]:
        """Present entries at or under ``name``, re-fetching if part of the subtree was invalidated."""
        validate_name(name)
        if not self._is_complete(name):
            for key in [key for key in self._entries if in_subtree(key, name)]:
                del self._entries[key]
            self._load(name)
        return [(key, value) for key, value in self._entries.items() if value and in_subtree(key, name)]

    def is_loaded(self, name: str) -> bool:
        return name in self._entries

    def exists(self, name: str) -> bool:
        return bool(self.properties(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self._entries.get(name))

    def __len__(self) -> int:
        return sum(1 for value in self._entries.values() if value)

    def _load(self, name: str) -> None:
        result = self._executor.execute_zfs(*_GET_ARGS, "-r", "all", name, ignore_exit_failure=True)
        if any(_reports_missing(line) for line in result.stdout + result.stderr):
            self.logger.debug(f"Dataset {name} does not exist")
            self._entries[name] = None
            return
        if not result.success:
            raise ExecutionFailureError(
                self._executor.zfs_command(*_GET_ARGS, "-r", "all", name),
                result.returncode, result.stdout, result.stderr
            )

        loaded = self._store(result.stdout, name)
        if name not in loaded:
            self._entries[name] = None
        else:
            self._complete_roots.add(name)
        self.logger.debug(f"Loaded properties of {len(loaded)} datasets under {name}")

    def _load_all(self) -> None:
        result = self._executor.execute_zfs(*_GET_ARGS, "all")
        self._entries.clear()
        self._complete_roots.clear()
        loaded = self._store(result.stdout, None)
        self._fully_loaded = True
        self.logger.debug(f"Loaded properties of {len(loaded)} datasets")

    def _is_complete(self, name: str) -> bool:
        if self._fully_loaded:
            return True
        return any(in_subtree(name, root) for root in self._complete_roots)

    def _store(self, lines: List[str], requested: Optional[str]) -> List[str]:
        maps: Dict[str, PropertyMap] = {}
        for line in lines:
            if not line.strip():
                continue
            parts = line.split("\t", 2)
            if len(parts) != 3:
                raise ExecutionFailureError(
                    self._executor.zfs_command(*_GET_ARGS, requested or "all"),
                    0, lines, reason=f"unparseable property line: {line!r}"
                )
            dataset, prop, value = parts
            maps.setdefault(dataset, {})[prop] = value

        self._entries.update(maps)
        return list(maps)
