from typing import Any, Dict, List, Optional

from ..core.exceptions.zfs_exceptions import (
    ZFSException,
    NotFoundError,
    AlreadyExistsError,
)
from ..core.exceptions.validation_exceptions import InvalidNameError, InvalidArgumentError
from ..core.properties import check_inheritable, format_property
from ..core.result import Result
from ..core.value_objects.dataset_name import (
    is_snapshot_name,
    parent,
    pool_of,
    split_snapshot,
    validate_name,
    validate_rename_target,
)
from ..core.value_objects.size_value import SizeValue
from ..models import CreateOptions
from .base_service import BaseService


class DatasetService(BaseService):
    """Create, destroy, rename and configure filesystems and volumes."""

    def properties(self, name: str) -> Optional[Dict[str, str]]:
        """Raw property map, None when the dataset does not exist"""
        return self._cache.properties(name)

    def exists(self, name: str) -> bool:
        return self._cache.exists(name)

    def get_type(self, name: str) -> Optional[str]:
        props = self._cache.properties(name)
        return props.get('type') if props else None

    def create(self, name: str, options: Optional[CreateOptions] = None) -> Result[str, ZFSException]:
        """Create a filesystem, or a volume when ``options.volume`` is set."""
        options = options or CreateOptions()
        try:
            self._logger.info(f"Creating dataset: {name} (parents={options.parents}, volume={options.volume})")

            validate_name(name)
            if is_snapshot_name(name):
                raise InvalidNameError(name, "use snapshot() to create snapshots")
            parent_name = parent(name)
            if parent_name is None:
                raise InvalidNameError(name, "pools cannot be created as datasets")

            if self._cache.exists(name):
                raise AlreadyExistsError(name)
            parent_type = self.get_type(parent_name)
            if parent_type is None and not options.parents:
                raise NotFoundError(parent_name, "parent does not exist")
            if parent_type is not None and parent_type != 'filesystem':
                raise InvalidArgumentError(
                    f"Cannot create '{name}': parent is a {parent_type}", 'name', name
                )

            command_args = ["create"]
            if options.parents:
                command_args.append("-p")
            if options.volume is not None:
                command_args.extend(["-V", SizeValue(options.volume).to_zfs_format()])
            for key, value in options.properties.items():
                command_args.extend(["-o", f"{key}={format_property(key, value, at_creation=True)}"])
            command_args.append(name)

            affected = pool_of(name) if options.parents else parent_name
            self._mutate(command_args, [affected])

            self._logger.info(f"Successfully created dataset: {name}")
            return Result.success(name)

        except ZFSException as e:
            return self._failed("create", name, e)

    def destroy(self, name: str, recursive: bool = False) -> Result[bool, ZFSException]:
        """Destroy a dataset; ``recursive`` takes descendants and snapshots with it."""
        try:
            self._logger.info(f"Destroying dataset: {name} (recursive={recursive})")

            validate_name(name)
            if not self._cache.exists(name):
                raise NotFoundError(name)

            command_args = ["destroy"]
            if recursive:
                command_args.append("-r")
            command_args.append(name)

            base, tag = split_snapshot(name)
            # destroy -r on a snapshot also removes same-named snapshots of descendants
            affected = base if tag is not None and recursive else name
            self._mutate(command_args, [affected])

            self._logger.info(f"Successfully destroyed dataset: {name}")
            return Result.success(True)

        except ZFSException as e:
            return self._failed("destroy", name, e)

    def rename(self, name: str, new_name: str, parents: bool = False) -> Result[str, ZFSException]:
        """Rename a filesystem or volume within its pool."""
        try:
            self._logger.info(f"Renaming dataset: {name} -> {new_name} (parents={parents})")

            validate_name(name)
            if is_snapshot_name(name):
                raise InvalidNameError(name, "use the snapshot rename for snapshots")
            validate_rename_target(name, new_name)

            if not self._cache.exists(name):
                raise NotFoundError(name)
            if self._cache.exists(new_name):
                raise AlreadyExistsError(new_name)
            new_parent = parent(new_name)
            if not parents and new_parent is not None and not self._cache.exists(new_parent):
                raise NotFoundError(new_parent, "parent does not exist")

            command_args = ["rename"]
            if parents:
                command_args.append("-p")
            command_args.extend([name, new_name])

            affected = [name, pool_of(name)] if parents else [name, new_name]
            self._mutate(command_args, affected)

            self._logger.info(f"Successfully renamed dataset: {name} -> {new_name}")
            return Result.success(new_name)

        except ZFSException as e:
            return self._failed("rename", name, e)

    def set_property(self, name: str, property_name: str, value: Any) -> Result[str, ZFSException]:
        """Set a property; returns the raw value that was written."""
        try:
            self._logger.info(f"Setting property {property_name}={value} on dataset: {name}")

            validate_name(name)
            raw = format_property(property_name, value)
            if not self._cache.exists(name):
                raise NotFoundError(name)

            # Inherited values below may change too, so invalidate the subtree
            self._mutate(["set", f"{property_name}={raw}", name], [name])

            return Result.success(raw)

        except ZFSException as e:
            return self._failed(f"set {property_name} on", name, e)

    def inherit_property(self, name: str, property_name: str, recursive: bool = False) -> Result[bool, ZFSException]:
        try:
            self._logger.info(f"Inheriting property {property_name} on dataset: {name} (recursive={recursive})")

            validate_name(name)
            check_inheritable(property_name)
            if not self._cache.exists(name):
                raise NotFoundError(name)

            command_args = ["inherit"]
            if recursive:
                command_args.append("-r")
            command_args.extend([property_name, name])
            self._mutate(command_args, [name])

            return Result.success(True)

        except ZFSException as e:
            return self._failed(f"inherit {property_name} on", name, e)

    def children(self, name: str, recursive: bool = False) -> Result[List[str], ZFSException]:
        """Names of descendant filesystems and volumes, direct children only unless ``recursive``."""
        try:
            validate_name(name)
            if is_snapshot_name(name):
                raise InvalidNameError(name, "snapshots have no children")
            if not self._cache.exists(name):
                raise NotFoundError(name)

            depth = name.count('/')
            found = [
                key for key, _ in self._cache.subtree(name)
                if key != name and not is_snapshot_name(key)
                and (recursive or key.count('/') == depth + 1)
            ]
            return Result.success(found)

        except ZFSException as e:
            return self._failed("list children of", name, e)
