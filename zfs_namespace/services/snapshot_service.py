from typing import List

from ..core.exceptions.zfs_exceptions import (
    ZFSException,
    NotFoundError,
    AlreadyExistsError,
)
from ..core.exceptions.validation_exceptions import InvalidNameError
from ..core.properties import ABSENT
from ..core.result import Result
from ..core.value_objects.dataset_name import (
    append,
    is_snapshot_name,
    parent,
    pool_of,
    snapshot_rename_target,
    split_snapshot,
    validate_name,
)
from .base_service import BaseService


def _require_snapshot(name: str) -> str:
    validate_name(name)
    if not is_snapshot_name(name):
        raise InvalidNameError(name, "not a snapshot name")
    return name


class SnapshotService(BaseService):
    """Snapshot, clone and promote operations."""

    def snapshot(self, base: str, tag: str, recursive: bool = False) -> Result[str, ZFSException]:
        """Take ``base@tag``; ``recursive`` snapshots every descendant atomically."""
        try:
            self._logger.info(f"Creating snapshot: {base}@{tag} (recursive={recursive})")

            validate_name(base)
            stripped = tag[1:] if tag.startswith('@') else tag
            if not stripped or '/' in stripped or '@' in stripped:
                raise InvalidNameError(f"{base}@{tag}", "malformed snapshot tag")
            name = append(base, '@' + stripped)

            if not self._cache.exists(base):
                raise NotFoundError(base, "no such filesystem")
            if self._cache.exists(name):
                raise AlreadyExistsError(name)

            command_args = ["snapshot"]
            if recursive:
                command_args.append("-r")
            command_args.append(name)
            self._mutate(command_args, [base])

            self._logger.info(f"Successfully created snapshot: {name}")
            return Result.success(name)

        except ZFSException as e:
            return self._failed("snapshot", base, e)

    def snapshots(self, base: str) -> Result[List[str], ZFSException]:
        """Snapshots of ``base``, oldest first."""
        try:
            validate_name(base)
            if is_snapshot_name(base):
                raise InvalidNameError(base, "snapshots have no snapshots")
            if not self._cache.exists(base):
                raise NotFoundError(base, "no such filesystem")

            found = [
                (key, props) for key, props in self._cache.subtree(base)
                if is_snapshot_name(key) and split_snapshot(key)[0] == base
            ]
            found.sort(key=lambda item: int(item[1].get('createtxg', '0') or 0))
            return Result.success([key for key, _ in found])

        except ZFSException as e:
            return self._failed("list snapshots of", base, e)

    def rename(self, name: str, new_tag: str, recursive: bool = False) -> Result[str, ZFSException]:
        """Change the tag of a snapshot; it never moves to another dataset."""
        try:
            self._logger.info(f"Renaming snapshot: {name} -> {new_tag} (recursive={recursive})")

            _require_snapshot(name)
            new_name = snapshot_rename_target(name, new_tag)

            if not self._cache.exists(name):
                raise NotFoundError(name)
            if self._cache.exists(new_name):
                raise AlreadyExistsError(new_name)

            command_args = ["rename"]
            if recursive:
                command_args.append("-r")
            command_args.extend([name, new_name])

            base = split_snapshot(name)[0]
            affected = [base] if recursive else [name, new_name]
            self._mutate(command_args, affected)

            self._logger.info(f"Successfully renamed snapshot: {name} -> {new_name}")
            return Result.success(new_name)

        except ZFSException as e:
            return self._failed("rename", name, e)

    def clone(self, name: str, target: str, parents: bool = False) -> Result[str, ZFSException]:
        """Create a writable dataset ``target`` whose origin is snapshot ``name``."""
        try:
            self._logger.info(f"Cloning snapshot: {name} -> {target} (parents={parents})")

            _require_snapshot(name)
            validate_name(target)
            if is_snapshot_name(target):
                raise InvalidNameError(target, "clone target cannot be a snapshot")
            if pool_of(target) != pool_of(name):
                raise InvalidNameError(target, "clones must live in the pool of their origin")

            if not self._cache.exists(name):
                raise NotFoundError(name)
            if self._cache.exists(target):
                raise AlreadyExistsError(target)
            target_parent = parent(target)
            if not parents and target_parent is not None and not self._cache.exists(target_parent):
                raise NotFoundError(target_parent, "parent does not exist")

            command_args = ["clone"]
            if parents:
                command_args.append("-p")
            command_args.extend([name, target])

            affected = [pool_of(target)] if parents else [target, name]
            self._mutate(command_args, affected)

            self._logger.info(f"Successfully cloned snapshot: {name} -> {target}")
            return Result.success(target)

        except ZFSException as e:
            return self._failed("clone", name, e)

    def promote(self, name: str) -> Result[str, ZFSException]:
        """Reverse the clone/origin dependency of clone ``name``."""
        try:
            self._logger.info(f"Promoting dataset: {name}")

            validate_name(name)
            if is_snapshot_name(name):
                raise InvalidNameError(name, "snapshots cannot be promoted")
            props = self._cache.properties(name)
            if not props:
                raise NotFoundError(name)
            origin = props.get('origin', ABSENT)
            if not origin or origin == ABSENT:
                raise NotFoundError(name, "filesystem is not a clone")

            origin_fs = split_snapshot(origin)[0]
            # Other clones of the migrating snapshots get a new origin as well
            sibling_clones = [
                key for key, key_props in self._cache.subtree(pool_of(name))
                if key_props.get('origin', ABSENT).startswith(origin_fs + '@')
            ]
            self._mutate(["promote", name], [name, origin_fs] + sibling_clones)

            self._logger.info(f"Successfully promoted dataset: {name} (former origin {origin})")
            return Result.success(name)

        except ZFSException as e:
            return self._failed("promote", name, e)
