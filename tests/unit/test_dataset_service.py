import pytest

from zfs_namespace.core.exceptions.validation_exceptions import InvalidArgumentError, InvalidNameError
from zfs_namespace.core.exceptions.zfs_exceptions import (
    AlreadyExistsError,
    ExecutionFailureError,
    NotFoundError,
)
from zfs_namespace.models import CreateOptions


class TestDatasetQueries:

    def test_properties_and_type(self, dataset_service):
        assert dataset_service.properties("tank/fs1")['type'] == 'filesystem'
        assert dataset_service.get_type("tank/fs1") == 'filesystem'
        assert dataset_service.exists("tank/fs1")

    def test_missing_dataset(self, dataset_service):
        assert dataset_service.properties("tank/missing") is None
        assert dataset_service.get_type("tank/missing") is None
        assert not dataset_service.exists("tank/missing")


class TestCreate:
    """Test suite for DatasetService.create."""

    def test_create_filesystem(self, dataset_service, fake_zfs):
        result = dataset_service.create("tank/fs2")

        assert result.is_success
        assert result.value == "tank/fs2"
        assert fake_zfs.mutations() == [["zfs", "create", "tank/fs2"]]
        assert dataset_service.exists("tank/fs2")

    def test_create_volume_with_parents_and_properties(self, dataset_service, fake_zfs):
        options = CreateOptions(parents=True, volume="1G", properties={"compression": "lz4"})

        result = dataset_service.create("tank/a/b/vol", options)

        assert result.is_success
        assert fake_zfs.mutations() == [[
            "zfs", "create", "-p", "-V", "1073741824", "-o", "compression=lz4", "tank/a/b/vol"
        ]]
        assert dataset_service.get_type("tank/a/b/vol") == 'volume'
        assert dataset_service.exists("tank/a/b")

    def test_create_existing_fails_without_executing(self, dataset_service, fake_zfs, mock_logger):
        result = dataset_service.create("tank/fs1")

        assert result.is_failure
        assert isinstance(result.error, AlreadyExistsError)
        assert fake_zfs.mutations() == []
        mock_logger.warning.assert_called_once()

    def test_create_without_parent(self, dataset_service, fake_zfs):
        result = dataset_service.create("tank/missing/child")

        assert isinstance(result.error, NotFoundError)
        assert fake_zfs.mutations() == []

    @pytest.mark.parametrize("name", ["tank/fs1@snap", "newpool"])
    def test_create_rejects_snapshots_and_pools(self, dataset_service, name):
        result = dataset_service.create(name)

        assert isinstance(result.error, InvalidNameError)

    def test_create_below_volume(self, dataset_service, fake_zfs):
        fake_zfs.add("tank/vol", "volume", volsize="1024")

        result = dataset_service.create("tank/vol/child")

        assert isinstance(result.error, InvalidArgumentError)
        assert fake_zfs.mutations() == []

    def test_create_only_property_accepted_at_creation(self, dataset_service, fake_zfs):
        result = dataset_service.create("tank/ci", CreateOptions(properties={"casesensitivity": "mixed"}))

        assert result.is_success
        assert dataset_service.properties("tank/ci")['casesensitivity'] == 'mixed'


class TestDestroy:
    """Test suite for DatasetService.destroy."""

    def test_destroy(self, dataset_service, fake_zfs):
        result = dataset_service.destroy("tank/fs1")

        assert result.is_success
        assert not dataset_service.exists("tank/fs1")
        assert "tank/fs1" not in fake_zfs.datasets

    def test_destroy_missing(self, dataset_service):
        result = dataset_service.destroy("tank/missing")

        assert isinstance(result.error, NotFoundError)

    def test_destroy_with_children_needs_recursive(self, dataset_service, fake_zfs, mock_logger):
        fake_zfs.add("tank/fs1/child")

        result = dataset_service.destroy("tank/fs1")

        assert isinstance(result.error, ExecutionFailureError)
        assert dataset_service.exists("tank/fs1")
        mock_logger.error.assert_called_once()

        assert dataset_service.destroy("tank/fs1", recursive=True).is_success
        assert not dataset_service.exists("tank/fs1/child")
        assert fake_zfs.mutations()[-1] == ["zfs", "destroy", "-r", "tank/fs1"]

    def test_recursive_snapshot_destroy_invalidates_descendants(self, dataset_service, cache, fake_zfs):
        fake_zfs.add("tank/fs1@s", "snapshot")
        fake_zfs.add("tank/fs1/child")
        fake_zfs.add("tank/fs1/child@s", "snapshot")
        cache.properties("tank")

        result = dataset_service.destroy("tank/fs1@s", recursive=True)

        assert result.is_success
        assert not dataset_service.exists("tank/fs1@s")
        assert not dataset_service.exists("tank/fs1/child@s")
        assert dataset_service.exists("tank/fs1/child")


class TestRename:
    """Test suite for DatasetService.rename."""

    def test_rename(self, dataset_service, fake_zfs):
        result = dataset_service.rename("tank/fs1", "tank/renamed")

        assert result.value == "tank/renamed"
        assert fake_zfs.mutations() == [["zfs", "rename", "tank/fs1", "tank/renamed"]]
        assert not dataset_service.exists("tank/fs1")
        assert dataset_service.exists("tank/renamed")

    def test_rename_to_other_pool(self, dataset_service):
        result = dataset_service.rename("tank/fs1", "backup/fs1")

        assert isinstance(result.error, InvalidNameError)

    def test_rename_onto_existing(self, dataset_service, fake_zfs):
        fake_zfs.add("tank/taken")

        result = dataset_service.rename("tank/fs1", "tank/taken")

        assert isinstance(result.error, AlreadyExistsError)

    def test_rename_with_parents(self, dataset_service, fake_zfs):
        assert isinstance(dataset_service.rename("tank/fs1", "tank/x/y").error, NotFoundError)

        result = dataset_service.rename("tank/fs1", "tank/x/y", parents=True)

        assert result.is_success
        assert dataset_service.exists("tank/x")
        assert dataset_service.exists("tank/x/y")


class TestProperties:
    """Test suite for set and inherit."""

    def test_set_property(self, dataset_service, fake_zfs):
        dataset_service.properties("tank/fs1")

        result = dataset_service.set_property("tank/fs1", "compression", True)

        assert result.value == "on"
        assert fake_zfs.mutations() == [["zfs", "set", "compression=on", "tank/fs1"]]
        assert dataset_service.properties("tank/fs1")['compression'] == 'on'

    def test_set_read_only_property(self, dataset_service, fake_zfs):
        result = dataset_service.set_property("tank/fs1", "used", 5)

        assert isinstance(result.error, InvalidArgumentError)
        assert fake_zfs.mutations() == []

    def test_set_on_missing_dataset(self, dataset_service):
        result = dataset_service.set_property("tank/missing", "compression", "lz4")

        assert isinstance(result.error, NotFoundError)

    def test_set_user_property(self, dataset_service):
        assert dataset_service.set_property("tank/fs1", "com.example:owner", "ops").is_success
        assert dataset_service.properties("tank/fs1")['com.example:owner'] == 'ops'

    def test_unexpected_output_fails_and_invalidates(self, dataset_service, cache, fake_zfs):
        cache.properties("tank")
        fake_zfs.inject("set", returncode=0, stdout=["property may not take effect"])

        result = dataset_service.set_property("tank/fs1", "compression", "lz4")

        assert isinstance(result.error, ExecutionFailureError)
        assert not cache.is_loaded("tank/fs1")

    def test_inherit_property(self, dataset_service, fake_zfs):
        fake_zfs.datasets["tank"]["compression"] = "lz4"
        fake_zfs.datasets["tank/fs1"]["compression"] = "gzip"
        assert dataset_service.properties("tank/fs1")['compression'] == 'gzip'

        result = dataset_service.inherit_property("tank/fs1", "compression")

        assert result.is_success
        assert fake_zfs.mutations() == [["zfs", "inherit", "compression", "tank/fs1"]]
        assert dataset_service.properties("tank/fs1")['compression'] == 'lz4'

    def test_inherit_non_inheritable(self, dataset_service):
        result = dataset_service.inherit_property("tank/fs1", "quota")

        assert isinstance(result.error, InvalidArgumentError)


class TestChildren:

    def test_children(self, dataset_service, fake_zfs):
        fake_zfs.add("tank/fs1/a")
        fake_zfs.add("tank/fs1/a/b")
        fake_zfs.add("tank/fs1@s", "snapshot")

        assert dataset_service.children("tank/fs1").value == ["tank/fs1/a"]
        assert sorted(dataset_service.children("tank/fs1", recursive=True).value) == [
            "tank/fs1/a", "tank/fs1/a/b"
        ]

    def test_children_of_missing(self, dataset_service):
        assert isinstance(dataset_service.children("tank/missing").error, NotFoundError)
