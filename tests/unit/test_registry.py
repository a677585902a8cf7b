import pytest

from zfs_namespace.core.entities.dataset import Filesystem, Snapshot, Volume
from zfs_namespace.core.exceptions.validation_exceptions import InvalidArgumentError, InvalidNameError
from zfs_namespace.core.exceptions.zfs_exceptions import NotFoundError, UnknownTypeError


class TestLookup:
    """Test suite for name and mountpoint resolution."""

    def test_get_returns_typed_handles(self, zfs, fake_zfs):
        fake_zfs.add("tank/vol", "volume", volsize="1048576")
        fake_zfs.add("tank/fs1@s1", "snapshot")

        assert isinstance(zfs["tank/fs1"], Filesystem)
        assert isinstance(zfs["tank/vol"], Volume)
        assert isinstance(zfs["tank/fs1@s1"], Snapshot)
        assert zfs.resolve("tank/fs1") == zfs.get("tank/fs1")

    def test_missing_dataset_is_none(self, zfs):
        assert zfs["tank/missing"] is None
        assert not zfs.exists("tank/missing")

    def test_unknown_type(self, zfs, fake_zfs):
        fake_zfs.add("tank/odd", "bookmark")

        with pytest.raises(UnknownTypeError):
            zfs["tank/odd"]

    def test_invalid_name(self, zfs):
        with pytest.raises(InvalidNameError):
            zfs["tank//fs1"]

    def test_mountpoint_lookup(self, zfs):
        assert zfs["/tank/fs1"] == zfs["tank/fs1"]
        assert zfs["/tank/fs1/../fs1/"] == zfs["tank/fs1"]

    def test_mountpoint_lookup_with_find_parent(self, zfs):
        assert zfs["/tank/fs1/dir1"] is None
        assert zfs["/tank/fs1/dir1", True] == zfs["tank/fs1"]
        assert zfs.get("/tank/fs1/dir1/deeper", find_parent=True) == zfs["tank/fs1"]
        assert zfs["/nowhere/deep", True] is None

    def test_zoned_datasets_are_not_mountpoints(self, zfs, fake_zfs):
        fake_zfs.datasets["tank/fs1"]["zoned"] = "on"

        assert zfs["/tank/fs1"] is None
        assert zfs["/tank/fs1", True] == zfs["tank"]
        assert "/tank/fs1" not in dict(zfs.mountpoints())

    def test_jailed_datasets_are_not_mountpoints(self, zfs, fake_zfs):
        fake_zfs.datasets["tank/fs1"]["jailed"] = "on"

        assert zfs["/tank/fs1"] is None
        assert zfs["/tank/fs1/dir", True] == zfs["tank"]
        assert set(dict(zfs.mountpoints())) == {"/tank", "/backup"}

    def test_leading_double_slash(self, zfs):
        assert zfs["//tank/fs1"] == zfs["tank/fs1"]
        assert zfs.get("//tank/fs1/dir", find_parent=True) == zfs["tank/fs1"]
        assert zfs["//nowhere/deep", True] is None
        assert zfs["///", True] is None


class TestListings:
    """Test suite for filesystems, mountpoints and pools."""

    def test_filesystems(self, zfs):
        assert sorted(handle.name for handle in zfs.filesystems()) == ["backup", "tank", "tank/fs1"]

    def test_filesystems_is_restartable(self, zfs, fake_zfs):
        listing = zfs.filesystems()
        assert len(listing) == 3

        fake_zfs.add("tank/new")
        zfs.invalidate()

        assert "tank/new" in [handle.name for handle in listing]

    def test_mountpoints(self, zfs, fake_zfs):
        fake_zfs.add("tank/vol", "volume", volsize="1048576")

        mountpoints = dict(zfs.mountpoints())

        assert mountpoints["/tank/fs1"] == zfs["tank/fs1"]
        assert set(mountpoints) == {"/tank", "/tank/fs1", "/backup"}

    def test_pools(self, zfs, fake_zfs):
        pools = list(zfs.pools())

        assert [pool.name for pool in pools] == ["tank", "backup"]
        assert fake_zfs.calls[-1] == ["zpool", "list", "-H", "-o", "name"]


class TestRegistryCreate:
    """Test suite for ZFS.create."""

    def test_create(self, zfs):
        created = zfs.create("tank/fs2")

        assert isinstance(created, Filesystem)
        assert created.name == "tank/fs2"
        assert created.exists()

    def test_create_existing_returns_none(self, zfs, fake_zfs):
        assert zfs.create("tank/fs1") is None
        assert "create" not in fake_zfs.subcommands()

    def test_create_volume(self, zfs):
        volume = zfs.create("tank/vol", volume="1G")

        assert isinstance(volume, Volume)
        assert volume.size.bytes == 1024 ** 3

    @pytest.mark.parametrize("name", ["tank", "tank/fs1@s1"])
    def test_create_needs_parent_segment(self, zfs, name):
        with pytest.raises(InvalidNameError):
            zfs.create(name)

    def test_create_missing_parent(self, zfs):
        with pytest.raises(NotFoundError):
            zfs.create("tank/a/b")
        assert isinstance(zfs.create("tank/a/b", parents=True), Filesystem)

    def test_create_unknown_option(self, zfs):
        with pytest.raises(InvalidArgumentError):
            zfs.create("tank/fs2", recursive=True)
