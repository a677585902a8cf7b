from datetime import datetime, timezone
from pathlib import PurePosixPath

import pytest

from zfs_namespace.core.exceptions.validation_exceptions import InvalidArgumentError
from zfs_namespace.core.properties import check_inheritable, format_property, read_property


class TestReadProperty:
    """Typed reads of raw property values."""

    def test_absent_values_read_as_none(self):
        assert read_property('origin', '-') is None
        assert read_property('used', None) is None

    def test_sizes_and_integers(self):
        assert read_property('used', '1024') == 1024
        assert read_property('copies', '2') == 2
        assert read_property('quota', 'none') == 'none'

    def test_booleans(self):
        assert read_property('compression', 'off') is False
        assert read_property('mounted', 'yes') is True
        assert read_property('compression', 'lz4') == 'lz4'

    def test_float_date_and_path(self):
        assert read_property('compressratio', '1.50x') == 1.5
        assert read_property('creation', '0') == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert read_property('mountpoint', '/tank/fs') == PurePosixPath('/tank/fs')
        assert read_property('mountpoint', 'legacy') == 'legacy'

    def test_snapshot_resolution(self):
        resolved = read_property('origin', 'tank/a@s', resolve_snapshot=lambda name: ('handle', name))

        assert resolved == ('handle', 'tank/a@s')
        assert read_property('origin', 'tank/a@s') == 'tank/a@s'

    def test_user_property_is_raw(self):
        assert read_property('com.example:note', 'hello') == 'hello'


class TestFormatProperty:
    """Validation of property writes."""

    def test_boolean_values(self):
        assert format_property('compression', True) == 'on'
        assert format_property('compression', False) == 'off'
        assert format_property('compression', 'lz4') == 'lz4'

    def test_sizes(self):
        assert format_property('quota', '10G') == str(10 * 1024 ** 3)
        assert format_property('quota', 'none') == 'none'

    def test_integers(self):
        assert format_property('copies', 2) == '2'
        with pytest.raises(InvalidArgumentError):
            format_property('copies', 5)

    @pytest.mark.parametrize("name,value", [
        ('compression', 'bogus'),
        ('used', 5),
        ('mountpoint', 'relative/path'),
        ('nosuchproperty', 'x'),
        ('com.example:note', 'two\nlines'),
    ])
    def test_rejected_values(self, name, value):
        with pytest.raises(InvalidArgumentError):
            format_property(name, value)

    def test_create_only_properties(self):
        with pytest.raises(InvalidArgumentError):
            format_property('casesensitivity', 'mixed')
        assert format_property('casesensitivity', 'mixed', at_creation=True) == 'mixed'

    def test_user_properties_pass_through(self):
        assert format_property('com.example:note', 'hello') == 'hello'


class TestCheckInheritable:

    def test_inheritable(self):
        check_inheritable('compression')
        check_inheritable('com.example:note')

    @pytest.mark.parametrize("name", ['quota', 'used', 'nosuchproperty'])
    def test_not_inheritable(self, name):
        with pytest.raises(InvalidArgumentError):
            check_inheritable(name)
