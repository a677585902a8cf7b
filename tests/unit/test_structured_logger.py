import json

from zfs_namespace.infrastructure.logging.structured_logger import OperationLogger, StructuredLogger


def _records(capsys):
    return [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]


class TestStructuredLogger:
    """Test suite for the JSON logger."""

    def test_emits_json_with_extra_fields(self, capsys):
        logger = StructuredLogger(name="zfs_namespace.test_json", level="DEBUG")

        logger.info("Dataset created", {"dataset": "tank/fs1"})

        record, = _records(capsys)
        assert record["level"] == "INFO"
        assert record["logger"] == "zfs_namespace.test_json"
        assert record["message"] == "Dataset created"
        assert record["dataset"] == "tank/fs1"
        assert "timestamp" in record

    def test_respects_level(self, capsys):
        logger = StructuredLogger(name="zfs_namespace.test_level", level="WARNING")

        logger.info("hidden")
        logger.warning("shown")

        assert [record["message"] for record in _records(capsys)] == ["shown"]

    def test_persistent_context(self, capsys):
        logger = StructuredLogger(name="zfs_namespace.test_context", context={"host": "storage01"})
        logger.add_context("pool", "tank")

        logger.info("first")
        logger.remove_context("pool")
        logger.info("second")

        first, second = _records(capsys)
        assert first["host"] == "storage01" and first["pool"] == "tank"
        assert "pool" not in second

    def test_unserializable_values_are_stringified(self, capsys):
        logger = StructuredLogger(name="zfs_namespace.test_repr")

        logger.info("odd", {"value": {1, 2}})

        record, = _records(capsys)
        assert isinstance(record["value"], str)


class TestOperationLogger:
    """Test suite for operation tracking."""

    def test_completed_operation(self, capsys):
        logger = OperationLogger(name="zfs_namespace.test_operation")

        logger.start_operation("send", snapshot="tank/fs1@s1")
        logger.complete_operation(received="backup/fs1@s1")

        started, completed = _records(capsys)
        assert started["message"] == "Starting operation: send"
        assert started["snapshot"] == "tank/fs1@s1"
        assert started["operation_type"] == "send"
        assert completed["success"] is True
        assert completed["received"] == "backup/fs1@s1"
        assert completed["duration_seconds"] >= 0
        assert logger.operation_type is None

    def test_failed_operation(self, capsys):
        logger = OperationLogger(name="zfs_namespace.test_failure")

        logger.start_operation("send")
        logger.fail_operation("destination exists", error_code="ALREADY_EXISTS")
        logger.info("afterwards")

        _, failed, afterwards = _records(capsys)
        assert failed["level"] == "WARNING"
        assert failed["success"] is False
        assert failed["error"] == "destination exists"
        assert failed["error_code"] == "ALREADY_EXISTS"
        assert "operation_type" not in afterwards

    def test_complete_without_start_is_silent(self, capsys):
        logger = OperationLogger(name="zfs_namespace.test_idle")

        logger.complete_operation()

        assert _records(capsys) == []
