from .structured_logger import OperationLogger, StructuredFormatter, StructuredLogger

__all__ = ["StructuredLogger", "StructuredFormatter", "OperationLogger"]
