from typing import Dict, Any, Optional, Sequence


class ZFSException(Exception):
    """Base exception for all dataset namespace operations"""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization"""
        return {
            'error_type': self.__class__.__name__,
            'message': str(self),
            'error_code': self.error_code,
            'details': self.details
        }


class DatasetException(ZFSException):
    """Dataset-related exceptions"""
    pass


class NotFoundError(DatasetException):
    """Target dataset is absent where presence is required"""
    
    def __init__(self, dataset_name: str, reason: str = ""):
        message = f"Dataset '{dataset_name}' not found"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            error_code="DATASET_NOT_FOUND",
            details={"dataset_name": dataset_name, "reason": reason}
        )
        self.dataset_name = dataset_name


class AlreadyExistsError(DatasetException):
    """Target dataset is present where absence is required"""
    
    def __init__(self, dataset_name: str):
        super().__init__(
            f"Dataset '{dataset_name}' already exists",
            error_code="DATASET_ALREADY_EXISTS",
            details={"dataset_name": dataset_name}
        )
        self.dataset_name = dataset_name


class UnknownTypeError(DatasetException):
    """Dataset manager reported a type other than filesystem, snapshot or volume"""
    
    def __init__(self, dataset_name: str, dataset_type: Optional[str]):
        super().__init__(
            f"Dataset '{dataset_name}' has unknown type '{dataset_type}'",
            error_code="UNKNOWN_TYPE",
            details={"dataset_name": dataset_name, "type": dataset_type}
        )
        self.dataset_type = dataset_type


class ExecutionFailureError(ZFSException):
    """An external command failed or produced unexpected output.
    
    The external state may be inconsistent afterwards, so this is never
    retried automatically.
    """
    
    def __init__(self, argv: Sequence[str], returncode: int = 1,
                 stdout: Sequence[str] = (), stderr: Sequence[str] = (), reason: str = ""):
        command = " ".join(argv)
        message = f"Command failed (exit code {returncode}): {command}"
        if reason:
            message += f": {reason}"
        if stderr:
            message += "\nError: " + "\n".join(stderr)
        super().__init__(
            message,
            error_code="EXECUTION_FAILURE",
            details={
                "command": command,
                "exit_code": returncode,
                "stdout": list(stdout),
                "stderr": list(stderr),
                "reason": reason
            }
        )
        self.argv = list(argv)
        self.returncode = returncode
        self.stdout = list(stdout)
        self.stderr = list(stderr)
