from typing import Dict, Any, Optional

from .zfs_exceptions import ZFSException


class ValidationException(ZFSException):
    """Base validation exception, raised before any external state is touched"""
    
    def __init__(self, message: str, field: Optional[str] = None, value: Optional[Any] = None,
                 error_code: str = "VALIDATION_ERROR"):
        super().__init__(message, error_code=error_code, details={'field': field, 'value': value})
        self.field = field
        self.value = value
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization"""
        result = super().to_dict()
        result['field'] = self.field
        result['value'] = self.value
        return result


class InvalidNameError(ValidationException):
    """Dataset name or snapshot syntax is malformed"""
    
    def __init__(self, dataset_name: str, reason: str):
        super().__init__(f"Invalid dataset name '{dataset_name}': {reason}", 'dataset_name', dataset_name,
                         error_code="INVALID_NAME")
        self.dataset_name = dataset_name
        self.reason = reason


class InvalidArgumentError(ValidationException):
    """Conflicting or cross-filesystem option values"""
    
    def __init__(self, message: str, parameter: Optional[str] = None, value: Optional[Any] = None):
        super().__init__(message, parameter, value, error_code="INVALID_ARGUMENT")
        self.parameter = parameter
