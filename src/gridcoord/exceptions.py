"""Custom exceptions for the grid demand coordinator."""

class GridError(Exception):
    """Base exception for grid coordinator errors."""
    pass

class DemandError(GridError):
    """Exception raised for demand-request errors."""
    pass

class InvalidRequestClassError(DemandError):
    """Exception raised when a request names an unknown consumer class."""
    pass

class ValidationError(GridError):
    """Base exception for validation errors."""
    pass

class ValidationTypeError(ValidationError):
    """Exception raised for type validation errors."""
    pass

class ValidationRangeError(ValidationError):
    """Exception raised for range validation errors."""
    pass

class SubstationError(GridError):
    """Exception raised for substation-related errors."""
    pass

class SubstationNotFoundError(SubstationError):
    """Exception raised when a substation is not found."""
    pass

class DuplicateSubstationError(SubstationError, ValidationError):
    """Exception raised when a substation id is registered twice."""
    pass

class ConfigurationError(GridError):
    """Exception raised for configuration errors."""
    pass

class AnalysisError(GridError):
    """Exception raised when allocation analysis cannot be completed."""
    pass
