"""
Configuration package for the grid demand coordinator.
"""

from .base import (
    BaseConfig,
    ConfigFormat,
    ValidationLevel,
    ConfigValidationResult
)

from .grid_config import (
    SubstationConfig,
    MaintenanceConfig,
    MonitoringConfig,
    GridConfig,
    DEFAULT_MAINTENANCE_SECONDS
)

__all__ = [
    # Base configuration classes
    "BaseConfig",
    "ConfigFormat",
    "ValidationLevel",
    "ConfigValidationResult",
    
    # Grid configuration components
    "SubstationConfig",
    "MaintenanceConfig",
    "MonitoringConfig",
    "DEFAULT_MAINTENANCE_SECONDS",
    
    # Main configuration class
    "GridConfig"
]
