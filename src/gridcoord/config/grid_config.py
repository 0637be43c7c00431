"""
Main grid configuration class that integrates all configuration components.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
import logging

from .base import BaseConfig, ConfigValidationResult, ValidationLevel
from ..exceptions import ConfigurationError


DEFAULT_MAINTENANCE_SECONDS = 3600

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class SubstationConfig:
    """Configuration for one substation."""
    id: str
    capacity_mw: float
    
    def validate(self) -> ConfigValidationResult:
        """Validate substation configuration."""
        result = ConfigValidationResult(is_valid=True)
        
        if not self.id:
            result.add_error("Substation id cannot be empty")
        
        if not isinstance(self.capacity_mw, (int, float)) or self.capacity_mw <= 0:
            result.add_error(f"Capacity must be > 0 MW, got {self.capacity_mw}")
        
        return result


@dataclass
class MaintenanceConfig:
    """Configuration for maintenance windows."""
    default_duration_seconds: int = DEFAULT_MAINTENANCE_SECONDS
    
    def validate(self) -> ConfigValidationResult:
        """Validate maintenance configuration."""
        result = ConfigValidationResult(is_valid=True)
        
        if self.default_duration_seconds <= 0:
            result.add_error(
                f"Default maintenance duration must be > 0, got {self.default_duration_seconds}"
            )
        
        return result


@dataclass
class MonitoringConfig:
    """Configuration for logging and history retention."""
    log_level: str = "INFO"
    log_file: Optional[str] = None
    max_history: int = 1000
    
    def validate(self) -> ConfigValidationResult:
        """Validate monitoring configuration."""
        result = ConfigValidationResult(is_valid=True)
        
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            result.add_error(f"Invalid log level: {self.log_level}")
        
        if self.max_history <= 0:
            result.add_error(f"Max history must be > 0, got {self.max_history}")
        
        return result


@dataclass
class GridConfig(BaseConfig):
    """Main grid configuration class."""
    
    name: str = "Smart Grid"
    substations: List[SubstationConfig] = field(default_factory=list)
    maintenance: MaintenanceConfig = field(default_factory=MaintenanceConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    validation_level: ValidationLevel = ValidationLevel.STRICT
    config_version: str = "1.0"
    
    def __post_init__(self):
        """Initialize after dataclass creation."""
        super().__init__()
        if isinstance(self.validation_level, str):
            try:
                self.validation_level = ValidationLevel(self.validation_level.lower())
            except ValueError:
                raise ConfigurationError(f"Unknown validation level: {self.validation_level}")
        self._setup_logging()
    
    @classmethod
    def default(cls) -> 'GridConfig':
        """The stock three-substation grid."""
        return cls(substations=[
            SubstationConfig("S01", 50.0),
            SubstationConfig("S02", 40.0),
            SubstationConfig("S03", 60.0),
        ])
    
    def _setup_logging(self):
        """Setup logging based on monitoring configuration."""
        logger = logging.getLogger("gridcoord")
        level = getattr(logging, self.monitoring.log_level, None)
        if isinstance(level, int):
            logger.setLevel(level)
        
        formatter = logging.Formatter(LOG_FORMAT)
        
        # Console handler
        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)
        
        # File handler if specified
        if self.monitoring.log_file:
            known = {
                getattr(h, "baseFilename", None) for h in logger.handlers
                if isinstance(h, logging.FileHandler)
            }
            file_handler = logging.FileHandler(self.monitoring.log_file)
            if file_handler.baseFilename in known:
                file_handler.close()
            else:
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)
    
    def validate(self) -> ConfigValidationResult:
        """Validate the entire grid configuration."""
        result = ConfigValidationResult(is_valid=True)
        
        if not self.name:
            result.add_error("Grid name cannot be empty")
        
        result.merge(self.maintenance.validate(), "maintenance: ")
        result.merge(self.monitoring.validate(), "monitoring: ")
        
        if not self.substations:
            result.add_warning("No substations configured; every demand will be shed")
        
        substation_ids = set()
        for substation in self.substations:
            if substation.id in substation_ids:
                result.add_error(f"Duplicate substation id: {substation.id}")
            substation_ids.add(substation.id)
            result.merge(substation.validate(), f"substation '{substation.id}': ")
        
        return result
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "name": self.name,
            "substations": [
                {"id": s.id, "capacity_mw": s.capacity_mw}
                for s in self.substations
            ],
            "maintenance": {
                "default_duration_seconds": self.maintenance.default_duration_seconds
            },
            "monitoring": {
                "log_level": self.monitoring.log_level,
                "log_file": self.monitoring.log_file,
                "max_history": self.monitoring.max_history
            },
            "validation_level": self.validation_level.value,
            "config_version": self.config_version
        }
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridConfig':
        """Create configuration from dictionary."""
        try:
            substations = [
                SubstationConfig(
                    id=str(substation_data["id"]),
                    capacity_mw=substation_data["capacity_mw"]
                )
                for substation_data in data.get("substations", [])
            ]
        except (KeyError, TypeError) as e:
            raise ConfigurationError(f"Malformed substation entry: {e}")
        
        maintenance_data = data.get("maintenance", {})
        maintenance = MaintenanceConfig(
            default_duration_seconds=maintenance_data.get(
                "default_duration_seconds", DEFAULT_MAINTENANCE_SECONDS
            )
        )
        
        monitoring_data = data.get("monitoring", {})
        monitoring = MonitoringConfig(
            log_level=monitoring_data.get("log_level", "INFO"),
            log_file=monitoring_data.get("log_file"),
            max_history=monitoring_data.get("max_history", 1000)
        )
        
        return cls(
            name=data.get("name", "Smart Grid"),
            substations=substations,
            maintenance=maintenance,
            monitoring=monitoring,
            validation_level=data.get("validation_level", ValidationLevel.STRICT.value),
            config_version=data.get("config_version", "1.0")
        )
    
    def add_substation(self, substation_id: str, capacity_mw: float) -> None:
        """Add a substation to the configuration."""
        self.substations.append(SubstationConfig(substation_id, capacity_mw))
    
    def get_substation(self, substation_id: str) -> Optional[SubstationConfig]:
        """Get a substation configuration by id."""
        for substation in self.substations:
            if substation.id == substation_id:
                return substation
        return None
    
    def validate_and_log(self) -> bool:
        """Validate configuration and log results."""
        result = self.validate()
        
        logger = logging.getLogger("gridcoord.config")
        
        if result.is_valid:
            logger.info("Configuration validation passed")
        else:
            logger.error("Configuration validation failed")
            for error in result.errors:
                logger.error(f"Validation error: {error}")
        
        for warning in result.warnings:
            logger.warning(f"Validation warning: {warning}")
        
        return result.is_valid
