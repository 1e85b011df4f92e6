"""Configuration settings dataclasses."""
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class FailureModelSettings:
    """Settings for the node probability-of-failure model."""
    strategy: str = "capacity"  # "capacity" or "area_density"
    node_max_pf: float = 0.99999
    
    # Capacity strategy (1206x4 array with padding)
    crossings_per_jumper: int = 7
    jumper_cell_width: float = 5.0  # mm
    jumper_cell_height: float = 5.5  # mm
    
    # Area density strategy
    crossing_density: float = 1.0  # tolerated crossings^2 per mm^2
    
    def validate(self) -> List[str]:
        """Validate settings and return list of errors."""
        errors = []
        
        if self.strategy not in ("capacity", "area_density"):
            errors.append("strategy must be 'capacity' or 'area_density'")
        
        if not 0.0 < self.node_max_pf < 1.0:
            errors.append("node_max_pf must be in (0, 1)")
        
        if self.crossings_per_jumper <= 0:
            errors.append("crossings_per_jumper must be positive")
        
        if self.jumper_cell_width <= 0 or self.jumper_cell_height <= 0:
            errors.append("jumper cell dimensions must be positive")
        
        if self.crossing_density <= 0:
            errors.append("crossing_density must be positive")
        
        return errors


@dataclass
class SectionOptimizerSettings:
    """Settings for section-based local re-optimization."""
    expansion_degrees: int = 3
    max_sections: int = 50
    swap_attempts_per_section: int = 200
    min_pf_to_optimize: float = 0.0
    shuffle_seed: int = 0
    max_iterations: int = 100_000
    
    def validate(self) -> List[str]:
        """Validate settings and return list of errors."""
        errors = []
        
        if self.expansion_degrees < 0:
            errors.append("expansion_degrees must be non-negative")
        
        if self.max_sections <= 0:
            errors.append("max_sections must be positive")
        
        if self.swap_attempts_per_section < 0:
            errors.append("swap_attempts_per_section must be non-negative")
        
        if self.max_iterations <= 0:
            errors.append("max_iterations must be positive")
        
        return errors


@dataclass
class HyperGraphSettings:
    """Settings for the tiled hypergraph jumper router."""
    pattern_type: str = "single_1206x4"
    orientation: str = "vertical"
    trace_width: float = 0.15  # mm
    bounds_tolerance: float = 0.4  # mm
    offset_point_inside_region: float = 0.02  # mm
    collinear_offset_distance: float = 0.5  # mm
    max_iterations: int = 1_000_000
    path_solver_iteration_multiplier: int = 3
    
    # Grid generation
    outer_padding: float = 0.4  # mm
    parallel_traces_under_jumper_count: int = 3
    channel_point_count: int = 3
    regions_between_pads: bool = True
    
    def validate(self) -> List[str]:
        """Validate settings and return list of errors."""
        errors = []
        
        if self.orientation not in ("horizontal", "vertical"):
            errors.append("orientation must be 'horizontal' or 'vertical'")
        
        if self.trace_width <= 0:
            errors.append("trace_width must be positive")
        
        if self.bounds_tolerance < 0:
            errors.append("bounds_tolerance must be non-negative")
        
        if self.offset_point_inside_region <= 0:
            errors.append("offset_point_inside_region must be positive")
        
        if self.max_iterations <= 0:
            errors.append("max_iterations must be positive")
        
        if self.channel_point_count <= 0:
            errors.append("channel_point_count must be positive")
        
        return errors


@dataclass
class KeepoutSettings:
    """Settings for keepout-constrained draw position correction."""
    search_steps: int = 20
    extended_search_steps: int = 60
    extended_range_factor: float = 1.5
    trapped_clearance_ratio: float = 0.15
    epsilon: float = 0.0001
    
    def validate(self) -> List[str]:
        """Validate settings and return list of errors."""
        errors = []
        
        if self.search_steps <= 0 or self.extended_search_steps <= 0:
            errors.append("search step counts must be positive")
        
        if self.extended_range_factor < 1.0:
            errors.append("extended_range_factor must be at least 1.0")
        
        if not 0.0 <= self.trapped_clearance_ratio <= 1.0:
            errors.append("trapped_clearance_ratio must be in [0, 1]")
        
        return errors


@dataclass
class LoggingSettings:
    """Settings for logging configuration."""
    level: str = "INFO"
    console_output: bool = True
    file_output: bool = False
    log_file: str = "logs/jumperroute.log"
    max_file_size_mb: int = 10
    backup_count: int = 5
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    component_levels: Dict[str, str] = field(default_factory=dict)
    
    def validate(self) -> List[str]:
        """Validate logging settings."""
        errors = []
        
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            errors.append(f"level must be one of {valid_levels}")
        
        for component, level in self.component_levels.items():
            if level.upper() not in valid_levels:
                errors.append(f"component level for {component} must be one of {valid_levels}")
        
        if self.max_file_size_mb <= 0:
            errors.append("max_file_size_mb must be positive")
        
        return errors


@dataclass
class ApplicationSettings:
    """Top-level application settings container."""
    failure_model: FailureModelSettings = field(default_factory=FailureModelSettings)
    section_optimizer: SectionOptimizerSettings = field(default_factory=SectionOptimizerSettings)
    hypergraph: HyperGraphSettings = field(default_factory=HyperGraphSettings)
    keepout: KeepoutSettings = field(default_factory=KeepoutSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    
    version: str = "0.1.0"
    config_version: int = 1
    
    def validate(self) -> Dict[str, List[str]]:
        """Validate all settings categories."""
        return {
            'failure_model': self.failure_model.validate(),
            'section_optimizer': self.section_optimizer.validate(),
            'hypergraph': self.hypergraph.validate(),
            'keepout': self.keepout.validate(),
            'logging': self.logging.validate(),
        }
