"""Configuration management."""
from .config_manager import ConfigManager, get_config, initialize_config
from .settings import (
    FailureModelSettings, SectionOptimizerSettings, HyperGraphSettings,
    KeepoutSettings, LoggingSettings, ApplicationSettings
)

__all__ = [
    'ConfigManager', 'get_config', 'initialize_config',
    'FailureModelSettings', 'SectionOptimizerSettings', 'HyperGraphSettings',
    'KeepoutSettings', 'LoggingSettings', 'ApplicationSettings'
]
