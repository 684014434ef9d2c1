"""Utility modules"""

from .config_loader import load_config, save_config, get_problem_config, get_dataset_config
from .errors import (
    CardInsightsError,
    ConfigurationError,
    DatasetLoadError,
    DatasetValidationError,
    AnalysisError
)

__all__ = [
    "load_config",
    "save_config",
    "get_problem_config",
    "get_dataset_config",
    "CardInsightsError",
    "ConfigurationError",
    "DatasetLoadError",
    "DatasetValidationError",
    "AnalysisError"
]
