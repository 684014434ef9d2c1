"""Configuration file loader with validation"""

import yaml
import os
from pathlib import Path
from typing import Dict, Any, Optional
from .errors import ConfigurationError

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "analysis.yaml"

REQUIRED_KEYS = ['version', 'dataset', 'problems']


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load YAML configuration file with validation.
    ANALYSIS_CONFIG overrides the default location, DATASET_PATH
    overrides dataset.path.

    Args:
        config_path: Path to configuration file

    Returns:
        Dictionary with configuration

    Raises:
        ConfigurationError: If file doesn't exist, is invalid YAML or misses keys
    """
    if config_path is None:
        config_path = os.getenv("ANALYSIS_CONFIG", str(DEFAULT_CONFIG_PATH))

    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration must be a mapping: {config_path}")

    # Validate required keys
    missing_keys = [key for key in REQUIRED_KEYS if key not in config]

    if missing_keys:
        raise ConfigurationError(f"Missing required configuration keys: {missing_keys}")

    dataset_override = os.getenv("DATASET_PATH")
    if dataset_override:
        config['dataset'] = {**(config.get('dataset') or {}), 'path': dataset_override}

    return config


def save_config(config_path: str, config: Dict[str, Any]) -> None:
    """
    Save configuration to YAML file

    Args:
        config_path: Path to configuration file
        config: Configuration dictionary

    Raises:
        ConfigurationError: If unable to write file
    """
    try:
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w') as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)

    except OSError as e:
        raise ConfigurationError(f"Error saving configuration: {e}")


def get_problem_config(config: Dict[str, Any], problem_id: str) -> Dict[str, Any]:
    """
    Get parameters for one problem statement

    Args:
        config: Full configuration dictionary
        problem_id: Problem statement id (e.g. "q1_top_cities")

    Returns:
        Parameter dictionary (empty when the problem has no overrides)
    """
    problems = config.get('problems') or {}
    return dict(problems.get(problem_id) or {})


def get_dataset_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Dataset section of the configuration"""
    return dict(config.get('dataset') or {})
