# config_manager.py

import json
import os
from typing import Dict, Any, Optional

from rainfx.utils import resource_path

CONFIG_FILE_NAME = resource_path("config/rain_config.json")

# Default configuration used if the config file does not exist
DEFAULT_CONFIG = {
    "density": 0.00012,
    "wind": 0,
    "gravity": 1400,
    "base_dim": 0.58,
    "fps": 60,
    "pixel_scale": None,
    "show_settings": True
}


def load_config(default_config: Dict[str, Any], path: Optional[str] = None) -> Dict[str, Any]:
    """
    Attempts to load the configuration from a file.
    Returns the default configuration if the file does not exist or fails to load.

    Args:
        default_config: The baseline configuration dictionary.
        path: Config file location. Defaults to CONFIG_FILE_NAME.

    Returns:
        The loaded and merged configuration dictionary.
    """
    config_path = path or CONFIG_FILE_NAME

    if not os.path.exists(config_path):
        # Configuration file not found, use default.
        return dict(default_config)

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            loaded_data = json.load(f)

    except json.JSONDecodeError as e:
        print(f"WARNING: Malformed config file {config_path}, using defaults: {e}", flush=True)
        return dict(default_config)
    except OSError as e:
        print(f"WARNING: Could not read config file {config_path}, using defaults: {e}", flush=True)
        return dict(default_config)

    if not isinstance(loaded_data, dict):
        print(f"WARNING: Config file {config_path} does not hold an object, using defaults", flush=True)
        return dict(default_config)

    # Merge logic: Update default config with loaded data to ensure missing keys use defaults.
    config = dict(default_config)
    config.update(loaded_data)
    return config


def save_config(config_data: Dict[str, Any], path: Optional[str] = None) -> bool:
    """
    Saves the current configuration dictionary to the JSON file.

    Args:
        config_data: The configuration dictionary to save.
        path: Config file location. Defaults to CONFIG_FILE_NAME.

    Returns:
        True when the file was written.
    """
    config_path = path or CONFIG_FILE_NAME

    try:
        os.makedirs(os.path.dirname(config_path) or ".", exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            # Use indent=4 for readable JSON formatting
            json.dump(config_data, f, indent=4, ensure_ascii=False)
        return True

    except OSError as e:
        print(f"ERROR: Failed to save config to {config_path}: {e}", flush=True)
        return False
