import json
import os
from datetime import datetime

DEFAULT_CONFIG = {
    "delay_seconds": 1.0,
    "max_steps": 0,
    "animate": True,
    "log_runs": False,
    "output_directory": "logs/",
    "log_file_prefix": "turing_"
}

# Expected types for validation
CONFIG_SCHEMA = {
    "delay_seconds": (int, float),
    "max_steps": int,
    "animate": bool,
    "log_runs": bool,
    "output_directory": str,
    "log_file_prefix": str
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass; don't let true/false pass as a number
        if isinstance(config[key], bool) and expected_type is not bool:
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")
        if not isinstance(config[key], expected_type):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    if config["delay_seconds"] < 0:
        raise ValueError("delay_seconds must not be negative.")
    if config["max_steps"] < 0:
        raise ValueError("max_steps must not be negative (0 means unlimited).")

def default_config():
    config = DEFAULT_CONFIG.copy()
    validate_config(config)
    return config

def load_config(path="config/runtime_config.json", verbose=False):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Configuration file not found at: {path}")

    with open(path, "r", encoding="utf-8") as f:
        user_config = json.load(f)

    # Merge defaults with overrides
    config = DEFAULT_CONFIG.copy()
    config.update(user_config)

    # Validate schema
    validate_config(config)

    if verbose:
        print(f"[{datetime.now()}] Loaded config:")
        for key, value in config.items():
            print(f"  {key}: {value}")

    return config
