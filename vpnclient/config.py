"""
Configuration
=============

Settings live in a YAML file:

    paths:
      events_file: events.json
    simulation:
      seed: null
    logging:
      level: WARNING
      format: console

Lookup order:
1. Explicit path (the --config option)
2. VPN_CLIENT_CONFIG environment variable
3. config.yaml in the current directory

A missing file means defaults everywhere. VPN_CLIENT_EVENTS_FILE
overrides paths.events_file.
"""

import os
from pathlib import Path
from typing import Optional

import yaml

CONFIG_ENV_VAR = "VPN_CLIENT_CONFIG"
EVENTS_FILE_ENV_VAR = "VPN_CLIENT_EVENTS_FILE"
DEFAULT_CONFIG_FILE = "config.yaml"


def load_config(config_path: Optional[str | Path] = None) -> dict:
    """Load configuration from YAML, applying environment overrides"""
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_FILE
    config_path = Path(config_path)

    config = {}
    if config_path.exists():
        with open(config_path, encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

    events_file = os.environ.get(EVENTS_FILE_ENV_VAR)
    if events_file:
        config.setdefault("paths", {})["events_file"] = events_file

    return config
