"""Configuration loading for the pairing import.

Configuration Structure
-----------------------

config/config.yaml:

    appdb:
      api_url: ${APPDB_API_URL:-https://api.dbservices.to/v1.7}
      timeout_seconds: 30
    storage:
      documents_dir: ${PAIRING_DOCUMENTS_DIR:-}
      filename: pairingFile.plist
    progress:
      step: 0.025
      interval_seconds: 0.05
    sdk:
      persistent_customer_identifier: ${APPDB_CUSTOMER_ID:-}
      ...

Usage Examples
--------------

    >>> from config import load_config, get_config
    >>> config = load_config()
    >>> config.api_url
    'https://api.dbservices.to/v1.7'

Configuration Priority
---------------------

1. Environment variables referenced from YAML
2. YAML configuration file
3. Dataclass defaults
"""

from config.config import (
    AppdbConfig,
    get_config,
    load_config,
    parse_optional_bool,
    reset_config,
    set_config,
)

__all__ = [
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
    "parse_optional_bool",
    "AppdbConfig",
]
