"""Pairing import configuration from YAML file.

Loads from config/config.yaml with all settings in one place:
- appdb API endpoint and request defaults
- Pairing file storage location
- Progress animation timing
- Vendor SDK identifier values

Environment variables ARE supported using ${VAR_NAME} and
${VAR_NAME:-default} syntax in YAML files.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.dbservices.to/v1.7"
DEFAULT_STORE_URL = "https://appdb.to/details/45a698af5360560fd8a522a8ebbc634da8f55df4"
DEFAULT_PAIRING_FILENAME = "pairingFile.plist"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def parse_optional_bool(value: Any) -> Optional[bool]:
    """Parse a YAML/env flag; empty or missing means "not set"."""
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


# Default config file: config/config.yaml in src/ directory
DEFAULT_CONFIG_FILE = Path(__file__).parent.parent / "config" / "config.yaml"


@dataclass
class AppdbConfig:
    """Pairing import configuration.

    Configuration structure:
        appdb:    {api_url, brand, lang, timeout_seconds, store_url}
        storage:  {documents_dir, filename}
        progress: {step, interval_seconds}
        sdk:      {installed_via_appdb, persistent_customer_identifier, ...}
    """

    # =========================================================================
    # APPDB API
    # =========================================================================
    api_url: str = DEFAULT_API_URL
    brand: str = "appdb"
    lang: str = "en"
    timeout_seconds: float = 30.0
    store_url: str = DEFAULT_STORE_URL

    # =========================================================================
    # STORAGE
    # =========================================================================
    documents_dir: str = ""  # Empty: resolved at runtime (PAIRING_DOCUMENTS_DIR, ~/Documents)
    pairing_filename: str = DEFAULT_PAIRING_FILENAME

    # =========================================================================
    # PROGRESS
    # =========================================================================
    progress_step: float = 0.025
    progress_interval_seconds: float = 0.05

    # =========================================================================
    # VENDOR SDK VALUES
    # =========================================================================
    sdk: Dict[str, Any] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate configuration for correctness and constraints."""
        if not self.api_url.startswith(("http://", "https://")):
            raise ValueError(
                f"appdb.api_url must start with http:// or https://, got: {self.api_url!r}"
            )
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"appdb.timeout_seconds must be > 0, got {self.timeout_seconds}"
            )
        if not (0 < self.progress_step <= 1):
            raise ValueError(
                f"progress.step must be between 0 (exclusive) and 1, got {self.progress_step}"
            )
        if self.progress_interval_seconds < 0:
            raise ValueError(
                f"progress.interval_seconds must be >= 0, got {self.progress_interval_seconds}"
            )
        if not self.pairing_filename or "/" in self.pairing_filename:
            raise ValueError(
                f"storage.filename must be a plain file name, got {self.pairing_filename!r}"
            )
        for flag in ("installed_via_appdb", "update_available"):
            try:
                parse_optional_bool(self.sdk.get(flag))
            except ValueError as e:
                raise ValueError(f"sdk.{flag}: {e}") from None


def _number(section: Dict[str, Any], key: str, default: float, prefix: str) -> float:
    """Read a numeric setting; missing or empty means ``default``."""
    value = section.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{prefix}.{key} must be a number, got {value!r}") from None


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge overlay into base dict."""
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> AppdbConfig:
    """Load configuration from config.yaml.

    An explicit ``config_path`` must exist. When no path is given, the default
    file is used if present, otherwise dataclass defaults apply.
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
    else:
        config_path = DEFAULT_CONFIG_FILE

    if config_path.exists():
        logger.info("Loading configuration from file", extra={"config_path": str(config_path)})
    else:
        logger.debug("No configuration file, using defaults", extra={"config_path": str(config_path)})

    yaml_data = _expand_env_vars(load_yaml(config_path))

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        yaml_data = _deep_merge(yaml_data, overrides)

    appdb = yaml_data.get("appdb") or {}
    storage = yaml_data.get("storage") or {}
    progress = yaml_data.get("progress") or {}
    sdk = yaml_data.get("sdk") or {}

    config = AppdbConfig(
        api_url=str(appdb.get("api_url") or DEFAULT_API_URL).rstrip("/"),
        brand=str(appdb.get("brand") or "appdb"),
        lang=str(appdb.get("lang") or "en"),
        timeout_seconds=_number(appdb, "timeout_seconds", 30.0, "appdb"),
        store_url=str(appdb.get("store_url") or DEFAULT_STORE_URL),
        documents_dir=str(storage.get("documents_dir") or ""),
        pairing_filename=str(storage.get("filename") or DEFAULT_PAIRING_FILENAME),
        progress_step=_number(progress, "step", 0.025, "progress"),
        progress_interval_seconds=_number(progress, "interval_seconds", 0.05, "progress"),
        sdk=dict(sdk),
    )

    logger.debug(
        "Configuration loaded",
        extra={"api_url": config.api_url, "timeout_seconds": config.timeout_seconds},
    )
    config.validate()
    return config


_appdb_config: Optional[AppdbConfig] = None


def get_config() -> AppdbConfig:
    """Get or load the singleton config instance."""
    global _appdb_config
    if _appdb_config is None:
        _appdb_config = load_config()
    return _appdb_config


def set_config(config: AppdbConfig) -> None:
    """Set the singleton config instance (useful for testing)."""
    global _appdb_config
    _appdb_config = config


def reset_config() -> None:
    """Reset the singleton config instance (forces reload on next get_config() call)."""
    global _appdb_config
    _appdb_config = None
