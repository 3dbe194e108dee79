"""Configuration loader for urlcanon.

Settings are read from a small YAML file. The only option today is the
``normalise_urls`` switch, which turns canonicalisation into a pass-through
for compatibility with indexes built before normalisation existed.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from urlcanon.core.exceptions import ConfigError


# ============================================================================
# Configuration Paths
# ============================================================================

def get_config_dir() -> Path:
    """Get the configuration directory path.
    
    Returns:
        Path to configs directory (./configs relative to project root)
    """
    # core/ -> urlcanon/ -> src/ -> root
    project_root = Path(__file__).parent.parent.parent.parent
    return project_root / "configs"


# ============================================================================
# Settings
# ============================================================================

@dataclass(frozen=True)
class Settings:
    """Process-wide canonicalisation settings."""
    normalise_urls: bool = True


_KEY_ALIASES = {
    "normalise_urls": "normalise_urls",
    "NORMALISE_URLS": "normalise_urls",
}


def load_settings(config_file: Path | str | None = None) -> Settings:
    """Load settings from a YAML file.
    
    Args:
        config_file: Path to settings YAML. If None, configs/settings.yaml is
            used when present, otherwise defaults are returned
        
    Returns:
        Settings object
        
    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    if config_file is None:
        config_path = get_config_dir() / "settings.yaml"
        if not config_path.exists():
            return Settings()
    else:
        config_path = Path(config_file)
    
    if not config_path.exists():
        raise ConfigError(f"Settings file not found: {config_path}")
    
    try:
        with config_path.open("r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse settings YAML: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings file: {e}") from e
    
    return _settings_from_dict(data)


def _settings_from_dict(data: Any) -> Settings:
    if data is None:
        return Settings()
    
    if not isinstance(data, dict):
        raise ConfigError("Settings file must contain a mapping")
    
    values: dict[str, bool] = {}
    for key, value in data.items():
        field_name = _KEY_ALIASES.get(key)
        if field_name is None:
            continue
        if not isinstance(value, bool):
            raise ConfigError(f"'{key}' must be true or false, got {value!r}")
        values[field_name] = value
    
    return Settings(**values)
