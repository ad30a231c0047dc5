# moustachio/config/loader.py
"""
Handles loading and merging of configuration from TOML files, and turning the
merged settings into a RenderConfig.
"""
import toml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import fields as dataclass_fields
import structlog

from moustachio.exceptions import ConfigError

from .settings import RenderConfig

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".moustachio.toml", "moustachio.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "moustachio"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP: Dict[str, str] = {
    "recursion_limit": "recursion_limit",
    "partial_dirs": "partial_dirs",
    "partials_dir": "partial_dirs",
    "partial_extension": "partial_extension",
    "data_format": "data_format",
    "output_file": "output_file",
    "vars": "user_vars",
    "user_vars": "user_vars",
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file(): return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except (toml.TomlDecodeError, OSError) as e:
        raise ConfigError(f"Could not read config file {file_path}: {e}") from e
    return data.get("tool", {}).get("moustachio", {}) if file_path.name == "pyproject.toml" else data

def load_and_merge_configs(cwd: Optional[Path] = None, user_config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Merges the user config with the first project config found in ``cwd``.

    Project settings override user settings; ``profiles`` tables are merged
    by profile name.
    """
    cwd = cwd or Path.cwd()
    user_config_file = user_config_file or USER_CONFIG_FILE
    merged_toml_data: Dict[str, Any] = {}
    if user_config_file.is_file():
        log.info("loading_user_global_config", path=str(user_config_file))
        merged_toml_data.update(_load_toml_file_data(user_config_file))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = cwd / filename
        if not candidate.is_file():
            continue
        project_settings = _load_toml_file_data(candidate)
        if not project_settings:
            continue
        log.info("loading_project_local_config", path=str(candidate))
        user_profiles = merged_toml_data.get("profiles", {})
        project_profiles = project_settings.pop("profiles", {})
        if isinstance(user_profiles, dict) and isinstance(project_profiles, dict):
            user_profiles.update(project_profiles)
            merged_toml_data["profiles"] = user_profiles
        elif isinstance(project_profiles, dict):
            merged_toml_data["profiles"] = project_profiles
        merged_toml_data.update(project_settings)
        break
    if not merged_toml_data: log.debug("no_configuration_files_loaded")
    return merged_toml_data

def resolve_options(raw_config: Dict[str, Any], profile_name: Optional[str] = None) -> Dict[str, Any]:
    """Maps TOML keys onto RenderConfig attribute names, applying a profile on top."""
    options: Dict[str, Any] = {}
    layers = [raw_config]
    if profile_name:
        profile = raw_config.get("profiles", {}).get(profile_name)
        if profile is None:
            raise ConfigError(f"Profile '{profile_name}' not found in configuration files.")
        log.info("applying_profile_settings", profile=profile_name)
        layers.append(profile)
    for layer in layers:
        for toml_key, attr in CONFIG_KEY_TO_RENDERCONFIG_ATTR_MAP.items():
            if toml_key in layer:
                value = layer[toml_key]
                if attr == "partial_dirs" and isinstance(value, str):
                    value = [value]
                options[attr] = value
    return options

def config_from_mapping(options: Dict[str, Any]) -> RenderConfig:
    valid = {f.name for f in dataclass_fields(RenderConfig) if f.init}
    unknown = set(options) - valid
    if unknown:
        raise ConfigError(f"Unknown configuration option(s): {', '.join(sorted(unknown))}")
    try:
        return RenderConfig(**options)
    except TypeError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
