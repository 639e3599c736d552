"""
Access Engine Configuration Loader

Reads access.yaml, expanding environment variable references in every
string value before the schema sees it:
- ${VAR_NAME}: must be set
- ${VAR_NAME:-default}: falls back to the default when unset

Example:
```yaml
permissions:
  publish: "${PUBLISH_PERMISSION:-page-publish}"
tree:
  accounts_container_id: "${ACCOUNTS_CONTAINER_ID:-29}"
```
"""

import os
import re
from pathlib import Path
from typing import Any, List, Optional, Union
import logging

import yaml

from .schema import EngineConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "access.yaml"

ENV_VAR_PATTERN = re.compile(r'\$\{([^}:]+)(?::-([^}]*))?\}')


def _expand(match: "re.Match[str]") -> str:
    name, default = match.group(1), match.group(2)
    if name in os.environ:
        return os.environ[name]
    if default is None:
        raise KeyError(f"Environment variable '{name}' is not set and has no default (use ${{{name}:-value}})")
    return default


def interpolate_env_vars(value: Any) -> Any:
    """
    Expand ${VAR} references in strings nested anywhere in value.

    Raises:
        KeyError: If a referenced variable without default is unset
    """
    if isinstance(value, str):
        return ENV_VAR_PATTERN.sub(_expand, value)
    if isinstance(value, dict):
        return {key: interpolate_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [interpolate_env_vars(item) for item in value]
    return value


def load_config_from_file(config_path: Union[str, Path], interpolate: bool = True) -> EngineConfig:
    """
    Load engine configuration from one YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        KeyError: If a variable is unset or a permission key is unknown
        yaml.YAMLError: If the YAML is malformed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading access configuration from {config_path}")
    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    if interpolate:
        try:
            raw = interpolate_env_vars(raw)
        except KeyError as e:
            logger.error(f"Configuration error in {config_path}: {e}")
            raise

    return EngineConfig.from_dict(raw)


def _candidates(working_dir: Optional[Union[str, Path]]) -> List[Path]:
    roots = [Path(working_dir)] if working_dir else []
    roots.append(Path.cwd())
    return [path for root in roots for path in (root / CONFIG_FILENAME, root / "config" / CONFIG_FILENAME)]


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    working_dir: Optional[Union[str, Path]] = None,
) -> EngineConfig:
    """
    Load engine configuration, falling back to defaults.

    Search order:
    1. Explicit config_path (must exist)
    2. access.yaml, then config/access.yaml, in working_dir
    3. The same two paths in the current directory
    4. EngineConfig() defaults
    """
    if config_path:
        return load_config_from_file(config_path)

    for path in _candidates(working_dir):
        if path.exists():
            logger.info(f"Found access configuration at {path}")
            return load_config_from_file(path)

    logger.info(f"No {CONFIG_FILENAME} found, using default configuration")
    return EngineConfig()


def write_default_config(output_path: Optional[Union[str, Path]] = None, config: Optional[EngineConfig] = None) -> Path:
    """
    Write an access.yaml holding the given (or default) configuration.

    Returns:
        Path to the written file
    """
    output_path = Path(output_path) if output_path else Path(CONFIG_FILENAME)
    config = config or EngineConfig()

    with open(output_path, 'w') as f:
        f.write("# Access engine configuration\n")
        f.write("# Values may reference ${VAR_NAME} or ${VAR_NAME:-default}\n\n")
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Wrote access configuration to {output_path}")
    return output_path
