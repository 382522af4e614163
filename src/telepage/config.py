"""
Configuration management for telepage.

Supports:
- Config file (~/.telepage.json or ~/.telepage.yaml)
- Environment variables (TELEPAGE_*)

Configuration only supplies defaults for ``Telegraph`` clients; nothing is
ever written back.
"""
import os
import json
import logging
from typing import Optional, Dict, Any
from pathlib import Path

from .exceptions import DependencyError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.telegra.ph"
DEFAULT_UPLOAD_URL = "https://telegra.ph/upload"
DEFAULT_TIMEOUT = 30.0

DEFAULT_CONFIG_PATHS = [
    Path.home() / '.telepage.json',
    Path.home() / '.telepage.yaml',
    Path.home() / '.telepage.yml',
    Path.home() / '.config' / 'telepage.json',
]

ENV_PREFIX = 'TELEPAGE_'

# Keys understood by Telegraph(...)
CLIENT_KEYS = (
    'access_token',
    'short_name',
    'author_name',
    'author_url',
    'api_url',
    'upload_url',
    'timeout',
)


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from file and environment variables.

    Priority (highest first):
    1. Environment variables (TELEPAGE_*)
    2. Explicit config_path parameter
    3. TELEPAGE_CONFIG environment variable
    4. Default config file locations

    Returns:
        Configuration dictionary
    """
    config = {}

    if config_path:
        config = _load_config_file(config_path)
    elif os.environ.get('TELEPAGE_CONFIG'):
        config = _load_config_file(os.environ['TELEPAGE_CONFIG'])
    else:
        for path in DEFAULT_CONFIG_PATHS:
            if path.exists():
                config = _load_config_file(str(path))
                break

    env_config = _load_from_env()
    return _merge_config(config, env_config)


def _load_config_file(path: str) -> Dict[str, Any]:
    """Load config from JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        logger.debug("Config file %s not found", path)
        return {}

    logger.debug("Loading config from %s", path)
    content = path.read_text()

    if path.suffix in ('.yaml', '.yml'):
        try:
            import yaml
        except ImportError:
            raise DependencyError("PyYAML is required for YAML config. Install with: pip install pyyaml")
        data = yaml.safe_load(content) or {}
    else:
        try:
            data = json.loads(content) if content.strip() else {}
        except ValueError as e:
            raise ValidationError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Config file {path} must contain a mapping")
    return data


def _load_from_env() -> Dict[str, Any]:
    """Load config from environment variables (TELEPAGE_ACCESS_TOKEN -> access_token)."""
    config = {}
    for key, value in os.environ.items():
        if key.startswith(ENV_PREFIX) and key != 'TELEPAGE_CONFIG':
            config[key[len(ENV_PREFIX):].lower()] = value
    return config


def _merge_config(base: Dict, override: Dict) -> Dict:
    """Merge two flat config dictionaries; override wins."""
    result = base.copy()
    result.update(override)
    return result


def get_client_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Get Telegraph client keyword arguments from config file or environment.

    Unknown keys are ignored, empty values dropped and ``timeout`` is
    converted to float.
    """
    config = load_config(config_path)
    client_config = {k: config[k] for k in CLIENT_KEYS if config.get(k) not in (None, '')}

    if 'timeout' in client_config:
        try:
            client_config['timeout'] = float(client_config['timeout'])
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid timeout in config: {client_config['timeout']!r}")

    return client_config


# Example config file format:
"""
~/.telepage.json:
{
    "access_token": "b968da509bb76866c35425099bc0989a5ec3b32997d55286c657e6994bbb",
    "short_name": "Sandbox",
    "author_name": "Anonymous",
    "timeout": 10
}

Environment variables:
TELEPAGE_ACCESS_TOKEN=b968da50...
TELEPAGE_API_URL=https://api.telegra.ph
"""
