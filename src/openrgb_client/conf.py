"""Connection settings for the OpenRGB client.

Config is stored at ~/.config/openrgb-client/config.json (XDG-compliant).
Environment variables win over the file, and explicit arguments to
``connect()`` win over both.

Usage:
    from openrgb_client.conf import get_settings

    settings = get_settings()
    settings.host           # SDK server host
    settings.port           # SDK server port (6742)
    settings.client_name    # Name announced with SET_CLIENT_NAME
    settings.timeout        # Socket timeout in seconds, None = blocking

Environment:
    OPENRGB_HOST, OPENRGB_PORT, OPENRGB_CLIENT_NAME, OPENRGB_TIMEOUT
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from .transport import DEFAULT_PORT

log = logging.getLogger(__name__)

# =========================================================================
# Config file location (XDG-compliant)
# =========================================================================

_XDG_CONFIG = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
CONFIG_DIR = os.path.join(_XDG_CONFIG, 'openrgb-client')
CONFIG_PATH = os.path.join(CONFIG_DIR, 'config.json')

DEFAULT_HOST = '127.0.0.1'
DEFAULT_CLIENT_NAME = 'openrgb-client'


# =========================================================================
# Low-level config persistence
# =========================================================================

def load_config(path: Optional[str] = None) -> dict:
    """Load user config from disk. Returns empty dict on missing/corrupt file."""
    try:
        with open(path or CONFIG_PATH, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring unreadable config %s: %s", path or CONFIG_PATH, e)
        return {}
    return config if isinstance(config, dict) else {}


def save_config(config: dict, path: Optional[str] = None):
    """Save user config to disk."""
    path = path or CONFIG_PATH
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        json.dump(config, f, indent=2)


# =========================================================================
# Resolved settings
# =========================================================================

@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    client_name: str = DEFAULT_CLIENT_NAME
    timeout: Optional[float] = None


def _parse_timeout(value) -> Optional[float]:
    if value in (None, '', 'none', 'None'):
        return None
    return float(value)


def get_settings(path: Optional[str] = None, environ: Optional[dict] = None) -> Settings:
    """Merge defaults, config file and environment into a Settings."""
    env = os.environ if environ is None else environ
    config = load_config(path)

    settings = Settings(
        host=config.get('host', DEFAULT_HOST),
        port=int(config.get('port', DEFAULT_PORT)),
        client_name=config.get('client_name', DEFAULT_CLIENT_NAME),
        timeout=_parse_timeout(config.get('timeout')),
    )

    if 'OPENRGB_HOST' in env:
        settings.host = env['OPENRGB_HOST']
    if 'OPENRGB_PORT' in env:
        settings.port = int(env['OPENRGB_PORT'])
    if 'OPENRGB_CLIENT_NAME' in env:
        settings.client_name = env['OPENRGB_CLIENT_NAME']
    if 'OPENRGB_TIMEOUT' in env:
        settings.timeout = _parse_timeout(env['OPENRGB_TIMEOUT'])

    log.debug("Settings: %s", settings)
    return settings
