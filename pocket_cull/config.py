#!/usr/bin/env python3
"""
Runtime configuration for Pocket Cull.

A Config is built once by the CLI and handed to the credential store,
the authorizer and the cull pipeline.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ConfigError

DEFAULT_ORIGIN = "https://getpocket.com"
DEFAULT_AUTH_TIMEOUT = 300.0
DEFAULT_PROBE_TIMEOUT = 10.0


def _default_config_dir():
    return Path.home() / '.config' / 'pocket'


def _float_env(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got {value!r}")


@dataclass
class Config:
    config_dir: Path = field(default_factory=_default_config_dir)
    origin: str = DEFAULT_ORIGIN
    # Seconds to wait for the browser approval; None waits forever.
    auth_timeout: float = DEFAULT_AUTH_TIMEOUT
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT
    open_browser: bool = True

    @property
    def consumer_key_file(self):
        return self.config_dir / 'consumer_key'

    @property
    def auth_file(self):
        return self.config_dir / 'auth.json'

    @classmethod
    def from_env(cls):
        """Build a Config from POCKET_* environment variables."""
        config_dir = os.getenv('POCKET_CONFIG_DIR')
        auth_timeout = _float_env('POCKET_AUTH_TIMEOUT', DEFAULT_AUTH_TIMEOUT)
        return cls(
            config_dir=Path(config_dir).expanduser() if config_dir else _default_config_dir(),
            origin=os.getenv('POCKET_ORIGIN', DEFAULT_ORIGIN).rstrip('/'),
            auth_timeout=auth_timeout if auth_timeout > 0 else None,
            probe_timeout=_float_env('POCKET_PROBE_TIMEOUT', DEFAULT_PROBE_TIMEOUT),
            open_browser=os.getenv('POCKET_NO_BROWSER', '') == '',
        )
