"""User settings for logiled.

Config is read from ~/.config/logiled/config.json (XDG-compliant) and is
never written by the library.

Keys:
    backend          "pyusb" or "hidapi"; unset means auto-detect
    usb_timeout_ms   control transfer timeout (default 2000)

The ``LOGILED_BACKEND`` environment variable overrides ``backend``.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Optional

log = logging.getLogger(__name__)

# =========================================================================
# Config file location (XDG-compliant)
# =========================================================================

_XDG_CONFIG = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
CONFIG_DIR = os.path.join(_XDG_CONFIG, 'logiled')
CONFIG_PATH = os.path.join(CONFIG_DIR, 'config.json')

BACKEND_ENV = 'LOGILED_BACKEND'
BACKENDS = ('pyusb', 'hidapi')

DEFAULT_USB_TIMEOUT_MS = 2000


def load_config() -> dict:
    """Load user config from disk. Returns empty dict on missing/corrupt file."""
    try:
        with open(CONFIG_PATH, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    if not isinstance(config, dict):
        log.warning("Ignoring %s: top level is not an object", CONFIG_PATH)
        return {}
    return config


def preferred_backend() -> Optional[str]:
    """Backend name from the environment or config file, None for auto."""
    name = os.environ.get(BACKEND_ENV) or load_config().get('backend')
    if not name:
        return None
    name = str(name).lower()
    if name not in BACKENDS:
        log.warning("Unknown backend %r in settings, using auto-detect", name)
        return None
    return name


def usb_timeout_ms() -> int:
    """Control transfer timeout in milliseconds."""
    value = load_config().get('usb_timeout_ms', DEFAULT_USB_TIMEOUT_MS)
    try:
        value = int(value)
    except (TypeError, ValueError):
        return DEFAULT_USB_TIMEOUT_MS
    return value if value > 0 else DEFAULT_USB_TIMEOUT_MS
