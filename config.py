"""
Configuration for airwatch.

All values can be overridden with AIRWATCH_* environment variables.
"""

from __future__ import annotations

import os


def _get_env(key: str, default: str) -> str:
    return os.environ.get(f'AIRWATCH_{key}', default)


def _get_env_int(key: str, default: int) -> int:
    try:
        return int(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    try:
        return float(_get_env(key, str(default)))
    except ValueError:
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    value = _get_env(key, '').strip().lower()
    if not value:
        return default
    return value in ('1', 'true', 'yes', 'on')


def _get_env_list(key: str) -> list[str]:
    value = _get_env(key, '')
    return [item.strip().lower() for item in value.split(',') if item.strip()]


# Server
HOST = _get_env('HOST', '0.0.0.0')
PORT = _get_env_int('PORT', 5060)
DEBUG = _get_env_bool('DEBUG', False)
LOG_LEVEL = _get_env('LOG_LEVEL', 'INFO').upper()

# Scanning
MONITOR_INTERVAL_SECONDS = _get_env_int('MONITOR_INTERVAL', 10)
SCAN_SETTLE_SECONDS = _get_env_float('SCAN_SETTLE', 2.0)
SCAN_COMMAND_TIMEOUT = _get_env_float('SCAN_TIMEOUT', 15.0)

# Remote threat alerts (disabled when the URL is empty)
ALERT_WEBHOOK_URL = _get_env('ALERT_URL', '')
ALERT_WEBHOOK_TOKEN = _get_env('ALERT_TOKEN', '')
ALERT_WEBHOOK_TIMEOUT = _get_env_float('ALERT_TIMEOUT', 5.0)

# Access lists (BSSIDs, comma-separated)
WHITELIST_BSSIDS = _get_env_list('WHITELIST')
BLACKLIST_BSSIDS = _get_env_list('BLACKLIST')
