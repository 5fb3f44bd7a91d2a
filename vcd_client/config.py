"""Configuration loading for the vCloud Director client.

Settings live under a ``vcloud_director`` mapping in ``config.yaml`` and may be
overridden with ``VCLOUD_DIRECTOR_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from vcd_shared.constants import DEFAULT_API_VERSION, DEFAULT_PATH, DEFAULT_SCHEME

from .logging_config import log

SECTION = "vcloud_director"

_ENV_STRINGS = {
    "VCLOUD_DIRECTOR_HOST": "host",
    "VCLOUD_DIRECTOR_USERNAME": "username",
    "VCLOUD_DIRECTOR_PASSWORD": "password",
    "VCLOUD_DIRECTOR_API_VERSION": "api_version",
    "VCLOUD_DIRECTOR_MOCK_DATA": "mock_data",
}

_ENV_FLAGS = {
    "VCLOUD_DIRECTOR_VERIFY_TLS": "verify_tls",
    "VCLOUD_DIRECTOR_MOCK": "mock",
}

DEFAULTS: Dict[str, Any] = {
    "scheme": DEFAULT_SCHEME,
    "path": DEFAULT_PATH,
    "api_version": DEFAULT_API_VERSION,
    "verify_tls": True,
    "timeout": 10,
    "retry_limit": 4,
    "retry_interval": 0,
    "mock": False,
}


def set_config(path: str | Path = "config.yaml", overrides: Dict[str, Any] | None = None) -> dict:
    """Build configuration from a YAML file overlaid with environment variables.

    Args:
        path: Location of the YAML file. A missing file is not an error.
        overrides: Values for the ``vcloud_director`` section (e.g. CLI flags)
            applied after the environment; ``None`` values are ignored.

    Returns:
        dict: Configuration map with a ``vcloud_director`` section.
    """
    path = Path(path)
    cfg: dict = {}

    try:
        if path.exists():
            with path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
            if not isinstance(data, dict):
                log.warning("Config file %s does not contain a mapping", path)
            else:
                cfg.update(data)
    except (OSError, yaml.YAMLError) as exc:
        log.warning("Failed to load config from %s: %s", path, exc)

    section = cfg.get(SECTION)
    if not isinstance(section, dict):
        section = {}
        cfg[SECTION] = section

    for env_name, key in _ENV_STRINGS.items():
        value = os.getenv(env_name)
        if value:
            section[key] = value

    for env_name, key in _ENV_FLAGS.items():
        value = os.getenv(env_name)
        if value:
            section[key] = parse_bool(value)

    section.update({k: v for k, v in (overrides or {}).items() if v is not None})

    _split_host_scheme(section)

    log.info("Configuration loaded: %s", _mask_sensitive(cfg))
    return cfg


def client_settings(cfg: dict) -> dict:
    """Return the ``vcloud_director`` section merged over the defaults.

    Args:
        cfg: Configuration produced by ``set_config`` (or an equivalent dict).

    Returns:
        dict: Complete client settings.
    """
    section = cfg.get(SECTION) if isinstance(cfg, dict) else None
    settings = dict(DEFAULTS)
    if isinstance(section, dict):
        settings.update({k: v for k, v in section.items() if v is not None})
    for key in ("verify_tls", "mock"):
        if isinstance(settings[key], str):
            settings[key] = parse_bool(settings[key])
    return settings


def parse_bool(raw: Any) -> bool:
    """Interpret common truthy strings (``1``, ``true``, ``yes``, ``on``)."""
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("1", "true", "yes", "on")


def _split_host_scheme(section: dict) -> None:
    """Move a scheme given with the host (``https://vcd``) into ``scheme``."""
    host = section.get("host")
    if not isinstance(host, str):
        return
    trimmed = host.strip().rstrip("/")
    if "://" in trimmed:
        scheme, _, rest = trimmed.partition("://")
        section["scheme"] = scheme.lower()
        trimmed = rest
        log.info("Normalized vcloud_director.host to %s (scheme %s)", trimmed, section["scheme"])
    section["host"] = trimmed


def _mask_sensitive(data):
    """Return a copy of config data with sensitive values masked."""
    if isinstance(data, dict):
        return {k: _mask_sensitive_value(k, v) for k, v in data.items()}
    if isinstance(data, list):
        return [_mask_sensitive(item) for item in data]
    return data


def _mask_sensitive_value(key: str, value):
    """Mask password-like values; leave others unchanged."""
    if isinstance(value, dict):
        return _mask_sensitive(value)
    if isinstance(value, list):
        return [_mask_sensitive_value(key, item) for item in value]
    if isinstance(value, str) and _is_sensitive_key(key):
        if len(value) <= 6:
            return f"{value[:1]}***{value[-1:]}"
        return f"{value[:3]}***{value[-3:]}"
    return value


def _is_sensitive_key(key: str) -> bool:
    """Return True if the key name indicates sensitive content."""
    key_lower = key.lower()
    return any(token in key_lower for token in ("password", "secret", "token", "key"))
