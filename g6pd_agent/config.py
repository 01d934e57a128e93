# g6pd_agent/config.py
"""Handles loading and accessing the application configuration."""
import copy
import logging
import os
import threading
import time
import tomllib
from typing import Any, Dict

DEFAULT_CONFIG = {
    "model": {
        "provider": "anthropic",
        "id": "claude-sonnet-4-20250514",
        "base_url": "https://api.anthropic.com",
        "api_version": "2023-06-01",
        "max_tokens": 1000,
        "timeout_seconds": 30.0,
    },
    "openai": {
        "enabled": False,
        "model": "gpt-4o-mini",
    },
    "guardrails": {
        "audit_log": True,
    },
    "server": {
        "reload_config_seconds": 10,
        "cors_allow_origins": ["*"],
    },
}

CONFIG_PATH = os.environ.get("CONFIG_PATH", "config.toml")
log = logging.getLogger(__name__)
_config_lock = threading.Lock()
_config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
_reloader: threading.Thread | None = None

def merge_config(user_cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Overlays user settings onto a fresh copy of the defaults, one section deep."""
    merged = copy.deepcopy(DEFAULT_CONFIG)
    for k, v in user_cfg.items():
        if isinstance(merged.get(k), dict):
            if not isinstance(v, dict):
                log.warning("config section [%s] must be a table, keeping defaults", k)
                continue
            merged[k].update(v)
        else:
            merged[k] = v
    return merged

def load_config(path: str) -> Dict[str, Any]:
    """Reads a TOML file and merges it with defaults. A missing file means defaults."""
    if not os.path.exists(path):
        return copy.deepcopy(DEFAULT_CONFIG)
    with open(path, "rb") as f:
        return merge_config(tomllib.load(f))

def _load_config():
    global _config
    try:
        merged = load_config(CONFIG_PATH)
    except (OSError, tomllib.TOMLDecodeError) as e:
        log.warning("failed to load %s, keeping previous config: %s", CONFIG_PATH, e)
        return
    with _config_lock:
        _config = merged

def get_cfg() -> Dict[str, Any]:
    """Thread-safe access to the global configuration."""
    with _config_lock:
        return _config

def get_api_key(cfg: Dict[str, Any]) -> str:
    """Returns the credential for the configured provider, from the environment."""
    if cfg.get("openai", {}).get("enabled"):
        return os.environ.get("OPENAI_API_KEY", "")
    return os.environ.get("ANTHROPIC_API_KEY", "")

def model_settings(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Resolves the effective model settings, applying environment overrides."""
    m = dict(cfg["model"])
    if cfg.get("openai", {}).get("enabled"):
        m["provider"] = "openai"
        m["id"] = os.environ.get("OPENAI_MODEL") or cfg["openai"].get("model", "gpt-4o-mini")
        m["base_url"] = os.environ.get("OPENAI_API_BASE") or cfg["openai"].get("base_url")
    elif os.environ.get("ANTHROPIC_BASE_URL"):
        m["base_url"] = os.environ["ANTHROPIC_BASE_URL"]
    return m

def start_config_reloader():
    """Starts a background thread to periodically reload the configuration."""
    global _reloader
    if _reloader is not None:
        return
    def loop():
        while True:
            time.sleep(get_cfg()["server"]["reload_config_seconds"])
            _load_config()
    _reloader = threading.Thread(target=loop, daemon=True, name="config-reloader")
    _reloader.start()

# Initial load
_load_config()
