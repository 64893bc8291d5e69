"""Configuration loading for the Unisocial client

Settings are layered, later sources winning:

1. Built-in defaults
2. ``.unisocial.yaml`` in the current directory, else ``~/.unisocial.yaml``
3. Environment variables (a ``.env`` file is loaded first)
4. Explicit overrides, typically CLI options

Example .unisocial.yaml:

    api_url: https://unisocial.example.edu
    request_timeout: 15
    polling:
      comments: 5
      chat: 2
      rooms: 5
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:8080"

# Refresh cadence of the web client: chat messages every 2s, room list every 5s
DEFAULT_CHAT_POLL_INTERVAL = 2.0
DEFAULT_ROOMS_POLL_INTERVAL = 5.0
DEFAULT_COMMENT_POLL_INTERVAL = 5.0


class Settings(BaseModel):
    """Merged client configuration"""

    api_url: str = DEFAULT_API_URL
    token: Optional[str] = None
    request_timeout: float = 10.0
    retry_attempts: int = 3
    retry_backoff: float = 1.0
    comment_poll_interval: float = DEFAULT_COMMENT_POLL_INTERVAL
    chat_poll_interval: float = DEFAULT_CHAT_POLL_INTERVAL
    rooms_poll_interval: float = DEFAULT_ROOMS_POLL_INTERVAL


def config_paths() -> List[Path]:
    return [
        Path(".unisocial.yaml"),
        Path.home() / ".unisocial.yaml",
    ]


def token_path() -> Path:
    return Path.home() / ".unisocial" / "token"


def load_config_file() -> Dict[str, Any]:
    """Return the first readable config file as a flat settings dict

    Unreadable or malformed files are skipped with a warning.
    """
    for config_path in config_paths():
        if not config_path.exists():
            continue
        try:
            with open(config_path) as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load {config_path}: {e}")
            continue

        if not isinstance(config, dict):
            logger.warning(f"Ignoring {config_path}: expected a mapping at top level")
            continue

        logger.debug(f"Loaded config from {config_path}")
        return _flatten_file_config(config)

    return {}


def _flatten_file_config(config: Dict[str, Any]) -> Dict[str, Any]:
    flat = {key: value for key, value in config.items() if key != "polling"}
    polling = config.get("polling") or {}
    if "comments" in polling:
        flat["comment_poll_interval"] = polling["comments"]
    if "chat" in polling:
        flat["chat_poll_interval"] = polling["chat"]
    if "rooms" in polling:
        flat["rooms_poll_interval"] = polling["rooms"]
    return flat


def load_env_config() -> Dict[str, Any]:
    load_dotenv()

    env: Dict[str, Any] = {}
    if os.getenv("UNISOCIAL_API_URL"):
        env["api_url"] = os.environ["UNISOCIAL_API_URL"]
    if os.getenv("UNISOCIAL_TOKEN"):
        env["token"] = os.environ["UNISOCIAL_TOKEN"]
    if os.getenv("UNISOCIAL_TIMEOUT"):
        env["request_timeout"] = os.environ["UNISOCIAL_TIMEOUT"]
    return env


def load_settings(**overrides: Any) -> Settings:
    """Build Settings from defaults, config file, environment and overrides

    Overrides whose value is None are ignored so CLI options left unset do
    not mask file or environment values. The saved login token is used only
    when no other source provides one.
    """
    values: Dict[str, Any] = {}
    values.update(load_config_file())
    values.update(load_env_config())
    values.update({key: value for key, value in overrides.items() if value is not None})

    if not values.get("token"):
        values["token"] = read_saved_token()

    settings = Settings(**values)
    settings.api_url = settings.api_url.rstrip("/")
    return settings


def read_saved_token() -> Optional[str]:
    path = token_path()
    if not path.exists():
        return None
    token = path.read_text().strip()
    return token or None


def save_token(token: str) -> Path:
    """Persist the login token, readable by the current user only

    The file is created with mode 0600 so the token is never readable by
    others, not even briefly.
    """
    path = token_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    # An existing file keeps its old mode through O_CREAT
    os.fchmod(fd, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(token)
    return path


def clear_saved_token() -> bool:
    path = token_path()
    if path.exists():
        path.unlink()
        return True
    return False
