# SPDX-License-Identifier: MIT

import os
from typing import Optional, TypedDict

import platformdirs

APP_NAME = "beeline"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

API_KEY_ENV_VAR = "BEEMINDER_API_KEY"
EDITOR_ENV_VAR = "EDITOR"
DEFAULT_EDITOR = "nano"
DEFAULT_API_BASE_URL = "https://www.beeminder.com/api/v1/"
DEFAULT_EDIT_LIMIT = 20
DEFAULT_BACKUP_FILENAME = "beedata.json"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"


class Configuration(TypedDict):
    editor: Optional[str]  # Overrides $EDITOR when set
    edit_limit: int
    backup_filename: str
    api_base_url: str
    timeout: float
    log_level: str


class MissingApiKeyError(Exception):
    """Raised when the Beeminder API key is not available in the environment."""

    pass


def get_default_configuration() -> Configuration:
    return {
        "editor": None,
        "edit_limit": DEFAULT_EDIT_LIMIT,
        "backup_filename": DEFAULT_BACKUP_FILENAME,
        "api_base_url": DEFAULT_API_BASE_URL,
        "timeout": DEFAULT_TIMEOUT,
        "log_level": DEFAULT_LOG_LEVEL,
    }


def get_api_key() -> str:
    api_key = os.environ.get(API_KEY_ENV_VAR, "").strip()
    if not api_key:
        raise MissingApiKeyError(
            f"Please create environment variable {API_KEY_ENV_VAR}"
        )
    return api_key


def resolve_editor(config: Configuration) -> str:
    """
    Pick the editor command: the config file wins, then $EDITOR, then nano.
    """
    if config["editor"]:
        return config["editor"]
    return os.environ.get(EDITOR_ENV_VAR) or DEFAULT_EDITOR
