"""Completion preferences.

Preferences are read from a JSON file (``config/cadence.json`` in the project
root by default) and can be overridden with ``CADENCE_*`` environment
variables. Keys use the editor-facing camelCase names, e.g.::

    {"autoTrigger": "always", "triggerAfterInsertEnter": false}
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cadence.logger import get_logger
from cadence.utils import get_project_root

logger = get_logger("config")

_ENV_OVERRIDES = {
    "CADENCE_AUTO_TRIGGER": "autoTrigger",
    "CADENCE_TRIGGER_AFTER_INSERT_ENTER": "triggerAfterInsertEnter",
    "CADENCE_SOURCE_TIMEOUT": "sourceTimeout",
    "CADENCE_RECENT_LIMIT": "recentLimit",
    "CADENCE_LOG_LEVEL": "logLevel",
}


class Preferences(BaseModel):
    """Named completion preferences."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    auto_trigger: str = Field(
        "always",
        alias="autoTrigger",
        description='"always" triggers on typing, "none" never triggers automatically',
    )
    trigger_after_insert_enter: bool = Field(
        True,
        alias="triggerAfterInsertEnter",
        description="Start a completion when entering insert mode (needs autoTrigger=always)",
    )
    source_timeout: float = Field(
        5.0,
        alias="sourceTimeout",
        gt=0,
        description="Seconds a single source may take before its result is dropped",
    )
    recent_limit: int = Field(
        50,
        alias="recentLimit",
        ge=0,
        description="Number of recently accepted words kept for ranking",
    )
    log_level: str = Field("INFO", alias="logLevel")


class Configuration:
    """Runtime holder for the current preferences.

    Consumers read preferences by their camelCase name on every decision, so
    ``update`` takes effect immediately.
    """

    def __init__(self, preferences: Optional[Preferences] = None) -> None:
        self._preferences = preferences or Preferences()
        self._by_alias = {
            field.alias: name for name, field in Preferences.model_fields.items() if field.alias
        }

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    def get(self, name: str, default: Any = None) -> Any:
        """
        Read a preference by its camelCase name.

        Args:
            name: Preference name, e.g. ``"autoTrigger"``
            default: Value returned for unknown names

        Returns:
            The preference value, or ``default``
        """
        attr = self._by_alias.get(name, name)
        return getattr(self._preferences, attr, default)

    def update(self, **values: Any) -> None:
        """Replace preferences; keys may be camelCase aliases or field names."""
        merged = self._preferences.model_dump(by_alias=True)
        for key, value in values.items():
            merged[self._alias_for(key)] = value
        self._preferences = Preferences.model_validate(merged)
        logger.debug(f"Preferences updated: {values}")

    def _alias_for(self, key: str) -> str:
        for alias, attr in self._by_alias.items():
            if key == attr:
                return alias
        return key


def _env_overrides() -> dict[str, str]:
    overrides = {}
    for env_name, alias in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None and value != "":
            overrides[alias] = value
    return overrides


def load_preferences(config_path: Optional[str | Path] = None) -> Preferences:
    """
    Load preferences from a JSON file and the environment.

    Args:
        config_path: Path to the JSON file. If None, ``config/cadence.json``
            under the project root is used when it exists; otherwise only
            defaults and environment overrides apply.

    Returns:
        Preferences: Parsed preferences

    Raises:
        FileNotFoundError: If an explicit ``config_path`` doesn't exist
        json.JSONDecodeError: If the JSON file is invalid
        ValidationError: If a preference has an invalid value
    """
    data: dict[str, Any] = {}

    if config_path is None:
        default_path = Path(get_project_root()) / "config" / "cadence.json"
        path = default_path if default_path.exists() else None
    else:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in configuration file {path}: {e}")
            raise

    data.update(_env_overrides())

    try:
        preferences = Preferences.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid preferences{f' in {path}' if path else ''}: {e}")
        raise

    logger.info(
        f"Preferences loaded: autoTrigger={preferences.auto_trigger}, "
        f"triggerAfterInsertEnter={preferences.trigger_after_insert_enter}"
    )
    return preferences
