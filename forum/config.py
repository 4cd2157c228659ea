import copy
import logging
import os
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "FORUM_CONFIG_FILE"


# ── Vanilla: posting thresholds ──────────────────────────────────────────────

class VanillaSpamSettings(BaseModel):
    """Raw spam thresholds for one content type.

    Kept unparsed: None or junk means the spam guard falls back to its own
    defaults and floors.
    """
    SpamCount: Any = None
    SpamTime: Any = None
    SpamLock: Any = None


class ContentSettings(BaseModel):
    Comment: VanillaSpamSettings = VanillaSpamSettings()
    Discussion: VanillaSpamSettings = VanillaSpamSettings()


# ── Garden: site-wide ────────────────────────────────────────────────────────

class GardenSettings(BaseModel):
    Locale: str = "en-CA"


class LocaleSettings(BaseModel):
    Definitions: Dict[str, str] = {}


class ForumSettings(BaseSettings):
    """Site settings.

    Later sources lose: ``FORUM__VANILLA__COMMENT__SPAMCOUNT=5`` style env vars
    override the JSON file named by ``FORUM_CONFIG_FILE``, which overrides the
    defaults below.
    """
    model_config = SettingsConfigDict(
        env_prefix="FORUM__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    Garden: GardenSettings = GardenSettings()
    Vanilla: ContentSettings = ContentSettings()
    Locale: LocaleSettings = LocaleSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings, dotenv_settings]
        config_file = os.getenv(CONFIG_FILE_ENV)
        if config_file:
            logger.info(f"Loading configuration from {config_file}")
            sources.append(JsonConfigSettingsSource(settings_cls, json_file=config_file))
        return tuple(sources)


class Configuration:
    """Dotted-path view over settings, e.g. ``get("Vanilla.Comment.SpamCount")``."""

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(dict(data)) if data else {}

    @classmethod
    def from_settings(cls, settings: ForumSettings) -> "Configuration":
        return cls(settings.model_dump())

    def get(self, path: str, default: Any = None) -> Any:
        node: Any = self._data
        for part in path.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, path: str, value: Any) -> None:
        parts = path.split(".")
        node = self._data
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[parts[-1]] = value


def build_config(settings: Optional[ForumSettings] = None) -> Configuration:
    return Configuration.from_settings(settings or ForumSettings())


@lru_cache()
def get_config() -> Configuration:
    """Return cached Configuration instance for the web app."""
    return build_config()
