"""Configuration file loading and validation."""

import logging
from pathlib import Path
from zoneinfo import ZoneInfo, available_timezones

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from .consts import (
    DATA_DIR_DEFAULT,
    DATABASE_PATH,
    DEFAULT_FORM_TITLE,
    DEFAULT_SUBMIT_BUTTON_TEXT,
    DEFAULT_SUCCESS_MESSAGE,
    FORMS_DIR_DEFAULT,
    LOG_FILE_DEFAULT,
)
from .enums import StorageType
from .errors import ConfigException

logger = logging.getLogger(__name__)


class StorageConfig(BaseModel):
    """Persistence adapter configuration."""

    type: StorageType = StorageType.FILE
    directory: str = Field(default=FORMS_DIR_DEFAULT)
    database_path: str = Field(default=DATABASE_PATH)


class LogConfig(BaseModel):
    file: str = Field(default=LOG_FILE_DEFAULT)
    verbose: bool = False


class FormDefaultsConfig(BaseModel):
    """Defaults applied to newly created forms."""

    title: str = Field(default=DEFAULT_FORM_TITLE, min_length=1)
    submit_text: str = Field(default=DEFAULT_SUBMIT_BUTTON_TEXT, min_length=1)
    success_message: str = Field(default=DEFAULT_SUCCESS_MESSAGE)


class Config(BaseSettings):
    """Application configuration."""

    timezone: str = Field(default="UTC")
    data_dir: str = Field(default=DATA_DIR_DEFAULT)

    storage: StorageConfig = Field(default_factory=StorageConfig)
    log: LogConfig = Field(default_factory=LogConfig)
    form: FormDefaultsConfig = Field(default_factory=FormDefaultsConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        if v not in available_timezones():
            raise ValueError(f"Invalid timezone: {v}")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    @classmethod
    def load_from_file(cls, config_path: str, *, missing_ok: bool = False) -> "Config":
        """Load configuration from specified path.

        With ``missing_ok`` an absent file yields the defaults (still
        overridable from the environment).
        """
        path = Path(config_path)
        if not path.exists():
            if not missing_ok:
                raise ConfigException(f"Configuration file not found: {config_path}")
            logger.debug(f"Configuration file not found, using defaults: {config_path}")

        class _Config(cls):
            model_config = SettingsConfigDict(
                toml_file=str(path) if path.exists() else None,
                env_prefix="FORMENGINE_",
                env_nested_delimiter="__",
            )

        try:
            return _Config()
        except ValidationError as e:
            error_lines = ["Configuration validation failed:"]
            for error in e.errors():
                loc = " -> ".join(str(item) for item in error["loc"])
                error_lines.append(f"  - {loc}: {error['msg']}")
            raise ConfigException("\n".join(error_lines)) from e

    def get_timezone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
