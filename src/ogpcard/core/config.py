"""Configuration management for the OGP card service.

This module provides centralized configuration management using Pydantic
Settings.  Values are read from a TOML file (``config.toml`` by default) and
may be overridden by environment variables with the ``OGP_`` prefix.

Source Priority
---------------
Configuration values are resolved in the following priority order:

1. Keyword arguments passed to :class:`OgpCardConfig`
2. Environment variables (``OGP_*`` prefix)
3. The TOML file
4. Default values defined in :class:`OgpCardConfig`

Example ``config.toml``::

    base_url = "https://ogp.example.com"
    api_server_bind = "0.0.0.0"
    api_server_port = 8080
    tls = false
    koruri_bold_font_path = "fonts/Koruri-Bold.ttf"
    default_image_width = 1200
    default_image_height = 630
    default_font_size = 64.0

Usage Example
-------------
    from ogpcard.core.config import load_config

    config = load_config("config.toml")
    print(config.base_url)

The configuration is frozen after load.  To change values, edit the file or
the environment and restart the server.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_FILE = "config.toml"
CONFIG_FILE_ENV = "OGP_CONFIG_FILE"


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""


class OgpCardConfig(BaseSettings):
    """Main configuration for the OGP card service.

    Attributes
    ----------
    Server Settings:
        base_url : str
            Public URL prefix embedded in API responses and OGP pages.
        api_server_bind : str
            Address the HTTP server binds to.
        api_server_port : int
            Port the HTTP server listens on (1-65535).
        tls : bool
            Serve HTTPS using ``server_cert_path`` and ``server_key_path``.
        server_cert_path / server_key_path : Path | None
            TLS certificate and private key.  Required when ``tls`` is true.
        cors_origins : list[str]
            Origins allowed to call the API from a browser.

    Rendering Settings:
        koruri_bold_font_path : Path
            Bold TrueType/OpenType font used for every card.
        default_image_width / default_image_height : int
            Canvas size in pixels.
        default_font_size : float
            Point size of the rendered text.

    Paths:
        data_dir : Path
            Directory holding generated ``<id>.png`` files.
        templates_dir : Path
            Directory containing ``index.html`` and ``ogp.html``.
    """

    model_config = SettingsConfigDict(
        env_prefix="OGP_",
        case_sensitive=False,
        toml_file=DEFAULT_CONFIG_FILE,
        frozen=True,
        extra="ignore",
    )

    base_url: str = Field(
        default="http://localhost:8080",
        description="URL prefix embedded in generated links and pages",
    )
    api_server_bind: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    api_server_port: int = Field(
        default=8080,
        description="Server port",
        ge=1,
        le=65535,
    )
    tls: bool = Field(
        default=False,
        description="Serve HTTPS instead of HTTP",
    )
    server_cert_path: Path | None = Field(
        default=None,
        description="TLS certificate (PEM), required when tls is enabled",
    )
    server_key_path: Path | None = Field(
        default=None,
        description="TLS private key (PEM), required when tls is enabled",
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    koruri_bold_font_path: Path = Field(
        default=Path("fonts/Koruri-Bold.ttf"),
        description="Bold font file used to draw card text",
    )
    default_image_width: int = Field(default=1200, gt=0, le=8192)
    default_image_height: int = Field(default=630, gt=0, le=8192)
    default_font_size: float = Field(default=64.0, gt=0)

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory where generated images are stored",
    )
    templates_dir: Path = Field(
        default=PACKAGE_DIR / "templates",
        description="Directory containing index.html and ogp.html",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    @model_validator(mode="after")
    def _require_tls_material(self) -> OgpCardConfig:
        if self.tls and (self.server_cert_path is None or self.server_key_path is None):
            raise ValueError("server_cert_path and server_key_path are required when tls is true")
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML file below environment variables in priority."""
        return (init_settings, env_settings, TomlConfigSettingsSource(settings_cls))


def default_config_path() -> Path:
    """Return the config file named by ``OGP_CONFIG_FILE`` or ``config.toml``."""
    return Path(os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE))


def load_config(path: str | Path | None = None) -> OgpCardConfig:
    """Load and validate the configuration from a TOML file.

    Unlike constructing :class:`OgpCardConfig` directly, a missing file is an
    error here: the server must not start on defaults alone.  ``OGP_*``
    environment variables still override values from the file.

    Args:
        path: TOML file to read.  Defaults to :func:`default_config_path`.

    Returns:
        The validated, frozen configuration.

    Raises:
        ConfigError: If the file is missing, not valid TOML, or its values
            fail validation.
    """
    path = Path(path) if path is not None else default_config_path()
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    class FileConfig(OgpCardConfig):
        model_config = SettingsConfigDict(toml_file=path)

    try:
        config = FileConfig()
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc

    logger.info("Loaded configuration from %s", path)
    return config
