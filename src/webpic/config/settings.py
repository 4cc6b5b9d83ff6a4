"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``WEBPIC_*`` prefix (``WEBPIC_RENDITION__QUALITY=80``)
  3. TOML file    — ``webpic.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

The result is frozen after construction and handed to every component that
needs part of it; nothing reads configuration from global state.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from webpic.config.discovery import find_config
from webpic.config.models import BatchConfig, RenditionConfig


class ConfigFileError(ValueError):
    """Raised when the config file is missing or not valid TOML."""


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``webpic.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ConfigFileError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class WebpicSettings(BaseSettings):
    """Unified settings for the webpic CLI.

    Attributes:
        config_path: The TOML file that was loaded, if any.
        rendition: Widths, density ceiling, quality, URL prefix, breakpoints.
        batch: Worker pool sizing.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "WEBPIC_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI output flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    rendition: RenditionConfig = Field(default_factory=RenditionConfig)
    batch: BatchConfig = Field(default_factory=BatchConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        rendition: dict[str, Any] | None = None,
        batch: dict[str, Any] | None = None,
        **cli_flags: Any,
    ) -> WebpicSettings:
        """Construct settings from a CLI invocation.

        *rendition* and *batch* carry only the options the user actually
        passed; ``None`` entries are dropped so they don't mask TOML or env
        values.  Sections are deep-merged across sources by pydantic-settings.

        Raises:
            ConfigFileError: An explicit *config_path* is missing, or the
                TOML file could not be parsed.
            pydantic.ValidationError: A merged value failed validation.
        """
        toml_path: Path | None = None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {toml_path}"
                raise ConfigFileError(msg)
        else:
            toml_path = find_config(start)

        overrides: dict[str, Any] = {}
        for name, section in (("rendition", rendition), ("batch", batch)):
            values = {k: v for k, v in (section or {}).items() if v is not None}
            if values:
                overrides[name] = values

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides, **cli_flags)
        finally:
            _tls.toml_path = None
