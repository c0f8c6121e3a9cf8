"""Server settings and the YAML loader that produces them."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from mcpkit.protocol.errors import MCPError
from mcpkit.protocol.models import ServerCapabilities, ToolsCapability

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_ENV_OVERRIDES = {
    "MCPKIT_HOST": "host",
    "MCPKIT_PORT": "port",
    "MCPKIT_PATH": "path",
    "MCPKIT_LOG_LEVEL": "log_level",
}


class SettingsError(MCPError):
    """Raised when a settings file cannot be read or fails validation."""


class TelemetrySettings(BaseModel):
    """Tracing configuration consumed by :func:`mcpkit.utils.telemetry.configure_telemetry`.

    Spans are exported over OTLP when ``otlp_endpoint`` is set and printed to
    the console otherwise.  ``service_name`` defaults to the server name.
    """

    enabled: bool = False
    otlp_endpoint: str | None = None
    service_name: str | None = None


class ServerSettings(BaseModel):
    """Everything needed to stand up and serve an :class:`~mcpkit.server.MCPServer`."""

    name: str = Field(default="mcpkit-server", min_length=1)
    version: str = "0.1.0"
    title: str | None = None
    instructions: str | None = None
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    path: str = Field(default="/mcp", pattern=r"^/")
    log_level: LogLevel = "INFO"
    rich_logging: bool = True
    capabilities: ServerCapabilities = Field(
        default_factory=lambda: ServerCapabilities(tools=ToolsCapability())
    )
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> ServerSettings:
        """Return a copy with ``MCPKIT_*`` environment variables applied.

        Raises:
            SettingsError: If an override does not validate.
        """
        env = os.environ if environ is None else environ
        updates: dict[str, Any] = {}
        for var, field_name in _ENV_OVERRIDES.items():
            if var in env:
                updates[field_name] = env[var]
        if not updates:
            return self
        data = self.model_dump()
        data.update(updates)
        if "log_level" in updates:
            data["log_level"] = str(updates["log_level"]).upper()
        try:
            return ServerSettings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(f"Invalid environment override: {exc}") from exc


class SettingsLoader:
    """Load and validate a settings YAML file into :class:`ServerSettings`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ServerSettings:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing.  An empty file
        yields the defaults.

        Raises:
            SettingsError: On read errors, YAML parse errors or validation
                failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise SettingsError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SettingsError("Settings YAML must be a mapping")

        try:
            return ServerSettings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(str(exc)) from exc


def load_settings(path: str | Path | None = None, *, apply_env: bool = True) -> ServerSettings:
    """Load settings from *path* (or defaults), then apply environment overrides."""
    settings = SettingsLoader(Path(path)).load() if path is not None else ServerSettings()
    return settings.with_env_overrides() if apply_env else settings
