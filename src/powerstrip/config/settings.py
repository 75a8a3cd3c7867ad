from __future__ import annotations

import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from powerstrip.transport import DEFAULT_PORT, DEFAULT_TIMEOUT, Transport

from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "POWERSTRIP_CONFIG"


class DeviceConfig(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    host: str | None = None
    device_id: str | None = None
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    transport: Transport = Transport.UDP


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    device: DeviceConfig = Field(default_factory=DeviceConfig)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def _toml_string(value: str) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    device = settings.device
    lines = [
        "# powerstrip configuration",
        "",
        "[device]",
    ]
    if device.host is not None:
        lines.append(f"host = {_toml_string(device.host)}")
    else:
        lines.append('# host = "192.168.1.50"')
    if device.device_id is not None:
        lines.append(f"device_id = {_toml_string(device.device_id)}")
    lines += [
        f"port = {device.port}",
        f"timeout = {device.timeout}",
        f"transport = {_toml_string(device.transport.value)}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
