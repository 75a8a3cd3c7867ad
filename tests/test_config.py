from __future__ import annotations

import pytest

from powerstrip.config import (
    DeviceConfig,
    Settings,
    get_settings,
    load_settings,
    render_settings_toml,
    resolve_config_path,
    write_settings,
)
from powerstrip.transport import Transport


def test_defaults():
    device = Settings().device
    assert device.host is None
    assert device.port == 9999
    assert device.timeout == 2.0
    assert device.transport is Transport.UDP


def test_config_roundtrip(tmp_path):
    path = tmp_path / "config.toml"
    settings = Settings(
        device=DeviceConfig(
            host="192.168.40.93", device_id="ABC123", timeout=0.5, transport="tcp"
        )
    )
    write_settings(settings, path)

    assert load_settings(path) == settings


def test_render_comments_out_missing_host():
    text = render_settings_toml(Settings())
    assert '# host = "192.168.1.50"' in text
    assert "device_id" not in text


def test_invalid_value_is_value_error(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[device]\nport = 70000\n")
    with pytest.raises(ValueError, match="Invalid config file"):
        load_settings(path)


def test_invalid_toml_is_value_error(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[device\n")
    with pytest.raises(ValueError, match="Invalid TOML"):
        load_settings(path)


def test_env_var_must_point_to_existing_file(tmp_path, monkeypatch):
    monkeypatch.setenv("POWERSTRIP_CONFIG", str(tmp_path / "missing.toml"))
    with pytest.raises(FileNotFoundError):
        resolve_config_path()
    _path, exists = resolve_config_path(allow_missing=True)
    assert exists is False


def test_get_settings_reads_env_file(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text('[device]\nhost = "10.0.0.7"\n')
    monkeypatch.setenv("POWERSTRIP_CONFIG", str(path))
    get_settings.cache_clear()

    assert get_settings().device.host == "10.0.0.7"
