import os

from sshdeck import platform_utils


def test_get_config_dir_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setattr(platform_utils, "is_windows", lambda: False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "conf"))
    expected = os.path.join(str(tmp_path / "conf"), "sshdeck")
    assert platform_utils.get_config_dir() == expected


def test_get_config_dir_defaults_to_home(monkeypatch, tmp_path):
    monkeypatch.setattr(platform_utils, "is_windows", lambda: False)
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    expected = os.path.join(str(tmp_path), ".config", "sshdeck")
    assert platform_utils.get_config_dir() == expected


def test_get_config_dir_windows_appdata(monkeypatch, tmp_path):
    monkeypatch.setattr(platform_utils, "is_windows", lambda: True)
    monkeypatch.setenv("APPDATA", str(tmp_path / "Roaming"))
    expected = os.path.join(str(tmp_path / "Roaming"), "sshdeck")
    assert platform_utils.get_config_dir() == expected


def test_get_ssh_dir_default(monkeypatch, tmp_path):
    monkeypatch.delenv("SSHDECK_SSH_DIR", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    expected = os.path.join(str(tmp_path), ".ssh")
    assert platform_utils.get_ssh_dir() == expected
    assert platform_utils.get_ssh_config_path() == os.path.join(expected, "config")


def test_get_ssh_dir_override(monkeypatch, tmp_path):
    override = tmp_path / "custom_ssh"
    monkeypatch.setenv("SSHDECK_SSH_DIR", str(override))
    assert platform_utils.get_ssh_dir() == str(override)


def test_is_windows(monkeypatch):
    monkeypatch.setattr(platform_utils.platform, "system", lambda: "Windows")
    assert platform_utils.is_windows() is True
    monkeypatch.setattr(platform_utils.platform, "system", lambda: "Linux")
    assert platform_utils.is_windows() is False
