import json

from sshdeck.config import CONFIG_VERSION, DEFAULT_DEBOUNCE_MS, DEFAULT_STATUS_TIMEOUT, Config


def test_missing_file_is_created_with_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("SSHDECK_SSH_DIR", str(tmp_path / "ssh"))
    config_file = tmp_path / "conf" / "config.json"

    cfg = Config(str(config_file))

    saved = json.loads(config_file.read_text())
    assert saved["config_version"] == CONFIG_VERSION
    assert cfg.get_setting("ssh_command") == "ssh"
    assert cfg.get_ssh_config_path() == str(tmp_path / "ssh" / "config")
    assert cfg.get_debounce_seconds() == DEFAULT_DEBOUNCE_MS / 1000.0


def test_old_config_is_replaced(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"ssh_command": "old-ssh"}))

    cfg = Config(str(config_file))

    assert (tmp_path / "config.json.bak").exists()
    assert cfg.get_setting("ssh_command") == "ssh"
    assert json.loads(config_file.read_text())["config_version"] == CONFIG_VERSION


def test_missing_keys_are_filled_in(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"config_version": CONFIG_VERSION, "key_debounce_ms": 250}))

    cfg = Config(str(config_file))

    assert cfg.get_debounce_seconds() == 0.25
    assert "status_timeout" in json.loads(config_file.read_text())


def test_corrupt_config_falls_back_to_defaults(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")

    cfg = Config(str(config_file))

    assert cfg.get_setting("config_version") == CONFIG_VERSION


def test_set_setting_is_saved(tmp_path):
    config_file = tmp_path / "config.json"
    cfg = Config(str(config_file))

    cfg.set_setting("ssh_config_path", "~/custom/config")

    assert json.loads(config_file.read_text())["ssh_config_path"] == "~/custom/config"
    assert Config(str(config_file)).get_setting("ssh_config_path") == "~/custom/config"


def test_invalid_debounce_uses_default(tmp_path):
    cfg = Config(str(tmp_path / "config.json"))
    cfg.config_data["key_debounce_ms"] = "fast"
    assert cfg.get_debounce_seconds() == DEFAULT_DEBOUNCE_MS / 1000.0

    cfg.config_data["key_debounce_ms"] = -5
    assert cfg.get_debounce_seconds() == 0.0


def test_string_config_version_is_coerced(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"config_version": str(CONFIG_VERSION), "ssh_command": "my-ssh"}))

    cfg = Config(str(config_file))

    assert cfg.get_setting("ssh_command") == "my-ssh"
    assert not (tmp_path / "config.json.bak").exists()


def test_non_numeric_config_version_is_regenerated(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"config_version": [1], "ssh_command": "my-ssh"}))

    cfg = Config(str(config_file))

    assert cfg.get_setting("ssh_command") == "ssh"
    assert (tmp_path / "config.json.bak").exists()


def test_status_timeout_falls_back_on_bad_value(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"config_version": CONFIG_VERSION, "status_timeout": "soon"}))

    cfg = Config(str(config_file))

    assert cfg.get_status_timeout() == DEFAULT_STATUS_TIMEOUT
    cfg.config_data["status_timeout"] = "2.5"
    assert cfg.get_status_timeout() == 2.5
    cfg.config_data["status_timeout"] = -1
    assert cfg.get_status_timeout() == 0.0


def test_ssh_config_path_follows_ssh_dir_override(tmp_path, monkeypatch):
    config_file = tmp_path / "config.json"
    monkeypatch.setenv("SSHDECK_SSH_DIR", str(tmp_path / "first"))
    Config(str(config_file))

    monkeypatch.setenv("SSHDECK_SSH_DIR", str(tmp_path / "second"))
    cfg = Config(str(config_file))

    assert json.loads(config_file.read_text())["ssh_config_path"] is None
    assert cfg.get_ssh_config_path() == str(tmp_path / "second" / "config")
