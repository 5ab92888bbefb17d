import os

from gsm import platform_utils


def test_get_config_dir_env_override(monkeypatch, tmp_path):
    monkeypatch.setenv("GSM_CONFIG_DIR", str(tmp_path / "custom"))
    assert platform_utils.get_config_dir() == str(tmp_path / "custom")


def test_get_config_dir_default(monkeypatch, tmp_path):
    monkeypatch.delenv("GSM_CONFIG_DIR", raising=False)
    monkeypatch.setattr(platform_utils, "get_home_dir", lambda: str(tmp_path))
    assert platform_utils.get_config_dir() == os.path.join(str(tmp_path), ".gsm")


def test_get_config_path(monkeypatch, tmp_path):
    monkeypatch.setenv("GSM_CONFIG_DIR", str(tmp_path))
    assert platform_utils.get_config_path() == os.path.join(str(tmp_path), "config.json")


def _no_home(cls):
    raise RuntimeError("Could not determine home directory.")


def test_get_home_dir_falls_back_to_cwd(monkeypatch, tmp_path):
    monkeypatch.setattr(platform_utils.os.path, "expanduser", lambda path: path)
    monkeypatch.setattr(platform_utils.Path, "home", classmethod(_no_home))
    monkeypatch.chdir(tmp_path)
    assert platform_utils.get_home_dir() == os.getcwd()
