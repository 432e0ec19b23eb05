from pathlib import Path

from opskins_manager.core.config import Settings, default_data_dir
from opskins_manager.core.utils import mask_key, to_number


def test_settings_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("OPSKINS_API_KEY", "abc")
    monkeypatch.setenv("OPSKINS_APP_ID", "570")
    monkeypatch.setenv("OPSKINS_CONTEXT_ID", "6")
    monkeypatch.setenv("OPSKINS_TIMEOUT", "2.5")
    monkeypatch.setenv("OPSKINS_DATA_DIR", str(tmp_path))
    s = Settings.from_env()
    assert s.api_key == "abc"
    assert (s.app_id, s.context_id) == (570, 6)
    assert s.timeout == 2.5
    assert s.resolved_data_dir() == tmp_path


def test_settings_defaults(monkeypatch):
    for name in ("OPSKINS_APP_ID", "OPSKINS_CONTEXT_ID", "OPSKINS_DATA_DIR"):
        monkeypatch.delenv(name, raising=False)
    s = Settings()
    assert (s.app_id, s.context_id) == (730, 2)
    assert s.resolved_data_dir() == default_data_dir()
    assert isinstance(default_data_dir(), Path)


def test_mask_key():
    assert mask_key("abcdef123456") == "********3456"
    assert mask_key("abc") == "***"
    assert mask_key(None) == ""


def test_to_number():
    assert to_number("125") == 125
    assert to_number("1.5") == 1.5
    assert to_number(7) == 7
