from pathlib import Path

from gutensync.engine.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("ENV_FILE", "")
        settings = Settings(_env_file=None)
        assert settings.toggle_max_depth == 2
        assert settings.notion_icons_url_prefix == "https://www.notion.so/icons/"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("GUTENSYNC_TOGGLE_MAX_DEPTH", "3")
        monkeypatch.setenv("GUTENSYNC_ATTACHMENTS_DIR", "/tmp/media")
        settings = Settings(_env_file=None)
        assert settings.toggle_max_depth == 3
        assert settings.attachments_dir == Path("/tmp/media")
