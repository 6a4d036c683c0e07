import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from gutensync.engine.constants import NOTION_ICONS_URL_PREFIX


class Settings(BaseSettings):
    # Toggles nest at most this deep, deeper toggle children are dropped
    toggle_max_depth: int = 2
    # Callout icons under this prefix are hotlinked instead of imported
    notion_icons_url_prefix: str = NOTION_ICONS_URL_PREFIX

    oembed_endpoint: str = "https://noembed.com/embed"
    oembed_timeout_seconds: float = 10.0

    attachments_dir: Path = Path("attachments")
    attachments_public_url: str = "/attachments"
    attachment_download_timeout_seconds: float = 30.0
    attachment_max_download_size: int = 50 * 1024 * 1024  # 50MB default

    log_level: str = "INFO"
    log_dir: Path | None = None

    model_config = SettingsConfigDict(
        env_prefix="GUTENSYNC_",
        env_file=[os.getenv("ENV_FILE", ""), ".env"],
        extra="ignore",
        env_nested_delimiter="__",
    )
